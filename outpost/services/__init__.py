"""Stateful services for Outpost."""

from .observation_cache import (
    ObservationCache,
    QueryKind,
    CacheKey,
    CacheEntry,
)
from .placement import (
    PlacementPlanner,
    SearchProfile,
    DEFAULT_PROFILE,
)
from .catalog import StructureCatalog
from .construction_planner import ConstructionPlanner

__all__ = [
    # Observation Cache
    "ObservationCache",
    "QueryKind",
    "CacheKey",
    "CacheEntry",
    # Placement
    "PlacementPlanner",
    "SearchProfile",
    "DEFAULT_PROFILE",
    # Catalog
    "StructureCatalog",
    # Construction Planner
    "ConstructionPlanner",
]
