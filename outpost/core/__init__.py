"""Core domain models for Outpost.

Pure models with no I/O. All pydantic models are frozen and use
transformation methods for updates.

Usage:
    from outpost.core import Position, Terrain, StructureCategory, PlacementPlan
"""

# Types
from .types import (
    RegionName,
    SiteId,
    Position,
    Rect,
)

# Terrain
from .terrain import (
    Terrain,
    TerrainProperties,
    TERRAIN_DEFAULTS,
    is_wall,
    from_symbol,
)

# Structures and occupants
from .structures import (
    StructureCategory,
    TRAVERSABLE,
    COEXISTS_WITH_TRAVERSABLE,
    OccupantKind,
    StructureRecord,
    ConstructionSite,
    Occupant,
    SiteInventory,
)

# Planning
from .plan import (
    PlacementCandidate,
    PlacementPlan,
    RegionPlans,
    RegionAnchors,
)

__all__ = [
    # Types
    "RegionName",
    "SiteId",
    "Position",
    "Rect",
    # Terrain
    "Terrain",
    "TerrainProperties",
    "TERRAIN_DEFAULTS",
    "is_wall",
    "from_symbol",
    # Structures
    "StructureCategory",
    "TRAVERSABLE",
    "COEXISTS_WITH_TRAVERSABLE",
    "OccupantKind",
    "StructureRecord",
    "ConstructionSite",
    "Occupant",
    "SiteInventory",
    # Planning
    "PlacementCandidate",
    "PlacementPlan",
    "RegionPlans",
    "RegionAnchors",
]
