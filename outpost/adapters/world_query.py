"""Boundary for world observation.

The world is owned by the simulation, not by Outpost. Everything the cache
knows about it comes through this interface, and each call is assumed to
cost O(region size).
"""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable

from outpost.core.structures import ConstructionSite, Occupant, StructureRecord
from outpost.core.terrain import Terrain
from outpost.core.types import Position, RegionName

# Returns the current world time in ticks
Clock = Callable[[], int]


@runtime_checkable
class WorldQuery(Protocol):
    """Read-only queries against the simulated world."""

    def find_structures(self, region: RegionName) -> list[StructureRecord]:
        """Return every built structure in the region."""

    def find_construction_sites(self, region: RegionName) -> list[ConstructionSite]:
        """Return every construction site in the region."""

    def look_at(self, region: RegionName, tile: Position) -> list[Occupant]:
        """Return the occupants of a single tile."""

    def terrain_at(self, region: RegionName, tile: Position) -> Terrain:
        """Classify a single tile's terrain."""
