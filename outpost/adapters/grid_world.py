"""In-memory world for tests and offline planning.

GridWorld holds a handful of regions, each a sparse terrain map plus
lists of structures and construction sites, and answers WorldQuery calls
against them. It also carries a tick counter usable as the cache clock.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from outpost.core.structures import (
    ConstructionSite,
    Occupant,
    OccupantKind,
    StructureCategory,
    StructureRecord,
)
from outpost.core.terrain import Terrain
from outpost.core.types import Position, RegionName, SiteId
from outpost.errors import UnknownRegionError


@dataclass
class RegionState:
    """Mutable contents of one region.

    Terrain is sparse: positions not in the map are plain.
    """

    width: int = 50
    height: int = 50
    terrain: dict[Position, Terrain] = field(default_factory=dict)
    structures: list[StructureRecord] = field(default_factory=list)
    sites: list[ConstructionSite] = field(default_factory=list)


class GridWorld:
    """A WorldQuery backed by plain Python containers."""

    def __init__(self, tick: int = 0):
        self._regions: dict[RegionName, RegionState] = {}
        self._tick = tick
        self._next_site = 0

    # -------------------------------------------------------------------------
    # Clock
    # -------------------------------------------------------------------------

    @property
    def tick(self) -> int:
        """Current world time."""
        return self._tick

    def now(self) -> int:
        """Clock callable for the observation cache."""
        return self._tick

    def advance(self, ticks: int = 1) -> int:
        """Move world time forward and return the new tick."""
        self._tick += ticks
        return self._tick

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    def add_region(self, region: RegionName, width: int = 50, height: int = 50) -> RegionState:
        """Create an empty, all-plain region."""
        state = RegionState(width=width, height=height)
        self._regions[region] = state
        return state

    def region(self, region: RegionName) -> RegionState:
        """Get a region's state."""
        try:
            return self._regions[region]
        except KeyError:
            raise UnknownRegionError(region) from None

    @property
    def regions(self) -> list[RegionName]:
        """Names of all regions."""
        return list(self._regions)

    def set_terrain(self, region: RegionName, pos: Position, terrain: Terrain) -> None:
        """Set terrain at a position (plain clears the entry)."""
        state = self.region(region)
        if terrain == Terrain.PLAIN:
            state.terrain.pop(pos, None)
        else:
            state.terrain[pos] = terrain

    def add_structure(self, region: RegionName, pos: Position, category: StructureCategory) -> StructureRecord:
        """Place a finished structure."""
        record = StructureRecord(position=pos, category=category)
        self.region(region).structures.append(record)
        return record

    def add_site(
        self,
        region: RegionName,
        pos: Position,
        category: StructureCategory,
        site_id: SiteId | None = None,
    ) -> ConstructionSite:
        """Place a construction site, generating an id if none is given."""
        if site_id is None:
            self._next_site += 1
            site_id = SiteId(f"site-{self._next_site}")
        site = ConstructionSite(id=site_id, position=pos, category=category)
        self.region(region).sites.append(site)
        return site

    def remove_at(self, region: RegionName, pos: Position) -> int:
        """Remove every structure and site at a position. Returns count removed."""
        state = self.region(region)
        before = len(state.structures) + len(state.sites)
        state.structures = [s for s in state.structures if s.position != pos]
        state.sites = [s for s in state.sites if s.position != pos]
        return before - len(state.structures) - len(state.sites)

    # -------------------------------------------------------------------------
    # WorldQuery
    # -------------------------------------------------------------------------

    def find_structures(self, region: RegionName) -> list[StructureRecord]:
        return list(self.region(region).structures)

    def find_construction_sites(self, region: RegionName) -> list[ConstructionSite]:
        return list(self.region(region).sites)

    def look_at(self, region: RegionName, tile: Position) -> list[Occupant]:
        state = self.region(region)
        occupants = [
            Occupant(kind=OccupantKind.STRUCTURE, category=s.category)
            for s in state.structures
            if s.position == tile
        ]
        occupants.extend(
            Occupant(kind=OccupantKind.CONSTRUCTION_SITE, category=s.category)
            for s in state.sites
            if s.position == tile
        )
        return occupants

    def terrain_at(self, region: RegionName, tile: Position) -> Terrain:
        state = self.region(region)
        # Off the edge of the map is solid
        if not tile.in_bounds(state.width, state.height):
            return Terrain.WALL
        return state.terrain.get(tile, Terrain.PLAIN)
