"""Observation cache for Outpost.

Memoizes the expensive world queries the planner depends on. Each query
kind has its own time-to-live and entries of different kinds never
invalidate one another.

Occupancy is special: a region holds one sub-entry per tile ever looked
at, but freshness is judged by a single region-wide gate timestamp. When
the gate expires, every cached tile of that region is dropped together
and the gate restarts from the current tick.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple

from outpost.adapters.world_query import Clock, WorldQuery
from outpost.config import CacheSettings
from outpost.core.structures import (
    Occupant,
    SiteInventory,
    StructureCategory,
    StructureRecord,
)
from outpost.core.types import Position, RegionName
from outpost.logging_config import log_cache

logger = logging.getLogger(__name__)

StructuresByType = dict[StructureCategory, tuple[StructureRecord, ...]]
PlacedKey = tuple[Position, StructureCategory]


class QueryKind(Enum):
    """The kinds of observation the cache memoizes."""

    STRUCTURES = "structures"
    SITES = "sites"
    OCCUPANCY = "occupancy"


class CacheKey(NamedTuple):
    """Composite cache key.

    `tile` is only set for occupancy sub-entries. The occupancy gate for a
    region lives under the key with tile=None.
    """

    region: RegionName
    kind: QueryKind
    tile: Position | None = None


@dataclass
class CacheEntry:
    """A memoized value and the world tick it was computed at."""

    value: Any
    computed_at: int


class ObservationCache:
    """Bounded-staleness memo of world observations.

    Single-threaded by assumption: the whole planning pass for a region runs
    within one tick, so no locking is done. Within one staleness window the
    same stored object is returned on every read.
    """

    def __init__(
        self,
        world: WorldQuery,
        clock: Clock,
        settings: CacheSettings | None = None,
    ):
        """Initialize ObservationCache.

        Args:
            world: Source of truth, queried only when an entry is missing or stale
            clock: Returns the current world tick
            settings: TTLs per query kind (defaults: 50 / 20 / 100)
        """
        self._world = world
        self._clock = clock
        self._settings = settings or CacheSettings()
        self._entries: dict[CacheKey, CacheEntry] = {}

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def world(self) -> WorldQuery:
        """The world this cache observes."""
        return self._world

    @property
    def settings(self) -> CacheSettings:
        """TTL settings in use."""
        return self._settings

    def ttl(self, kind: QueryKind) -> int:
        """Time-to-live for a query kind."""
        if kind is QueryKind.STRUCTURES:
            return self._settings.ttl_structures
        if kind is QueryKind.SITES:
            return self._settings.ttl_sites
        return self._settings.ttl_occupancy

    def __len__(self) -> int:
        """Number of stored entries, occupancy gates included."""
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def entry(self, key: CacheKey) -> CacheEntry | None:
        """Peek at an entry without refreshing it."""
        return self._entries.get(key)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_structures_by_type(self, region: RegionName) -> StructuresByType:
        """Built structures grouped by category, in world order within each group."""
        key = CacheKey(region, QueryKind.STRUCTURES)
        now = self._clock()
        entry = self._entries.get(key)
        if entry is not None and self._is_fresh(entry, QueryKind.STRUCTURES, now):
            return entry.value

        grouped: dict[StructureCategory, list[StructureRecord]] = {}
        for record in self._world.find_structures(region):
            grouped.setdefault(record.category, []).append(record)
        value = {category: tuple(records) for category, records in grouped.items()}

        self._entries[key] = CacheEntry(value=value, computed_at=now)
        log_cache(
            logger, now, QueryKind.STRUCTURES.value, "refresh", region,
            f"{sum(len(v) for v in value.values())} structures",
        )
        return value

    def get_construction_sites(self, region: RegionName) -> SiteInventory:
        """All construction sites in the region, with count and ids."""
        key = CacheKey(region, QueryKind.SITES)
        now = self._clock()
        entry = self._entries.get(key)
        if entry is not None and self._is_fresh(entry, QueryKind.SITES, now):
            return entry.value

        value = SiteInventory(sites=tuple(self._world.find_construction_sites(region)))
        self._entries[key] = CacheEntry(value=value, computed_at=now)
        log_cache(logger, now, QueryKind.SITES.value, "refresh", region, f"{value.count} sites")
        return value

    def get_occupancy(self, region: RegionName, tile: Position) -> tuple[Occupant, ...]:
        """Occupants of one tile, gated by the region-wide occupancy timestamp."""
        now = self._clock()
        gate_key = CacheKey(region, QueryKind.OCCUPANCY)
        gate = self._entries.get(gate_key)

        if gate is None or not self._is_fresh(gate, QueryKind.OCCUPANCY, now):
            dropped = self._drop_occupancy(region) if gate is not None else 0
            self._entries[gate_key] = CacheEntry(value=None, computed_at=now)
            log_cache(
                logger, now, QueryKind.OCCUPANCY.value, "gate", region,
                f"dropped {dropped} tiles",
            )

        key = CacheKey(region, QueryKind.OCCUPANCY, tile)
        entry = self._entries.get(key)
        if entry is not None:
            return entry.value

        value = tuple(self._world.look_at(region, tile))
        self._entries[key] = CacheEntry(value=value, computed_at=now)
        return value

    def has_blocking_occupant(
        self,
        region: RegionName,
        tile: Position,
        candidate: StructureCategory,
    ) -> bool:
        """Check if anything on the tile prevents building `candidate` there.

        A road may go on top of a rampart; every other occupied tile blocks.
        """
        return any(occupant.blocks(candidate) for occupant in self.get_occupancy(region, tile))

    def structure_map(self, region: RegionName) -> frozenset[PlacedKey]:
        """(position, category) pairs of every built structure."""
        return frozenset(
            (record.position, record.category)
            for records in self.get_structures_by_type(region).values()
            for record in records
        )

    def site_map(self, region: RegionName) -> frozenset[PlacedKey]:
        """(position, category) pairs of every construction site."""
        return frozenset(
            (site.position, site.category)
            for site in self.get_construction_sites(region).sites
        )

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    def clear_all(self) -> None:
        """Discard every entry of every kind in every region."""
        count = len(self._entries)
        self._entries.clear()
        logger.warning(f"All observation caches cleared ({count} entries)")

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _is_fresh(self, entry: CacheEntry, kind: QueryKind, now: int) -> bool:
        return now - entry.computed_at < self.ttl(kind)

    def _drop_occupancy(self, region: RegionName) -> int:
        stale = [
            key for key in self._entries
            if key.region == region
            and key.kind is QueryKind.OCCUPANCY
            and key.tile is not None
        ]
        for key in stale:
            del self._entries[key]
        return len(stale)
