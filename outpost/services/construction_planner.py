"""Construction planner for Outpost.

Turns region anchors into placement plans, one structure category at a
time, by calling the placement search from a fixed sequence of anchors.
Each category's plan is written to the plan store, replacing any previous
plan for that category.

Degraded input never raises: a missing anchor skips its stage, a failed
search drops its slot, and the resulting plan is simply shorter.
"""

from __future__ import annotations

import logging

from outpost.core.plan import PlacementPlan, RegionAnchors, RegionPlans
from outpost.core.structures import StructureCategory
from outpost.core.types import Position
from outpost.storage import PlanStore

from .catalog import StructureCatalog
from .placement import PlacementPlanner, SearchProfile

logger = logging.getLogger(__name__)

# Towers and storage keep one extra tile away from the region edge
_INNER_PROFILE = SearchProfile(margin=2)
_TOWER_PROFILE = SearchProfile(margin=2, distance_preference="centered")
_SECOND_TOWER_PROFILE = SearchProfile(margin=2, distance_preference="centered", min_spacing=3)

TOWER_MIN_LEVEL = 3
SECOND_TOWER_MIN_LEVEL = 5
STORAGE_MIN_LEVEL = 4


class ConstructionPlanner:
    """Sequences placement searches per structure category.

    Plans are not deduplicated within a batch. Anchors are assumed to sit far
    enough apart that their bands do not compete for the same tiles.
    """

    def __init__(
        self,
        placement: PlacementPlanner,
        store: PlanStore,
        catalog: StructureCatalog | None = None,
    ):
        """Initialize ConstructionPlanner.

        Args:
            placement: Single-tile search
            store: Where finished plans are written
            catalog: Level caps (defaults to the packaged table)
        """
        self._placement = placement
        self._store = store
        self._catalog = catalog or StructureCatalog()

    @property
    def store(self) -> PlanStore:
        """Plan store receiving the plans."""
        return self._store

    # -------------------------------------------------------------------------
    # Region pass
    # -------------------------------------------------------------------------

    def plan_region(self, anchors: RegionAnchors, force: bool = False) -> RegionPlans:
        """Plan every supported category that is not planned yet.

        Storage goes first so the link planner can anchor on its position.

        Args:
            anchors: Region reference tiles and level
            force: Re-plan categories that already have a plan

        Returns:
            The region's planning state after the pass
        """
        stages = (
            (StructureCategory.STORAGE, self.plan_storage),
            (StructureCategory.TOWER, self.plan_towers),
            (StructureCategory.LINK, self.plan_links),
        )
        for category, stage in stages:
            existing = self._store.get_plan(anchors.region, category)
            if existing is not None and existing.planned and not force:
                logger.debug(f"Skipping {category.value} in {anchors.region}: already planned")
                continue
            stage(anchors)
        return self._store.get_region(anchors.region)

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    def plan_links(self, anchors: RegionAnchors) -> PlacementPlan | None:
        """Plan links: storage (or spawn), then controller, then sources.

        Returns:
            The saved plan, or None when the level allows no links
        """
        region = anchors.region
        max_links = self._catalog.max_count(StructureCategory.LINK, anchors.level)
        if max_links == 0:
            return None

        search = self._placement.find_position
        links: list[Position] = []

        storage = self._storage_anchor(anchors)
        first = None
        if storage is not None:
            first = search(region, storage, 1, 2)
        elif anchors.spawn is not None:
            first = search(region, anchors.spawn, 2, 3)
        if first is not None:
            links.append(first)

        if max_links >= 2 and anchors.controller is not None:
            controller_link = search(region, anchors.controller, 1, 3)
            if controller_link is not None:
                links.append(controller_link)

        if max_links >= 3:
            for source in anchors.sources:
                if len(links) >= max_links:
                    break
                source_link = search(region, source, 1, 2)
                if source_link is not None:
                    links.append(source_link)

        return self._save(anchors, StructureCategory.LINK, links)

    def plan_towers(self, anchors: RegionAnchors) -> PlacementPlan | None:
        """Plan towers: one near the spawn, a second near the region center.

        Returns:
            The saved plan, or None below tower level or without a spawn
        """
        if anchors.level < TOWER_MIN_LEVEL or anchors.spawn is None:
            return None

        region = anchors.region
        max_towers = self._catalog.max_count(StructureCategory.TOWER, anchors.level)
        towers: list[Position] = []

        first = self._placement.find_position(region, anchors.spawn, 3, 5, _TOWER_PROFILE)
        if first is not None:
            towers.append(first)

        if max_towers >= 2 and anchors.level >= SECOND_TOWER_MIN_LEVEL:
            grid = self._placement.grid
            center = Position(grid.width // 2, grid.height // 2)
            second = self._placement.find_position(
                region, center, 5, 10, _SECOND_TOWER_PROFILE, avoid=towers
            )
            if second is not None:
                towers.append(second)

        return self._save(anchors, StructureCategory.TOWER, towers)

    def plan_storage(self, anchors: RegionAnchors) -> PlacementPlan | None:
        """Plan a single storage near the spawn.

        Returns:
            The saved plan (possibly empty), or None below storage level or
            without a spawn
        """
        if anchors.level < STORAGE_MIN_LEVEL or anchors.spawn is None:
            return None

        found = self._placement.find_position(
            anchors.region, anchors.spawn, 2, 5, _INNER_PROFILE
        )
        if found is None:
            logger.info(f"Could not find suitable storage position in region {anchors.region}")
        return self._save(anchors, StructureCategory.STORAGE, [found] if found else [])

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _storage_anchor(self, anchors: RegionAnchors) -> Position | None:
        """Built storage if any, otherwise the planned storage tile."""
        if anchors.storage is not None:
            return anchors.storage
        plan = self._store.get_plan(anchors.region, StructureCategory.STORAGE)
        if plan is not None and plan.positions:
            return plan.positions[0]
        return None

    def _save(
        self,
        anchors: RegionAnchors,
        category: StructureCategory,
        positions: list[Position],
    ) -> PlacementPlan:
        plan = PlacementPlan(planned=True, positions=tuple(positions), count=0)
        self._store.save_plan(anchors.region, category, plan)
        return plan
