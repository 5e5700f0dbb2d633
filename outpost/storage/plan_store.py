"""Plan store for Outpost.

Holds the planning state of each region: one PlacementPlan per structure
category. Plans are replaced wholesale when re-planned; the only in-place
change is the realized count, which the orchestration layer bumps as
structures get built.

The whole store can be written to and read from a JSON file.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from outpost.core.plan import PlacementPlan, RegionPlans
from outpost.core.structures import StructureCategory
from outpost.core.types import RegionName
from outpost.errors import PlanStoreError
from outpost.logging_config import log_plan, log_storage

logger = logging.getLogger(__name__)

_REGIONS_ADAPTER = TypeAdapter(dict[str, RegionPlans])


class PlanStore:
    """In-memory planning state keyed by region.

    Usage:
        store = PlanStore()
        store.save_plan(region, StructureCategory.LINK, plan)
        store.mark_realized(region, StructureCategory.LINK, 1)
        store.save(Path("data/plans.json"))
    """

    def __init__(self, regions: dict[RegionName, RegionPlans] | None = None):
        self._regions: dict[RegionName, RegionPlans] = dict(regions or {})

    @property
    def regions(self) -> list[RegionName]:
        """Regions that have any planning state."""
        return list(self._regions)

    def get_region(self, region: RegionName) -> RegionPlans:
        """Planning state for a region (empty if never planned)."""
        return self._regions.get(region) or RegionPlans(region=region)

    def get_plan(self, region: RegionName, category: StructureCategory) -> PlacementPlan | None:
        """Plan for one category, or None if not planned yet."""
        return self.get_region(region).get(category)

    def save_plan(
        self,
        region: RegionName,
        category: StructureCategory,
        plan: PlacementPlan,
    ) -> None:
        """Replace the plan for a category."""
        self._regions[region] = self.get_region(region).with_plan(category, plan)
        log_plan(logger, region, category.value, len(plan.positions))

    def mark_realized(
        self,
        region: RegionName,
        category: StructureCategory,
        count: int,
    ) -> PlacementPlan:
        """Record how many planned positions now hold a structure or site.

        Raises:
            PlanStoreError: No plan exists for the category
        """
        plan = self.get_plan(region, category)
        if plan is None:
            raise PlanStoreError(f"No {category.value} plan for region {region}")
        updated = plan.with_count(count)
        self._regions[region] = self.get_region(region).with_plan(category, updated)
        return updated

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def save(self, path: Path | str) -> Path:
        """Write every region's plans to a JSON file."""
        out_path = Path(path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        payload = _REGIONS_ADAPTER.dump_json(dict(self._regions), indent=2)
        try:
            out_path.write_bytes(payload)
        except OSError as e:
            log_storage(logger, "save", out_path, success=False, details=str(e))
            raise PlanStoreError(f"Cannot write plans to {out_path}: {e}") from e
        log_storage(logger, "save", out_path, details=f"{len(self._regions)} regions")
        return out_path

    @classmethod
    def load(cls, path: Path | str) -> PlanStore:
        """Read plans previously written by `save`.

        Raises:
            PlanStoreError: File unreadable or not a valid plan document
        """
        in_path = Path(path)
        try:
            raw = in_path.read_bytes()
        except OSError as e:
            log_storage(logger, "load", in_path, success=False, details=str(e))
            raise PlanStoreError(f"Cannot read plans from {in_path}: {e}") from e
        try:
            regions = _REGIONS_ADAPTER.validate_json(raw)
        except ValidationError as e:
            log_storage(logger, "load", in_path, success=False, details="invalid document")
            raise PlanStoreError(f"Invalid plan file {in_path}: {e}") from e

        log_storage(logger, "load", in_path, details=f"{len(regions)} regions")
        return cls({RegionName(name): plans for name, plans in regions.items()})
