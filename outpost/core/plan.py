"""Planning models for Outpost.

A PlacementPlan is the durable output of a planning pass. Plans are
replaced wholesale on re-planning; only `count` changes in between, as
structures actually get built.
"""

from __future__ import annotations

from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field

from .structures import StructureCategory
from .types import Position, RegionName


class PlacementCandidate(NamedTuple):
    """A tile under consideration during a single search."""

    position: Position
    score: float


class PlacementPlan(BaseModel):
    """Chosen tiles for one structure category in one region."""

    model_config = ConfigDict(frozen=True)

    planned: bool = True
    positions: tuple[Position, ...] = ()
    count: int = 0  # Realized so far (built or under construction)

    @property
    def remaining(self) -> tuple[Position, ...]:
        """Positions not yet realized, in plan order."""
        return self.positions[self.count:]

    def with_count(self, count: int) -> PlacementPlan:
        """Return a new plan with an updated realized count."""
        return self.model_copy(update={"count": count})


class RegionPlans(BaseModel):
    """Persisted planning state for one region, keyed by category."""

    model_config = ConfigDict(frozen=True)

    region: RegionName
    plans: dict[StructureCategory, PlacementPlan] = Field(default_factory=dict)

    def get(self, category: StructureCategory) -> PlacementPlan | None:
        """Get the plan for a category, if one exists."""
        return self.plans.get(category)

    def with_plan(self, category: StructureCategory, plan: PlacementPlan) -> RegionPlans:
        """Return new state with the category's plan replaced."""
        return self.model_copy(update={"plans": {**self.plans, category: plan}})


class RegionAnchors(BaseModel):
    """Reference tiles for a region, supplied by the orchestration layer.

    Everything is optional: a young region may have no storage, and a
    region without a spawn cannot be planned at all.
    """

    model_config = ConfigDict(frozen=True)

    region: RegionName
    level: int = 0
    spawn: Position | None = None
    storage: Position | None = None
    controller: Position | None = None
    sources: tuple[Position, ...] = ()
