"""Tests for planning models."""

import pytest

from outpost.core import (
    PlacementCandidate,
    PlacementPlan,
    Position,
    RegionAnchors,
    RegionName,
    RegionPlans,
    StructureCategory,
)


class TestPlacementPlan:
    """Tests for PlacementPlan."""

    def test_defaults(self):
        """A new plan is planned with nothing realized."""
        plan = PlacementPlan(positions=(Position(1, 1),))
        assert plan.planned
        assert plan.count == 0

    def test_with_count_returns_new_plan(self):
        """Updating the count leaves the original alone."""
        plan = PlacementPlan(positions=(Position(1, 1), Position(2, 2)))
        updated = plan.with_count(1)
        assert updated.count == 1
        assert plan.count == 0
        assert updated.positions == plan.positions

    def test_remaining(self):
        """Remaining positions skip the realized prefix."""
        plan = PlacementPlan(positions=(Position(1, 1), Position(2, 2), Position(3, 3)), count=1)
        assert plan.remaining == (Position(2, 2), Position(3, 3))

    def test_positions_accept_lists(self):
        """Positions validate from plain pairs."""
        plan = PlacementPlan.model_validate({"positions": [[4, 5]]})
        assert plan.positions == (Position(4, 5),)

    def test_is_frozen(self):
        """Plans are immutable."""
        plan = PlacementPlan()
        with pytest.raises(Exception):
            plan.count = 3


class TestRegionPlans:
    """Tests for RegionPlans."""

    def test_empty(self):
        """A new region has no plans."""
        plans = RegionPlans(region=RegionName("W1N1"))
        assert plans.get(StructureCategory.LINK) is None

    def test_with_plan_replaces(self):
        """Setting a plan replaces the previous one for that category."""
        plans = RegionPlans(region=RegionName("W1N1"))
        first = PlacementPlan(positions=(Position(1, 1),))
        second = PlacementPlan(positions=(Position(2, 2),))

        plans = plans.with_plan(StructureCategory.LINK, first)
        plans = plans.with_plan(StructureCategory.LINK, second)

        assert plans.get(StructureCategory.LINK) == second
        assert len(plans.plans) == 1


class TestSmallModels:
    """Tests for candidates and anchors."""

    def test_candidate_fields(self):
        """Candidate pairs a position with a score."""
        candidate = PlacementCandidate(Position(3, 3), 10)
        assert candidate.position == Position(3, 3)
        assert candidate.score == 10

    def test_anchors_default_empty(self):
        """Anchors default to nothing known."""
        anchors = RegionAnchors(region=RegionName("W1N1"))
        assert anchors.level == 0
        assert anchors.spawn is None
        assert anchors.storage is None
        assert anchors.controller is None
        assert anchors.sources == ()
