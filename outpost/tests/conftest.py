"""Shared test fixtures for Outpost."""

import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from outpost.adapters import GridWorld
from outpost.core import Position, RegionName
from outpost.services import ObservationCache, PlacementPlanner


REGION = RegionName("W1N1")


@pytest.fixture
def temp_data_dir() -> Path:
    """Create a temporary data directory for tests."""
    with tempfile.TemporaryDirectory(prefix="outpost_test_") as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def region() -> RegionName:
    """Name of the region every world fixture holds."""
    return REGION


@pytest.fixture
def world() -> GridWorld:
    """An open 50x50 region with no walls and nothing built."""
    w = GridWorld(tick=0)
    w.add_region(REGION)
    return w


@pytest.fixture
def spy_world(world: GridWorld) -> MagicMock:
    """The open world wrapped so query calls can be counted."""
    return MagicMock(wraps=world)


@pytest.fixture
def cache(spy_world: MagicMock, world: GridWorld) -> ObservationCache:
    """Cache with default TTLs, reading through the spy and ticking with the world."""
    return ObservationCache(spy_world, world.now)


@pytest.fixture
def planner(cache: ObservationCache) -> PlacementPlanner:
    """Placement planner on a default 50x50 grid."""
    return PlacementPlanner(cache)


@pytest.fixture
def center() -> Position:
    """Middle of a 50x50 region."""
    return Position(25, 25)
