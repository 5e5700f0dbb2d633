"""Adapters between Outpost and the world it observes."""

from .world_query import Clock, WorldQuery
from .grid_world import GridWorld, RegionState
from .layout import load_layout, parse_layout

__all__ = [
    "Clock",
    "WorldQuery",
    "GridWorld",
    "RegionState",
    "load_layout",
    "parse_layout",
]
