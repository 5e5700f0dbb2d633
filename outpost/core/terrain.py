"""Terrain types for Outpost.

Terrain is fixed for the lifetime of a region, so it is never cached
under a TTL: the planner reads it straight from the world query.
"""

from __future__ import annotations

from enum import Enum
from typing import TypedDict


class Terrain(Enum):
    """Per-tile terrain classification."""

    PLAIN = "plain"
    SWAMP = "swamp"
    WALL = "wall"


class TerrainProperties(TypedDict, total=False):
    """Properties for a terrain type."""

    buildable: bool
    symbol: str


TERRAIN_DEFAULTS: dict[Terrain, TerrainProperties] = {
    Terrain.PLAIN: {
        "buildable": True,
        "symbol": ".",
    },
    Terrain.SWAMP: {
        "buildable": True,  # Slow to cross, but structures can go here
        "symbol": "~",
    },
    Terrain.WALL: {
        "buildable": False,
        "symbol": "#",
    },
}

_SYMBOL_LOOKUP: dict[str, Terrain] = {
    props["symbol"]: terrain for terrain, props in TERRAIN_DEFAULTS.items()
}


def is_wall(terrain: Terrain) -> bool:
    """Check if terrain is a natural wall."""
    return not TERRAIN_DEFAULTS.get(terrain, {}).get("buildable", True)


def from_symbol(symbol: str) -> Terrain | None:
    """Parse a layout symbol, or None if it is not a terrain symbol."""
    return _SYMBOL_LOOKUP.get(symbol)
