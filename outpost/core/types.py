"""Foundational types for Outpost.

This module defines the core types used throughout the system:
- Position: Tile coordinates (x, y)
- Rect: Rectangular regions for neighborhood searches
- Type aliases for domain identifiers
"""

from __future__ import annotations

from typing import NewType, NamedTuple

# Type aliases for domain identifiers
RegionName = NewType("RegionName", str)
SiteId = NewType("SiteId", str)


class Position(NamedTuple):
    """A tile coordinate in a region grid.

    Immutable and hashable, so it can key dicts and sets directly.
    Coordinates outside the grid are representable; callers decide
    whether a position is usable.
    """

    x: int
    y: int

    def distance_to(self, other: Position) -> int:
        """Calculate Manhattan distance to another position."""
        return abs(self.x - other.x) + abs(self.y - other.y)

    def neighborhood(self) -> list[Position]:
        """Get the 3x3 block centered on this position, including itself."""
        return Rect.around(self, 1).positions()

    def in_bounds(self, width: int, height: int) -> bool:
        """Check if position is within grid bounds (0 to width-1, 0 to height-1)."""
        return 0 <= self.x < width and 0 <= self.y < height

    def in_interior(self, width: int, height: int, margin: int = 1) -> bool:
        """Check if position is clear of a border `margin` tiles wide.

        With margin=1 on a 50x50 grid, usable coordinates run from 2 to 47.
        """
        return (
            margin < self.x < width - 1 - margin
            and margin < self.y < height - 1 - margin
        )


class Rect(NamedTuple):
    """A rectangular region for spatial searches.

    Coordinates are inclusive on all sides.
    """

    min_x: int
    min_y: int
    max_x: int
    max_y: int

    @classmethod
    def around(cls, center: Position, radius: int) -> Rect:
        """Create a rectangle centered on a position with given radius."""
        return cls(
            center.x - radius,
            center.y - radius,
            center.x + radius,
            center.y + radius,
        )

    def positions(self) -> list[Position]:
        """Get all positions within this rectangle.

        Ordered x-major: every y for the lowest x first, then the next x.
        """
        return [
            Position(x, y)
            for x in range(self.min_x, self.max_x + 1)
            for y in range(self.min_y, self.max_y + 1)
        ]

