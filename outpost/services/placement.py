"""Spatial placement search for Outpost.

Given an anchor tile and a Manhattan distance band, the planner scans the
square around the anchor and picks the best legal tile for a new structure.

A tile is legal when it is clear of the region border, not a wall, inside
the band, far enough from any tiles the caller asked to avoid, and has no
occupant according to the observation cache. Legal tiles are scored by how
open their 3x3 neighborhood is plus a distance bonus; the first tile with
the strictly highest score wins.

The planner does not remember its own picks. Two searches in the same batch
with nearby anchors can choose the same tile unless the caller passes the
earlier picks through `avoid` with a non-zero `min_spacing`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from outpost.config import GridSettings
from outpost.core.plan import PlacementCandidate
from outpost.core.terrain import is_wall
from outpost.core.types import Position, Rect, RegionName
from outpost.logging_config import log_placement

from .observation_cache import ObservationCache

logger = logging.getLogger(__name__)


class SearchProfile(BaseModel):
    """Tunable parts of a placement search.

    The defaults reproduce the plain search: 1-tile border, closer is
    better, no spacing from other picks.
    """

    model_config = ConfigDict(frozen=True)

    margin: int | None = Field(default=None, ge=0)  # None means the grid's margin
    distance_preference: Literal["nearest", "centered"] = "nearest"
    min_spacing: int = Field(default=0, ge=0)


DEFAULT_PROFILE = SearchProfile()


class PlacementPlanner:
    """Chooses tiles for new structures.

    Terrain is read straight from the world on every search; occupancy goes
    through the observation cache.
    """

    def __init__(self, cache: ObservationCache, grid: GridSettings | None = None):
        """Initialize PlacementPlanner.

        Args:
            cache: Observation cache used for occupancy look-ups
            grid: Region dimensions and default border margin
        """
        self._cache = cache
        self._grid = grid or GridSettings()

    @property
    def cache(self) -> ObservationCache:
        """The observation cache this planner reads through."""
        return self._cache

    @property
    def grid(self) -> GridSettings:
        """Grid dimensions in use."""
        return self._grid

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def find_position(
        self,
        region: RegionName,
        anchor: Position,
        min_range: int,
        max_range: int,
        profile: SearchProfile = DEFAULT_PROFILE,
        avoid: Iterable[Position] = (),
    ) -> Position | None:
        """Find the best tile within [min_range, max_range] of the anchor.

        Args:
            region: Region to search
            anchor: Tile the distance band is measured from
            min_range: Smallest allowed Manhattan distance (inclusive)
            max_range: Largest allowed Manhattan distance (inclusive)
            profile: Margin, distance preference and spacing rules
            avoid: Tiles the result must keep `profile.min_spacing` away from

        Returns:
            The chosen tile, or None if no tile qualifies
        """
        best = self.best_candidate(region, anchor, min_range, max_range, profile, avoid)
        found = best.position if best is not None else None
        log_placement(
            logger, region, tuple(anchor), tuple(found) if found else None,
            f"band=[{min_range},{max_range}]" + (f" score={best.score}" if best else ""),
        )
        return found

    def best_candidate(
        self,
        region: RegionName,
        anchor: Position,
        min_range: int,
        max_range: int,
        profile: SearchProfile = DEFAULT_PROFILE,
        avoid: Iterable[Position] = (),
    ) -> PlacementCandidate | None:
        """Highest-scoring candidate; ties go to the first one enumerated."""
        best: PlacementCandidate | None = None
        for candidate in self.candidates(region, anchor, min_range, max_range, profile, avoid):
            if best is None or candidate.score > best.score:
                best = candidate
        return best

    def candidates(
        self,
        region: RegionName,
        anchor: Position,
        min_range: int,
        max_range: int,
        profile: SearchProfile = DEFAULT_PROFILE,
        avoid: Iterable[Position] = (),
    ) -> Iterator[PlacementCandidate]:
        """Yield every legal tile with its score.

        Enumeration runs over the square of side 2*max_range+1 around the
        anchor, by dx then dy, starting at (-max_range, -max_range).
        """
        if max_range < 0 or min_range > max_range:
            return
        avoid = tuple(avoid)
        for tile in Rect.around(anchor, max_range).positions():
            if not self.is_legal(region, tile, anchor, min_range, max_range, profile, avoid):
                continue
            yield PlacementCandidate(
                position=tile,
                score=self.score(region, tile, anchor, min_range, max_range, profile),
            )

    # -------------------------------------------------------------------------
    # Rules
    # -------------------------------------------------------------------------

    def is_legal(
        self,
        region: RegionName,
        tile: Position,
        anchor: Position,
        min_range: int,
        max_range: int,
        profile: SearchProfile = DEFAULT_PROFILE,
        avoid: Iterable[Position] = (),
    ) -> bool:
        """Check every rejection rule for a single tile.

        Cheap checks come first so occupancy is only looked up for tiles
        that could otherwise be chosen.
        """
        margin = self._grid.margin if profile.margin is None else profile.margin
        if not tile.in_interior(self._grid.width, self._grid.height, margin):
            return False
        if is_wall(self._cache.world.terrain_at(region, tile)):
            return False

        distance = tile.distance_to(anchor)
        if distance < min_range or distance > max_range:
            return False

        if profile.min_spacing and any(
            tile.distance_to(other) < profile.min_spacing for other in avoid
        ):
            return False

        # Any structure or construction site blocks here, roads included
        return not self._cache.get_occupancy(region, tile)

    def openness(self, region: RegionName, tile: Position) -> int:
        """Count in-bounds, non-wall tiles in the 3x3 block around a tile (0-9)."""
        world = self._cache.world
        return sum(
            1
            for pos in tile.neighborhood()
            if pos.in_bounds(self._grid.width, self._grid.height)
            and not is_wall(world.terrain_at(region, pos))
        )

    def score(
        self,
        region: RegionName,
        tile: Position,
        anchor: Position,
        min_range: int,
        max_range: int,
        profile: SearchProfile = DEFAULT_PROFILE,
    ) -> float:
        """Openness plus a distance bonus on the same integer scale."""
        distance = tile.distance_to(anchor)
        if profile.distance_preference == "centered":
            bonus = max_range - abs(distance - (min_range + max_range) / 2)
        else:
            bonus = max_range - distance
        return self.openness(region, tile) + bonus
