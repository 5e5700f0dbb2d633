"""Region layout files.

A layout is a YAML document describing one region: its terrain, what is
already built, and the anchor tiles the planner measures from.

    region: W1N1
    level: 6
    tick: 0
    terrain:            # optional; row index is y, column index is x
      - "##########"
      - "#........#"
    walls: [[26, 25]]   # optional extra wall tiles
    swamps: [[30, 30]]
    anchors:
      spawn: [25, 25]
      storage: [27, 27]
      controller: [10, 40]
      sources: [[5, 5], [40, 44]]
    structures:
      - {x: 25, y: 25, category: spawn}
    sites:
      - {x: 26, y: 26, category: road}

Without terrain rows the region is width x height (default 50x50) and
all plain apart from walls and swamps.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from outpost.core.plan import RegionAnchors
from outpost.core.structures import StructureCategory
from outpost.core.terrain import Terrain, from_symbol
from outpost.core.types import Position, RegionName, SiteId
from outpost.errors import LayoutError

from .grid_world import GridWorld

logger = logging.getLogger(__name__)


class _PlacedEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    x: int
    y: int
    category: StructureCategory
    id: str | None = None


class _AnchorsEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    spawn: Position | None = None
    storage: Position | None = None
    controller: Position | None = None
    sources: list[Position] = Field(default_factory=list)


class _LayoutDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    region: str
    level: int = Field(default=0, ge=0, le=8)
    tick: int = 0
    width: int | None = None
    height: int | None = None
    terrain: list[str] | None = None
    walls: list[Position] = Field(default_factory=list)
    swamps: list[Position] = Field(default_factory=list)
    anchors: _AnchorsEntry = Field(default_factory=_AnchorsEntry)
    structures: list[_PlacedEntry] = Field(default_factory=list)
    sites: list[_PlacedEntry] = Field(default_factory=list)


def parse_layout(data: dict, path: Path | None = None) -> tuple[GridWorld, RegionAnchors]:
    """Build a world and anchors from an already-parsed layout mapping.

    Raises:
        LayoutError: Mapping fails validation or terrain rows are ragged
    """
    try:
        doc = _LayoutDocument.model_validate(data)
    except ValidationError as e:
        raise LayoutError(f"Invalid layout: {e}", path) from e

    region = RegionName(doc.region)
    if doc.terrain:
        height = len(doc.terrain)
        width = len(doc.terrain[0])
        if any(len(row) != width for row in doc.terrain):
            raise LayoutError("Terrain rows must all be the same length", path)
    else:
        width = doc.width or 50
        height = doc.height or 50

    world = GridWorld(tick=doc.tick)
    world.add_region(region, width=width, height=height)

    for y, row in enumerate(doc.terrain or []):
        for x, symbol in enumerate(row):
            terrain = from_symbol(symbol)
            if terrain is None:
                raise LayoutError(f"Unknown terrain symbol {symbol!r} at ({x}, {y})", path)
            world.set_terrain(region, Position(x, y), terrain)
    for pos in doc.walls:
        world.set_terrain(region, pos, Terrain.WALL)
    for pos in doc.swamps:
        world.set_terrain(region, pos, Terrain.SWAMP)

    for entry in doc.structures:
        world.add_structure(region, Position(entry.x, entry.y), entry.category)
    for entry in doc.sites:
        site_id = SiteId(entry.id) if entry.id else None
        world.add_site(region, Position(entry.x, entry.y), entry.category, site_id)

    anchors = RegionAnchors(
        region=region,
        level=doc.level,
        spawn=doc.anchors.spawn,
        storage=doc.anchors.storage,
        controller=doc.anchors.controller,
        sources=tuple(doc.anchors.sources),
    )
    logger.debug(
        f"Parsed layout for {region}: {width}x{height}, "
        f"{len(doc.structures)} structures, {len(doc.sites)} sites"
    )
    return world, anchors


def load_layout(path: Path | str) -> tuple[GridWorld, RegionAnchors]:
    """Read a YAML layout file.

    Raises:
        LayoutError: File unreadable, not YAML, or invalid
    """
    layout_path = Path(path)
    try:
        with open(layout_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise LayoutError(f"Cannot read layout file: {e}", layout_path) from e
    except yaml.YAMLError as e:
        raise LayoutError(f"Invalid YAML in layout file: {e}", layout_path) from e

    if not isinstance(data, dict):
        raise LayoutError("Layout file must contain a mapping", layout_path)
    return parse_layout(data, layout_path)
