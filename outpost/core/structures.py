"""Structure and occupant models for Outpost.

These are the records the world query interface hands back. They are
immutable snapshots; the world itself is owned by someone else.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from .types import Position, SiteId


class StructureCategory(Enum):
    """Kinds of structure that can occupy a tile."""

    SPAWN = "spawn"
    EXTENSION = "extension"
    ROAD = "road"
    RAMPART = "rampart"
    CONSTRUCTED_WALL = "constructedWall"
    CONTAINER = "container"
    LINK = "link"
    TOWER = "tower"
    STORAGE = "storage"
    CONTROLLER = "controller"


# Categories that can be walked over and share a tile with an overlay
TRAVERSABLE: frozenset[StructureCategory] = frozenset({StructureCategory.ROAD})

# Occupant categories a traversable structure may be built on top of
COEXISTS_WITH_TRAVERSABLE: frozenset[StructureCategory] = frozenset(
    {StructureCategory.RAMPART}
)


class OccupantKind(Enum):
    """What sort of thing a tile look-up found."""

    STRUCTURE = "structure"
    CONSTRUCTION_SITE = "constructionSite"


class StructureRecord(BaseModel):
    """A built structure at a position."""

    model_config = ConfigDict(frozen=True)

    position: Position
    category: StructureCategory


class ConstructionSite(BaseModel):
    """A structure that has been ordered but not finished."""

    model_config = ConfigDict(frozen=True)

    id: SiteId
    position: Position
    category: StructureCategory


class Occupant(BaseModel):
    """One entry of a tile look-up."""

    model_config = ConfigDict(frozen=True)

    kind: OccupantKind
    category: StructureCategory

    def blocks(self, candidate: StructureCategory) -> bool:
        """Check if this occupant prevents building `candidate` on its tile.

        Only a traversable candidate over a coexisting overlay is allowed.
        """
        return not (candidate in TRAVERSABLE and self.category in COEXISTS_WITH_TRAVERSABLE)


class SiteInventory(BaseModel):
    """All construction sites in a region, with convenience views."""

    model_config = ConfigDict(frozen=True)

    sites: tuple[ConstructionSite, ...] = ()

    @property
    def count(self) -> int:
        """Number of sites."""
        return len(self.sites)

    @property
    def ids(self) -> tuple[SiteId, ...]:
        """Site identifiers in inventory order."""
        return tuple(site.id for site in self.sites)
