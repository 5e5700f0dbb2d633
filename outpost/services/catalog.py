"""Structure catalog for Outpost.

Level caps (how many of a category a region may hold at each controller
level) are loaded from YAML rather than hard-coded, so a different world
ruleset only needs a different file.
"""

from __future__ import annotations

from pathlib import Path

import yaml

from outpost.core.structures import StructureCategory


class StructureCatalog:
    """Lookup of per-level structure caps."""

    def __init__(self, caps_path: Path | None = None):
        """Initialize StructureCatalog.

        Args:
            caps_path: Path to level_caps.yaml. If None, uses the packaged default.
        """
        self._caps: dict[StructureCategory, tuple[int, ...]] = {}
        if caps_path is None:
            caps_path = Path(__file__).parent.parent / "data" / "level_caps.yaml"
        self._caps_path = caps_path
        self._load_caps()

    def _load_caps(self) -> None:
        """Load caps from YAML file."""
        if not self._caps_path.exists():
            return

        with open(self._caps_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if data and "level_caps" in data:
            self._caps = {
                StructureCategory(name): tuple(int(n) for n in counts)
                for name, counts in data["level_caps"].items()
            }

    def max_count(self, category: StructureCategory, level: int) -> int:
        """Cap for a category at a controller level. Unknown means 0."""
        counts = self._caps.get(category)
        if counts is None or not 0 <= level < len(counts):
            return 0
        return counts[level]
