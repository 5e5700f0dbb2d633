"""Exception hierarchy for Outpost.

The planning core itself never raises for degraded input: missing anchors
and empty searches produce short plans instead. These exceptions belong to
the outer surfaces (configuration, layout files, plan persistence).
"""

from __future__ import annotations

from pathlib import Path

from .core.types import RegionName


class OutpostError(Exception):
    """Base exception for Outpost errors."""

    pass


class ConfigError(OutpostError):
    """Configuration file is unreadable or invalid."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


class LayoutError(OutpostError):
    """Region layout file is malformed."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


class PlanStoreError(OutpostError):
    """Persisted plans could not be read or written."""

    pass


class UnknownRegionError(OutpostError):
    """A world query named a region the world does not hold."""

    def __init__(self, region: RegionName):
        super().__init__(f"Unknown region: {region}")
        self.region = region
