"""Outpost - structure placement planning for a tile-grid world.

Subpackages:
    core      Pure domain models (positions, terrain, structures, plans)
    services  Observation cache, placement search, construction planning
    storage   Persisted planning state
    adapters  World query boundary, in-memory world, layout files
"""

__version__ = "0.1.0"
