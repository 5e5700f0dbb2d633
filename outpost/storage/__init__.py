"""Persistence of planning state for Outpost."""

from .plan_store import PlanStore

__all__ = ["PlanStore"]
