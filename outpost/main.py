"""Outpost - structure placement planning for a tile-grid world."""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from outpost import __version__
from outpost.adapters import load_layout
from outpost.config import OutpostConfig, load_config
from outpost.core.plan import RegionAnchors, RegionPlans
from outpost.errors import OutpostError
from outpost.logging_config import setup_logging
from outpost.services import (
    ConstructionPlanner,
    ObservationCache,
    PlacementPlanner,
    StructureCatalog,
)
from outpost.storage import PlanStore

logger = logging.getLogger("outpost.main")


def plan_layout(
    layout_path: Path,
    config: OutpostConfig,
    store: PlanStore,
    force: bool = False,
) -> tuple[RegionAnchors, RegionPlans]:
    """Plan every supported category for the region in a layout file.

    Args:
        layout_path: YAML region layout
        config: Cache TTLs and grid dimensions
        store: Plan store to read existing plans from and write new ones to
        force: Re-plan categories that already have a plan

    Returns:
        The region's anchors and its planning state after the pass
    """
    world, anchors = load_layout(layout_path)
    state = world.region(anchors.region)
    # Layout dimensions win over the configured grid size
    grid = config.grid.model_copy(update={"width": state.width, "height": state.height})
    cache = ObservationCache(world, world.now, config.cache)
    placement = PlacementPlanner(cache, grid)
    planner = ConstructionPlanner(placement, store, StructureCatalog())

    plans = planner.plan_region(anchors, force=force)
    logger.info(f"Planned region {anchors.region} at tick {world.tick} (level {anchors.level})")
    return anchors, plans


def print_plans(anchors: RegionAnchors, plans: RegionPlans) -> None:
    """Print a region's plans in a readable form."""
    print(f"Region: {anchors.region} (level {anchors.level})")
    if not plans.plans:
        print("  Nothing to plan at this level")
        return
    for category, plan in plans.plans.items():
        tiles = ", ".join(f"({pos.x}, {pos.y})" for pos in plan.positions) or "none"
        print(f"  {category.value}: {len(plan.positions)} planned, {plan.count} built | {tiles}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for Outpost."""
    # Load environment variables first
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Outpost - structure placement planning for a tile-grid world",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  outpost room.yaml                       # Plan and print
  outpost room.yaml --plans data/plans.json  # Plan, keeping existing plans, and save
  outpost room.yaml --force               # Re-plan everything
        """,
    )
    parser.add_argument(
        "layout",
        type=Path,
        help="Region layout YAML file",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Configuration YAML file",
    )
    parser.add_argument(
        "--data",
        type=Path,
        default=None,
        help="Data directory for logs (default: from config, data/)",
    )
    parser.add_argument(
        "--plans",
        type=Path,
        default=None,
        help="Plan file to load (if present) and save results to",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Re-plan categories that already have a plan",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging to console",
    )

    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except OutpostError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    data_dir = args.data or config.data_dir
    console_level = logging.DEBUG if args.debug else logging.WARNING
    log_level = logging.getLevelName(config.log_level.upper())
    if not isinstance(log_level, int):
        log_level = logging.DEBUG
    log_path = setup_logging(data_dir, log_level=log_level, console_level=console_level)

    print(f"Outpost v{__version__}")
    print(f"Log file: {log_path}")
    print()

    try:
        if args.plans is not None and args.plans.exists():
            store = PlanStore.load(args.plans)
        else:
            store = PlanStore()

        anchors, plans = plan_layout(args.layout, config, store, force=args.force)
        print_plans(anchors, plans)

        if args.plans is not None:
            saved = store.save(args.plans)
            print()
            print(f"Plans saved to {saved}")
    except OutpostError as e:
        logger.error(f"Planning failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
