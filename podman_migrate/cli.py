"""Command line entry point for podman-migrate."""

import argparse
import asyncio
import os
import sys

from dotenv import load_dotenv

from .core.config_loader import MigrationConfig, load_config
from .core.exceptions import ConfigurationError
from .core.logging_config import get_logger, setup_logging
from .core.subprocess_manager import managed_subprocess
from .models.enums import ResourceKind
from .models.results import MigrationReport
from .services.orchestrator import MigrationOrchestrator


def parse_kinds(value: str) -> list[ResourceKind]:
    """Parse a comma separated list of resource kinds for ``--only``."""
    kinds = []
    for item in value.split(","):
        item = item.strip().lower()
        if not item:
            continue
        try:
            kinds.append(ResourceKind(item))
        except ValueError:
            choices = ", ".join(kind.value for kind in ResourceKind)
            raise argparse.ArgumentTypeError(
                f"unknown resource kind '{item}' (choose from {choices})"
            ) from None
    if not kinds:
        raise argparse.ArgumentTypeError("at least one resource kind is required")
    return kinds


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="podman-migrate",
        description="Migrate Docker images, volumes, networks and containers to Podman",
    )
    parser.add_argument("--config", default=os.getenv("MIGRATE_CONFIG"), help="YAML config file")
    parser.add_argument(
        "--only",
        type=parse_kinds,
        default=None,
        metavar="KINDS",
        help="Comma separated subset of: images,volumes,networks,containers",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (defaults to LOG_LEVEL or INFO)",
    )
    parser.add_argument("--log-dir", default=os.getenv("LOG_DIR"), help="Write migration.log here")
    return parser.parse_args(argv)


async def run_migration(
    config: MigrationConfig, kinds: list[ResourceKind] | None = None
) -> MigrationReport:
    """Run one migration pass, making sure no runtime subprocess outlives it."""
    async with managed_subprocess() as manager:
        orchestrator = MigrationOrchestrator(config, subprocess_manager=manager)
        return await orchestrator.run(kinds)


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Per-item failures are reported in the log and never change the exit code;
    only an unusable configuration does.
    """
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        setup_logging(log_dir=args.log_dir, log_level=args.log_level)
        get_logger().error("Configuration error", error=str(e))
        return 1

    setup_logging(log_dir=args.log_dir, log_level=args.log_level or config.log_level)
    logger = get_logger()
    logger.debug("Configuration loaded", config_file=args.config, **config.model_dump())

    try:
        report = asyncio.run(run_migration(config, args.only))
    except KeyboardInterrupt:
        logger.warning("Migration interrupted; partial progress is not rolled back")
        return 130

    failed = report.failed_items()
    if failed:
        logger.warning(
            "Migration finished with failures",
            failed=[f"{item.kind.value}:{item.name}" for item in failed],
        )
    else:
        logger.info("Migration finished")
    return 0


if __name__ == "__main__":
    sys.exit(main())
