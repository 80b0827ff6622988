"""
EczemaHub - Main Entry Point
Runs the catalog gateway, performs first-time setup, or inspects a snapshot.
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from eczemahub import __version__, __codename__
from eczemahub.catalog import ANONYMOUS, Catalog, SnapshotError, SnapshotFile, identity_from
from eczemahub.config.settings import Settings, get_settings


class SetupRequired(Exception):
    """No snapshot exists and no admin identity was supplied."""


def setup_logging(level: str = "INFO"):
    """Configure logging."""
    settings = get_settings()
    log_level = getattr(logging, str(settings.get("logging.level", level)).upper(), logging.INFO)
    log_format = settings.get("logging.format", "%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    log_file = settings.get("logging.file", "logs/eczemahub.log")
    log_path = settings.resolve_path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=[
            logging.FileHandler(log_path, encoding="utf-8"),
            logging.StreamHandler(sys.stderr),
        ],
    )
    # Suppress noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def snapshot_file(settings) -> SnapshotFile:
    return SnapshotFile(settings.resolve_path(settings.get("catalog.snapshot_path", "data/catalog.json")))


def resolve_admin(settings, cli_admin: Optional[str] = None, interactive: bool = True):
    """Admin for first-time setup: CLI flag, then config, then the wizard."""
    raw = cli_admin or settings.get("catalog.initial_admin")
    admin = identity_from(str(raw) if raw is not None else None)
    if admin != ANONYMOUS:
        return admin
    if interactive and sys.stdin.isatty():
        from eczemahub.setup_wizard import SetupWizard
        return SetupWizard().run()
    return None


def open_catalog(settings, cli_admin: Optional[str] = None, interactive: bool = True):
    """
    Restore the catalog from its snapshot, or run first-time setup.
    A snapshot that cannot be restored raises SnapshotError; the caller
    must not fall back to an empty catalog.
    """
    logger = logging.getLogger("eczemahub.init")
    snapshots = snapshot_file(settings)

    if snapshots.exists():
        catalog = Catalog.from_state(snapshots.load())
        logger.info(f"Catalog restored from {snapshots.path}")
        return catalog, snapshots

    admin = resolve_admin(settings, cli_admin, interactive)
    if admin is None:
        raise SetupRequired(
            "No snapshot found. Pass --admin or set catalog.initial_admin to run first-time setup."
        )
    catalog = Catalog.setup(admin)
    snapshots.save(catalog.snapshot())
    logger.info(f"New catalog created at {snapshots.path}")
    return catalog, snapshots


async def run_serve(args, settings):
    """Run the gateway until interrupted; snapshot on the way out."""
    from eczemahub.gateway.server import GatewayServer

    catalog, snapshots = open_catalog(settings, args.admin)
    gateway = GatewayServer(catalog=catalog, snapshot_file=snapshots)
    await gateway.start()


def run_init(args, settings) -> int:
    logger = logging.getLogger("eczemahub.init")
    snapshots = snapshot_file(settings)
    if snapshots.exists():
        logger.error(f"Snapshot already exists at {snapshots.path}; refusing to overwrite")
        return 1
    open_catalog(settings, args.admin)
    return 0


def run_inspect(args, settings) -> int:
    """Print the snapshot's admins, counts and resources."""
    console = Console()
    snapshots = snapshot_file(settings)
    if not snapshots.exists():
        console.print(f"[yellow]No snapshot at {snapshots.path}[/yellow]")
        return 1
    catalog = Catalog.from_state(snapshots.load())
    stats = catalog.stats()

    summary = Table(title="Catalog", show_header=False)
    summary.add_column("key", style="dim")
    summary.add_column("value", style="cyan")
    summary.add_row("Snapshot", str(snapshots.path))
    summary.add_row("Resources", str(stats["resources"]))
    summary.add_row("Verified", str(stats["verified"]))
    summary.add_row("Next id", str(stats["next_id"]))
    summary.add_row("Admins", ", ".join(catalog.access.admins()))
    for name, count in stats["categories"].items():
        summary.add_row(name, str(count))
    console.print(summary)

    resources = Table(title="Resources", header_style="bold cyan")
    resources.add_column("#", justify="right")
    resources.add_column("Title")
    resources.add_column("Category")
    resources.add_column("Verified")
    resources.add_column("Created by", style="dim")
    page = 0
    while True:
        batch = catalog.list_resources(page)
        if not batch:
            break
        for r in batch:
            resources.add_row(
                str(r.id), r.title, r.category.value,
                "[green]yes[/green]" if r.verified else "no", r.created_by,
            )
        page += 1
    console.print(resources)
    return 0


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="eczemahub",
        description=f"EczemaHub {__version__} - Community eczema resource catalog",
    )
    parser.add_argument(
        "mode",
        nargs="?",
        default="serve",
        choices=["serve", "init", "inspect"],
        help="serve (default): run the gateway, init: first-time setup, inspect: show the snapshot",
    )
    parser.add_argument("--admin", default=None, help="Initial admin identity for first-time setup")
    parser.add_argument("--host", default=None, help="Gateway host override")
    parser.add_argument("--port", type=int, default=None, help="Gateway port override")
    parser.add_argument("--snapshot", default=None, help="Snapshot file override")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--version",
        action="version",
        version=f"EczemaHub {__version__} ({__codename__})",
    )

    args = parser.parse_args()

    if args.debug:
        os.environ["ECZEMAHUB_APP__DEBUG"] = "true"
        os.environ["ECZEMAHUB_LOGGING__LEVEL"] = "DEBUG"
    if args.host:
        os.environ["ECZEMAHUB_GATEWAY__HOST"] = args.host
    if args.port:
        os.environ["ECZEMAHUB_GATEWAY__PORT"] = str(args.port)
    if args.snapshot:
        os.environ["ECZEMAHUB_CATALOG__SNAPSHOT_PATH"] = str(Path(args.snapshot).resolve())

    settings = Settings.initialize(str(Path(__file__).parent))
    setup_logging()
    logger = logging.getLogger("eczemahub")
    logger.info(f"EczemaHub {__version__} ({__codename__}) starting...")

    try:
        if args.mode == "init":
            sys.exit(run_init(args, settings))
        elif args.mode == "inspect":
            sys.exit(run_inspect(args, settings))
        else:
            asyncio.run(run_serve(args, settings))
    except SnapshotError as e:
        logger.critical(f"Cannot restore catalog, refusing to start: {e}")
        sys.exit(1)
    except SetupRequired as e:
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nBye.")
        sys.exit(0)


if __name__ == "__main__":
    main()
