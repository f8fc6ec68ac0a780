#!/usr/bin/env python3

import sys
from pathlib import Path

from errors import DocumentParseError
from cli.common import confirm, sync_after_mutation
from logger import get_logger

logger = get_logger()


def cmd_export(args, services):
    """Export all data to a JSON file."""
    path = Path(args.path) if args.path else Path.cwd() / services.config.export_filename
    try:
        services.store.export_to(services.document, path)
    except OSError as e:
        logger.error(f"Could not export: {e}")
        sys.exit(1)
    logger.info(f"✓ Exported to {path}")


def cmd_import(args, services):
    """Import a JSON file, replacing all existing data."""
    path = Path(args.path)
    if not path.exists():
        logger.error(f"File not found: {args.path}")
        sys.exit(1)

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Could not read {path}: {e}")
        sys.exit(1)

    if not args.yes and not confirm("Import data and replace existing?"):
        logger.info("Import cancelled.")
        return

    try:
        services.store.import_replace(services.document, raw)
    except DocumentParseError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info("✓ Import successful.")
    sync_after_mutation(services, "data imported")


def cmd_reset(args, services):
    """Delete all transactions and categories (the PIN is kept)."""
    if not args.yes and not confirm("Clear all data? This cannot be undone."):
        logger.info("Reset cancelled.")
        return

    services.store.reset_all(services.document)
    logger.info("✓ All data cleared; default categories restored.")
    sync_after_mutation(services, "data reset")


def setup_parser(subparsers):
    """Setup data subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "data",
        help="Export, import and reset data",
        description="Export all data to JSON, replace it from a JSON file, or clear it",
    )

    data_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available data commands",
        dest="subcommand",
        required=True,
    )

    export_parser = data_subparsers.add_parser("export", help="Export data to JSON")
    export_parser.add_argument(
        "path", nargs="?", help="Output file (default: ./expense-backup.json)"
    )
    export_parser.set_defaults(func=cmd_export)

    import_parser = data_subparsers.add_parser(
        "import", help="Import data from JSON, replacing existing data"
    )
    import_parser.add_argument("path", help="JSON file to import")
    import_parser.add_argument(
        "--yes", action="store_true", help="Do not ask for confirmation"
    )
    import_parser.set_defaults(func=cmd_import)

    reset_parser = data_subparsers.add_parser("reset", help="Clear all data")
    reset_parser.add_argument(
        "--yes", action="store_true", help="Do not ask for confirmation"
    )
    reset_parser.set_defaults(func=cmd_reset)
