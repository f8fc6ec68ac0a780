#!/usr/bin/env python3

import asyncio
import sys

from backup.handles import PathPicker
from errors import BackupPermissionRevoked, CapabilityUnsupported
from cli.common import report_revoked
from logger import get_logger

logger = get_logger()


def cmd_choose(args, services):
    """Choose the backup file and write a first backup to it."""
    try:
        handle = asyncio.run(services.backup.choose_file(PathPicker(args.path)))
    except CapabilityUnsupported as e:
        logger.error(f"Automatic backup is not available: {e}")
        sys.exit(1)

    if handle is None:
        return

    logger.info(f"✓ Backup file set to {handle.path}")
    try:
        written = asyncio.run(services.backup.sync(services.document, "file chosen"))
    except BackupPermissionRevoked as e:
        report_revoked(e)
        sys.exit(1)
    if written is None:
        logger.error("First backup could not be written; see the log for details.")
        sys.exit(1)


def cmd_sync(args, services):
    """Write a backup now."""
    if services.backup.handle is None:
        logger.error("No backup file chosen. Use 'backup choose <path>' first.")
        sys.exit(1)

    try:
        written = asyncio.run(services.backup.sync(services.document, "manual"))
    except BackupPermissionRevoked as e:
        report_revoked(e)
        sys.exit(1)

    if written is None:
        logger.error("Backup failed; see the log for details.")
        sys.exit(1)
    logger.info(f"✓ Backup written at {written.astimezone():%Y-%m-%d %H:%M}")


def cmd_status(args, services):
    """Show the backup file and when it was last written."""
    backup = services.backup
    settings = services.document.settings

    logger.info(f"State: {backup.state}")
    if backup.handle is not None:
        logger.info(f"File: {backup.handle.name}")
    if settings.last_backup_at:
        logger.info(f"Last backup: {settings.last_backup_at.astimezone():%Y-%m-%d %H:%M}")
    else:
        logger.info("Last backup: never")
    logger.info(f"Backup due: {'yes' if backup.is_due(settings) else 'no'}")


def setup_parser(subparsers):
    """Setup backup subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "backup",
        help="Automatic backup to a file",
        description="Choose a backup file, back up now, or show backup status",
    )

    backup_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available backup commands",
        dest="subcommand",
        required=True,
    )

    choose_parser = backup_subparsers.add_parser(
        "choose", help="Choose the file to back up to"
    )
    choose_parser.add_argument("path", help="Backup file or directory")
    choose_parser.set_defaults(func=cmd_choose)

    sync_parser = backup_subparsers.add_parser("sync", help="Back up now")
    sync_parser.set_defaults(func=cmd_sync)

    status_parser = backup_subparsers.add_parser("status", help="Show backup status")
    status_parser.set_defaults(func=cmd_status)
