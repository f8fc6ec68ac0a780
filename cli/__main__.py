#!/usr/bin/env python3
"""
Pocketbook CLI - Personal expense tracking from the command line.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    transactions Record and list transactions
    categories   Manage categories and subcategories
    summary      Period totals and expense breakdown
    data         Export, import and reset data
    backup       Automatic backup to a file
    lock         PIN and biometric lock

Examples:
    python -m cli transactions add expense 250 --category food --subcategory food-s0
    python -m cli transactions list --mode month --offset -1
    python -m cli summary --mode year
    python -m cli backup choose ~/Documents/expense-backup.json
    python -m cli data export
"""

import sys
import asyncio
import argparse
from cli import transactions, categories, summary, data, backup, lock
from cli.common import report_revoked
from config import load_config
from errors import BackupPermissionRevoked, PocketbookError
from services.base import Services
from logger import setup_logging


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Pocketbook - Personal expense tracking",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    # Register each command's subparser
    transactions.setup_parser(subparsers)
    categories.setup_parser(subparsers)
    summary.setup_parser(subparsers)
    data.setup_parser(subparsers)
    backup.setup_parser(subparsers)
    lock.setup_parser(subparsers)

    args = parser.parse_args()

    if hasattr(args, "func"):
        try:
            config = load_config()
            logger = setup_logging(config)

            # Loads the document once; every command works on it
            services = Services(config)

            if not lock.unlock(services):
                sys.exit(1)

            # Opening the app is when the daily backup gets its chance
            try:
                asyncio.run(services.backup.check_daily_backup(services.document))
            except BackupPermissionRevoked as e:
                report_revoked(e)

            args.func(args, services)
        except PocketbookError as e:
            logger.error(str(e))
            sys.exit(1)
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
