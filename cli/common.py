"""Helpers shared by the CLI commands."""

import argparse
import asyncio
from datetime import date
from decimal import Decimal

from errors import BackupPermissionRevoked
from logger import get_logger

logger = get_logger()


def format_amount(amount: Decimal, symbol: str) -> str:
    """Format an amount with thousands separators and at most two decimals."""
    text = f"{amount:,.2f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{symbol}{text}"


def parse_date(value: str) -> date:
    """argparse type for YYYY-MM-DD dates."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}', expected YYYY-MM-DD")


def split_names(value: str) -> list:
    """Split a comma-separated list of names, dropping blanks."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def confirm(prompt: str) -> bool:
    """Ask a yes/no question on the terminal."""
    return input(f"{prompt} (yes/no): ").strip().lower() == "yes"


def report_revoked(error: BackupPermissionRevoked) -> None:
    logger.warning(f"{error}")
    logger.warning(
        "Backup file access was lost. Run 'python -m cli backup choose <path>' to reconnect."
    )


def sync_after_mutation(services, reason: str) -> None:
    """Opportunistically back up after a change. Never fails the command."""
    try:
        asyncio.run(services.backup.sync(services.document, reason))
    except BackupPermissionRevoked as e:
        report_revoked(e)
