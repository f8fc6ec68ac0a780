#!/usr/bin/env python3

import asyncio
import getpass
import sys

from errors import CapabilityUnsupported
from services.lock import UnsupportedAuthenticator
from logger import get_logger

logger = get_logger()


def unlock(services) -> bool:
    """Gate the CLI behind the PIN (or biometrics when enabled).

    Returns:
        True if the app may be used.
    """
    lock = services.lock
    if not lock.has_pin():
        return True

    if services.document.settings.biometric_enabled:
        try:
            if asyncio.run(lock.unlock_with_biometric(UnsupportedAuthenticator())):
                return True
        except CapabilityUnsupported as e:
            logger.info(f"{e}; use your PIN.")

    pin = getpass.getpass("PIN: ")
    if lock.verify_pin(pin):
        return True
    logger.error("Wrong PIN.")
    return False


def cmd_set_pin(args, services):
    """Set or change the 4-digit PIN."""
    pin = getpass.getpass("New 4-digit PIN: ")
    again = getpass.getpass("Repeat PIN: ")
    if pin != again:
        logger.error("PINs do not match.")
        sys.exit(1)
    services.lock.set_pin(pin)
    logger.info("✓ PIN set")


def cmd_reset_pin(args, services):
    """Remove the PIN; a new one can be set afterwards."""
    services.lock.reset_pin()
    logger.info("✓ PIN removed. Use 'lock set-pin' to choose a new one.")


def cmd_toggle_bio(args, services):
    """Turn biometric unlock on or off."""
    enabled = services.lock.toggle_biometric()
    logger.info(f"✓ Biometric unlock {'enabled' if enabled else 'disabled'}")


def setup_parser(subparsers):
    """Setup lock subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "lock",
        help="PIN and biometric lock",
        description="Set or remove the app PIN and toggle biometric unlock",
    )

    lock_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available lock commands",
        dest="subcommand",
        required=True,
    )

    set_parser = lock_subparsers.add_parser("set-pin", help="Set the 4-digit PIN")
    set_parser.set_defaults(func=cmd_set_pin)

    reset_parser = lock_subparsers.add_parser("reset-pin", help="Remove the PIN")
    reset_parser.set_defaults(func=cmd_reset_pin)

    bio_parser = lock_subparsers.add_parser(
        "toggle-bio", help="Turn biometric unlock on or off"
    )
    bio_parser.set_defaults(func=cmd_toggle_bio)
