"""Creation-time identifiers for transactions and categories."""

import time
from typing import Container


def new_id(existing: Container[str], prefix: str = "") -> str:
    """Generate an id from the current time in milliseconds.

    The millisecond value is bumped until it does not collide with an
    existing id, so ids stay unique when several are made in one tick.

    Args:
        existing: Ids already in use.
        prefix: Text placed before the number (e.g., "c" for categories).
    """
    stamp = time.time_ns() // 1_000_000
    while f"{prefix}{stamp}" in existing:
        stamp += 1
    return f"{prefix}{stamp}"
