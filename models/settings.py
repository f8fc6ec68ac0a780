from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


@dataclass
class Settings:
    """Lock and backup settings stored alongside the data.

    Attributes:
        pin_hash: Encoded 4-digit PIN, or None if no PIN has been set.
        biometric_enabled: Whether biometric unlock is offered.
        last_backup_at: When the backup file was last written (UTC).
    """

    pin_hash: Optional[str] = None
    biometric_enabled: bool = False
    last_backup_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "pinHash": self.pin_hash,
            "bio": self.biometric_enabled,
            "lastBackup": (
                self.last_backup_at.isoformat() if self.last_backup_at else None
            ),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        pin_hash = data.get("pinHash")
        return cls(
            pin_hash=pin_hash if isinstance(pin_hash, str) and pin_hash else None,
            biometric_enabled=data.get("bio") is True,
            last_backup_at=_parse_instant(data.get("lastBackup")),
        )


def _parse_instant(value) -> Optional[datetime]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # Epoch milliseconds
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if not isinstance(value, str) or not value:
        return None
    try:
        instant = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant
