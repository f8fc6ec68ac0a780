"""Secondary store for objects that are not JSON, such as the backup file handle."""

import shelve
from typing import Any, Optional
from config import Config

BACKUP_HANDLE_KEY = "backupHandle"


class HandleStore:
    """Pickle-backed key/value store kept apart from the main document.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: Config):
        self.config = config

    def get(self, key: str) -> Optional[Any]:
        """Get the object stored under a key, or None."""
        path = self.config.handle_store_path
        path.parent.mkdir(parents=True, exist_ok=True)
        with shelve.open(str(path)) as db:
            return db.get(key)

    def put(self, key: str, value: Any) -> None:
        """Store an object under a key, replacing any previous one."""
        path = self.config.handle_store_path
        path.parent.mkdir(parents=True, exist_ok=True)
        with shelve.open(str(path)) as db:
            db[key] = value

    def delete(self, key: str) -> None:
        """Remove the object stored under a key, if any."""
        path = self.config.handle_store_path
        path.parent.mkdir(parents=True, exist_ok=True)
        with shelve.open(str(path)) as db:
            if key in db:
                del db[key]
