"""Storage manager for the on-device key/value store and path management."""

import os
import tempfile
from pathlib import Path
from typing import Optional
from config import Config


class StorageManager:
    """File-backed key/value store; each key is one file under the data directory.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: Config):
        """Initialize the storage manager.

        Args:
            config: Config object containing storage configuration.
        """
        self.config = config

    def get_item(self, key: str) -> Optional[str]:
        """Read the value stored under a key.

        Returns:
            The stored text, or None if nothing is stored under the key.
        """
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        """Overwrite the value stored under a key.

        The value is written to a temporary file and moved into place, so a
        failed write leaves the previous value intact.

        Raises:
            OSError: If the value could not be written (e.g., disk full).
        """
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def remove_item(self, key: str) -> None:
        """Remove the value stored under a key, if any."""
        self.path_for(key).unlink(missing_ok=True)

    def path_for(self, key: str) -> Path:
        """Get the file path backing a key.

        Returns:
            Path: Path to the file under the data directory.
        """
        return self.config.data_dir / f"{key}.json"
