"""Configuration management for Pocketbook.

Reads configuration from ~/.config/pocketbook.toml and creates default config if needed.
"""

from pathlib import Path
from dataclasses import dataclass
import tomllib
import tomli_w


@dataclass
class Config:
    """Application configuration."""

    base_dir: Path
    data_dir: Path
    storage_key: str
    handle_store_filename: str
    log_level: str
    log_dir: Path
    backup_interval_hours: int = 24
    export_filename: str = "expense-backup.json"
    currency_symbol: str = "₹"

    @property
    def document_path(self) -> Path:
        """Get the full path of the persisted document (data_dir/key.json)."""
        return self.data_dir / f"{self.storage_key}.json"

    @property
    def handle_store_path(self) -> Path:
        """Get the path of the secondary store holding the backup handle."""
        return self.data_dir / self.handle_store_filename

    @classmethod
    def default(cls) -> "Config":
        """Create a Config with default values."""
        home = Path.home()
        base_dir = home / "data" / "pocketbook"
        return cls(
            base_dir=base_dir,
            data_dir=base_dir / "data",
            storage_key="expMgrMobileDarkV2",
            handle_store_filename="handles",
            log_level="INFO",
            log_dir=base_dir / "logs",
        )


def get_config_path() -> Path:
    """Get the path to the config file."""
    return Path.home() / ".config" / "pocketbook.toml"


def load_config() -> Config:
    """Load configuration from file, creating default if it doesn't exist.

    Returns:
        Config object with loaded or default values.
    """
    config_path = get_config_path()

    # If config doesn't exist, create it with defaults
    if not config_path.exists():
        config = Config.default()
        _write_config(config)
        return config

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    return config_from_dict(data)


def config_from_dict(data: dict) -> Config:
    """Build a Config from parsed TOML data, with defaults for any missing values."""
    defaults = Config.default()
    base_dir = Path(data.get("base_dir", defaults.base_dir))

    storage_config = data.get("storage", {})
    data_dir = Path(storage_config.get("data_dir", base_dir / "data"))
    storage_key = storage_config.get("key", defaults.storage_key)
    handle_store_filename = storage_config.get(
        "handle_store", defaults.handle_store_filename
    )

    log_config = data.get("logging", {})
    log_level = log_config.get("level", defaults.log_level)
    log_dir = Path(log_config.get("log_dir", base_dir / "logs"))

    backup_config = data.get("backup", {})
    backup_interval_hours = int(
        backup_config.get("interval_hours", defaults.backup_interval_hours)
    )
    export_filename = backup_config.get("export_filename", defaults.export_filename)

    display_config = data.get("display", {})
    currency_symbol = display_config.get("currency_symbol", defaults.currency_symbol)

    return Config(
        base_dir=base_dir,
        data_dir=data_dir,
        storage_key=storage_key,
        handle_store_filename=handle_store_filename,
        log_level=log_level,
        log_dir=log_dir,
        backup_interval_hours=backup_interval_hours,
        export_filename=export_filename,
        currency_symbol=currency_symbol,
    )


def _write_config(config: Config) -> None:
    """Write config to the config file.

    Args:
        config: Config object to write.
    """
    config_path = get_config_path()

    # Ensure config directory exists
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "base_dir": str(config.base_dir),
        "storage": {
            "data_dir": str(config.data_dir),
            "key": config.storage_key,
            "handle_store": config.handle_store_filename,
        },
        "logging": {
            "level": config.log_level,
            "log_dir": str(config.log_dir),
        },
        "backup": {
            "interval_hours": config.backup_interval_hours,
            "export_filename": config.export_filename,
        },
        "display": {
            "currency_symbol": config.currency_symbol,
        },
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
