"""Base services container for dependency injection."""

from config import Config
from storage.handles import HandleStore
from storage.manager import StorageManager


class Services:
    """Container for all application services.

    This class provides a centralized way to access all services and makes
    it easy to inject storage doubles for testing. Every service works on the
    same in-memory document, loaded once here.

    Args:
        config: Application configuration object.
        storage: Optional key/value storage for testing.
        handle_store: Optional backup handle store for testing.
    """

    def __init__(self, config: Config, storage=None, handle_store=None):
        """Initialize services with configuration.

        Args:
            config: Config object containing application configuration.
            storage: Optional storage for dependency injection (testing).
                     If None, creates StorageManager from config.
            handle_store: Optional handle store for dependency injection (testing).
                     If None, creates HandleStore from config.
        """
        self.config = config
        self.storage = storage or StorageManager(config)
        self.handle_store = handle_store or HandleStore(config)

        # Lazy import to avoid circular dependencies
        from services.state import StateStore
        from services.transactions import TransactionService
        from services.categories import CategoryService
        from services.lock import LockService
        from services.backup import BackupSynchronizer

        self.store = StateStore(self.storage, config.storage_key)
        self.document = self.store.load()

        self.transactions = TransactionService(self.document, self.store)
        self.categories = CategoryService(self.document, self.store)
        self.lock = LockService(self.document, self.store)
        self.backup = BackupSynchronizer(
            self.store,
            self.handle_store,
            interval_hours=config.backup_interval_hours,
            suggested_name=config.export_filename,
        )
