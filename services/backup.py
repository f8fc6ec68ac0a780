"""Backup synchronizer: keeps a user-chosen file up to date with the document.

The handle moves through three states: unset (no file chosen), active (file
chosen and writable) and revoked (write permission was lost; the user has to
choose the file again). Backups are best effort: a failed backup never
touches the data in primary storage.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from backup.handles import BackupHandle, FilePicker, PermissionState
from errors import BackupPermissionRevoked, PickerCancelled
from models.document import Document
from models.settings import Settings
from services.state import export_json
from storage.handles import BACKUP_HANDLE_KEY
from logger import get_logger

logger = get_logger()

UNSET = "unset"
ACTIVE = "active"
REVOKED = "revoked"

AUTOMATIC = "automatic"


class BackupSynchronizer:
    """Writes the document to the backup file when asked, one write at a time."""

    def __init__(
        self,
        store,
        handle_store,
        interval_hours: int = 24,
        suggested_name: str = "expense-backup.json",
    ):
        """Initialize the synchronizer and restore any saved handle.

        Args:
            store: StateStore used to persist the new backup timestamp.
            handle_store: HandleStore (or test double) holding the handle.
            interval_hours: Age after which a backup is due again.
            suggested_name: File name offered by the picker.
        """
        self.store = store
        self.handle_store = handle_store
        self.interval = timedelta(hours=interval_hours)
        self.suggested_name = suggested_name
        self._revoked = False
        self._busy = False

        self.handle: Optional[BackupHandle] = None
        try:
            self.handle = handle_store.get(BACKUP_HANDLE_KEY)
        except Exception as e:
            logger.error(f"Could not restore backup file handle: {e}")

    @property
    def state(self) -> str:
        if self.handle is not None:
            return ACTIVE
        return REVOKED if self._revoked else UNSET

    @property
    def busy(self) -> bool:
        return self._busy

    async def choose_file(self, picker: FilePicker) -> Optional[BackupHandle]:
        """Let the user pick the backup file and remember it.

        Returns:
            The new handle, or None if the user cancelled.

        Raises:
            CapabilityUnsupported: If the host has no file picker.
        """
        try:
            handle = await picker.choose_file(self.suggested_name)
        except PickerCancelled:
            logger.debug("Backup file selection cancelled")
            return None

        self.handle = handle
        self._revoked = False
        try:
            self.handle_store.put(BACKUP_HANDLE_KEY, handle)
        except Exception as e:
            logger.error(f"Could not save backup file handle: {e}")

        logger.info(f"Backup file set to {handle.name}")
        return handle

    def forget_handle(self) -> None:
        """Drop the handle from memory and from the handle store."""
        self.handle = None
        try:
            self.handle_store.delete(BACKUP_HANDLE_KEY)
        except Exception as e:
            logger.error(f"Could not remove backup file handle: {e}")

    def is_due(self, settings: Settings, now: Optional[datetime] = None) -> bool:
        """Decide whether an automatic backup should run.

        Returns:
            False without a backup file; otherwise True if there has never
            been a backup or the last one is older than the interval.
        """
        if self.handle is None:
            return False
        if settings.last_backup_at is None:
            return True
        now = now or datetime.now(timezone.utc)
        return now - settings.last_backup_at > self.interval

    async def sync(self, doc: Document, reason: str) -> Optional[datetime]:
        """Write the whole document to the backup file.

        A call made while another sync is still running returns immediately
        without doing anything.

        Args:
            doc: The document to back up.
            reason: Why the backup runs (logged).

        Returns:
            The new backup timestamp, or None if nothing was written.

        Raises:
            BackupPermissionRevoked: If the file may no longer be written.
                The handle has been forgotten; the user must choose again.
        """
        if self._busy:
            logger.debug(f"Backup already in progress, skipping ({reason})")
            return None
        if self.handle is None:
            logger.debug(f"No backup file chosen, skipping ({reason})")
            return None

        self._busy = True
        handle = self.handle
        try:
            permission = await handle.query_permission("readwrite")
            if permission != PermissionState.GRANTED:
                logger.warning(f"Lost write permission for backup file {handle.name}")
                self.forget_handle()
                self._revoked = True
                raise BackupPermissionRevoked(
                    f"Backup file {handle.name} needs to be chosen again"
                )

            writable = await handle.create_writable()
            await writable.write(export_json(doc))
            await writable.close()

            now = datetime.now(timezone.utc)
            doc.settings.last_backup_at = now
            self.store.save(doc)

            logger.info(f"Backup written to {handle.name} ({reason})")
            return now
        except BackupPermissionRevoked:
            raise
        except Exception as e:
            logger.error(f"Backup failed ({reason}): {e}")
            return None
        finally:
            self._busy = False

    async def check_daily_backup(self, doc: Document) -> Optional[datetime]:
        """Run an automatic backup if one is due. Called when the app opens."""
        if not self.is_due(doc.settings):
            return None
        return await self.sync(doc, AUTOMATIC)
