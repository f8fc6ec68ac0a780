"""Exception types shared across Pocketbook."""


class PocketbookError(Exception):
    """Base exception for Pocketbook operations."""

    pass


class ValidationError(PocketbookError, ValueError):
    """User input was rejected before any change was applied."""

    pass


class DocumentParseError(PocketbookError, ValueError):
    """Imported data is not valid JSON or not a JSON object."""

    pass


class BackupError(PocketbookError):
    """Base exception for backup file operations."""

    pass


class BackupPermissionRevoked(BackupError):
    """The backup file handle no longer has write permission.

    The handle has already been forgotten when this is raised; the user
    needs to choose the backup file again.
    """

    pass


class CapabilityUnsupported(PocketbookError):
    """The host does not provide a required capability (file picker, biometrics)."""

    pass


class PickerCancelled(PocketbookError):
    """The user dismissed the file picker."""

    pass
