"""Capability interfaces for writing the backup file.

A BackupHandle stands for permission to write one user-chosen file across
sessions. The synchronizer only ever asks a handle whether it may still
write and opens it for writing; everything else about how the file was chosen
belongs to the host.
"""

import asyncio
import os
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from errors import PickerCancelled


class PermissionState(str, Enum):
    GRANTED = "granted"
    PROMPT = "prompt"
    DENIED = "denied"


class Writable(ABC):
    """An open, writable stream onto the backup file."""

    @abstractmethod
    async def write(self, data: str) -> None:
        """Append text to the pending file contents."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Commit the written contents to the file."""
        pass


class BackupHandle(ABC):
    """Abstract capability reference to an external writable file."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name of the file."""
        pass

    @abstractmethod
    async def query_permission(self, mode: str = "readwrite") -> PermissionState:
        """Report whether the handle may still be used in the given mode."""
        pass

    @abstractmethod
    async def create_writable(self) -> Writable:
        """Open the file for writing, replacing its contents on close.

        Raises:
            OSError: If the file cannot be opened.
        """
        pass


class FilePicker(ABC):
    """Host prompt that lets the user choose the backup file."""

    @abstractmethod
    async def choose_file(self, suggested_name: str) -> BackupHandle:
        """Ask the user for a file.

        Raises:
            PickerCancelled: If the user dismissed the prompt.
            CapabilityUnsupported: If the host cannot offer a file picker.
        """
        pass


class _FileWritable(Writable):
    """Buffers writes and moves a temp file over the target on close."""

    def __init__(self, path: Path):
        self.path = path
        self._chunks = []

    async def write(self, data: str) -> None:
        self._chunks.append(data)

    async def close(self) -> None:
        await asyncio.to_thread(self._commit, "".join(self._chunks))

    def _commit(self, text: str) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


@dataclass
class FileBackupHandle(BackupHandle):
    """Handle onto a file in the local filesystem.

    Plain data so it can be pickled into the handle store.
    """

    path: Path

    @property
    def name(self) -> str:
        return Path(self.path).name

    async def query_permission(self, mode: str = "readwrite") -> PermissionState:
        path = Path(self.path)
        target = path if path.exists() else path.parent
        if target.exists() and os.access(target, os.W_OK):
            return PermissionState.GRANTED
        return PermissionState.DENIED

    async def create_writable(self) -> Writable:
        path = Path(self.path)
        if not path.parent.is_dir():
            raise FileNotFoundError(f"Backup directory does not exist: {path.parent}")
        return _FileWritable(path)


class PathPicker(FilePicker):
    """Picker for non-interactive hosts: the path was chosen up front.

    Args:
        path: File to back up to, or None to behave as a cancelled prompt.
    """

    def __init__(self, path: Optional[Path]):
        self.path = path

    async def choose_file(self, suggested_name: str) -> BackupHandle:
        if self.path is None:
            raise PickerCancelled("No backup file chosen")
        path = Path(self.path).expanduser()
        if path.is_dir():
            path = path / suggested_name
        return FileBackupHandle(path=path.resolve())
