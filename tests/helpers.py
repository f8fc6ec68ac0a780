"""Test doubles for storage and backup capabilities."""

import asyncio

from backup.handles import BackupHandle, FilePicker, PermissionState, Writable
from errors import PickerCancelled


class MemoryStorage:
    """Key/value storage double that keeps items in a dict.

    Set ``fail_writes`` to make every write raise OSError, like a full disk.
    """

    def __init__(self, items=None):
        self.items = dict(items or {})
        self.fail_writes = False
        self.writes = 0

    def get_item(self, key):
        return self.items.get(key)

    def set_item(self, key, value):
        if self.fail_writes:
            raise OSError("No space left on device")
        self.items[key] = value
        self.writes += 1

    def remove_item(self, key):
        self.items.pop(key, None)


class MemoryHandleStore:
    """Handle store double that keeps objects in a dict."""

    def __init__(self):
        self.items = {}

    def get(self, key):
        return self.items.get(key)

    def put(self, key, value):
        self.items[key] = value

    def delete(self, key):
        self.items.pop(key, None)


class FakeWritable(Writable):
    def __init__(self, handle):
        self.handle = handle
        self.chunks = []

    async def write(self, data):
        # Yield so concurrent callers get a chance to run mid-write
        await asyncio.sleep(0)
        if self.handle.fail_writes:
            raise OSError("Disk unavailable")
        self.chunks.append(data)

    async def close(self):
        await asyncio.sleep(0)
        self.handle.contents.append("".join(self.chunks))


class FakeHandle(BackupHandle):
    """Backup handle double recording everything written to it."""

    def __init__(self, name="backup.json", permission=PermissionState.GRANTED):
        self._name = name
        self.permission = permission
        self.fail_writes = False
        self.contents = []

    @property
    def name(self):
        return self._name

    async def query_permission(self, mode="readwrite"):
        await asyncio.sleep(0)
        return self.permission

    async def create_writable(self):
        return FakeWritable(self)


class FakePicker(FilePicker):
    """Picker double returning a fixed handle or raising a fixed error."""

    def __init__(self, handle=None, error=None):
        self.handle = handle
        self.error = error
        self.calls = 0

    async def choose_file(self, suggested_name):
        self.calls += 1
        if self.error is not None:
            raise self.error
        if self.handle is None:
            raise PickerCancelled("cancelled")
        return self.handle
