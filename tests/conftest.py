"""Shared pytest fixtures for all tests."""

import pytest

from config import Config
from services.base import Services
from tests.helpers import MemoryHandleStore, MemoryStorage


@pytest.fixture
def test_config(tmp_path):
    """Create a test configuration pointing to a temporary directory.

    Args:
        tmp_path: pytest tmp_path fixture for temporary directory.

    Returns:
        Config: Test configuration object.
    """
    return Config(
        base_dir=tmp_path / "pocketbook",
        data_dir=tmp_path / "pocketbook" / "data",
        storage_key="test-document",
        handle_store_filename="handles",
        log_level="DEBUG",
        log_dir=tmp_path / "pocketbook" / "logs",
    )


@pytest.fixture
def storage():
    """In-memory key/value storage."""
    return MemoryStorage()


@pytest.fixture
def handle_store():
    """In-memory backup handle store."""
    return MemoryHandleStore()


@pytest.fixture
def services(test_config, storage, handle_store):
    """Create a Services container over in-memory storage.

    The document starts with the default categories seeded.

    Returns:
        Services: Services container for testing.
    """
    return Services(test_config, storage=storage, handle_store=handle_store)
