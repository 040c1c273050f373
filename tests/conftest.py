# tests/conftest.py

"""Shared pytest fixtures for all storefront tests."""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from storefront.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_logs_dir(tmp_path: Path) -> Generator[Path, None, None]:
    """Point per-run log files at a temporary directory."""
    logs_dir = tmp_path / "logs"
    with patch.object(Settings, "LOGS_DIR", logs_dir):
        yield logs_dir


@pytest.fixture(autouse=True)
def no_emulators() -> Generator[None, None, None]:
    """Talk to the hosted endpoints (which every test mocks out)."""
    with patch.object(Settings, "FIRESTORE_EMULATOR_HOST", ""), patch.object(
        Settings, "FIREBASE_AUTH_EMULATOR_HOST", ""
    ):
        yield
