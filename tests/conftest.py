"""Shared test fixtures for the envsource test suite."""

from collections.abc import Callable, Generator
from pathlib import Path

import keyring
import pytest
from keyring.backend import KeyringBackend
from keyring.errors import PasswordDeleteError

# Env var names used across the suite, cleared before every test
MANAGED_ENV_VARS = (
    "API_KEY",
    "DATABASE_URL",
    "YAE_API_KEY",
    "YAE_DATABASE_URL",
    "PORT",
    "DEBUG",
    "RATIO",
    "WORKERS",
    "NAME",
)


class MemoryKeyring(KeyringBackend):
    """In-process keyring backend keyed by (service, username)."""

    priority = 1  # type: ignore[assignment]

    def __init__(self) -> None:
        super().__init__()
        self.entries: dict[tuple[str, str], str] = {}

    def get_password(self, service: str, username: str) -> str | None:
        return self.entries.get((service, username))

    def set_password(self, service: str, username: str, password: str) -> None:
        self.entries[(service, username)] = password

    def delete_password(self, service: str, username: str) -> None:
        if (service, username) not in self.entries:
            raise PasswordDeleteError("Password not found")
        del self.entries[(service, username)]


@pytest.fixture
def memory_keyring() -> Generator[MemoryKeyring, None, None]:
    """Install an in-memory keyring backend for the duration of a test."""
    previous = keyring.get_keyring()
    backend = MemoryKeyring()
    keyring.set_keyring(backend)
    yield backend
    keyring.set_keyring(previous)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove suite-managed env vars so tests never see leftovers."""
    for name in MANAGED_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[str, str], Path]:
    """Factory fixture to write config files into a temporary directory.

    Usage:
        def test_something(write_config):
            path = write_config("config.json", '{"api_key": "x"}')
    """

    def _write(filename: str, content: str) -> Path:
        config_file = tmp_path / filename
        config_file.write_text(content)
        return config_file

    return _write

