"""Test factories for creating target structures."""

from tests.factories.targets import (
    AppConfig,
    DBConfig,
    FrozenSettings,
    ScalarConfig,
    ServiceSettings,
)

__all__ = [
    "AppConfig",
    "DBConfig",
    "FrozenSettings",
    "ScalarConfig",
    "ServiceSettings",
]
