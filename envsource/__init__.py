"""Populate configuration structures from files, env vars or the keyring.

Usage:
    from dataclasses import dataclass

    from envsource import EnvType, SourceConfig, get, tagged

    @dataclass
    class AppConfig:
        api_key: str = tagged("", json="api_key")
        database_url: str = tagged("", json="database_url")

    cfg = AppConfig()
    get(EnvType.PROD, SourceConfig(name="config.json", target=cfg))

The source depends on the environment type:
1. local, dev: the system credential store, keyed by SourceConfig.name
2. prod: the config file, or env vars when the file does not exist
"""

from envsource.errors import (
    CoercionError,
    CredentialStoreError,
    DecodeError,
    EnvSourceError,
    FieldCoercionError,
    FileReadError,
    MissingEnvironmentError,
    UnsupportedEnvironmentError,
    UnsupportedFormatError,
)
from envsource.fields import FieldSpec, derive_key, describe_fields, get_keys, tagged
from envsource.loader import get, load_config
from envsource.models import ConfigType, EnvType, SourceConfig
from envsource.observability.logging import get_logger, setup_logging
from envsource.sources import (
    CredentialStore,
    Secret,
    SecretSet,
    build_from_store,
    fetch_secrets,
    load_file,
    load_from_env,
    remove_key,
    update_key,
)

__all__ = [
    "CoercionError",
    "ConfigType",
    "CredentialStore",
    "CredentialStoreError",
    "DecodeError",
    "EnvSourceError",
    "EnvType",
    "FieldCoercionError",
    "FieldSpec",
    "FileReadError",
    "MissingEnvironmentError",
    "Secret",
    "SecretSet",
    "SourceConfig",
    "UnsupportedEnvironmentError",
    "UnsupportedFormatError",
    "build_from_store",
    "derive_key",
    "describe_fields",
    "fetch_secrets",
    "get",
    "get_keys",
    "get_logger",
    "load_config",
    "load_file",
    "load_from_env",
    "remove_key",
    "setup_logging",
    "tagged",
    "update_key",
]
