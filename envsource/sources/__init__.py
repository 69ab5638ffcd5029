"""Backing sources a target structure can be populated from.

- file: JSON or YAML config file, falling back to the environment
- environment: process environment variables, optionally prefixed
- credentials: the system credential store via keyring
"""

from envsource.sources.credentials import (
    CredentialStore,
    Secret,
    SecretSet,
    build_from_store,
    fetch_secrets,
    remove_key,
    update_key,
)
from envsource.sources.environment import load_from_env
from envsource.sources.file import find_config_file, load_file

__all__ = [
    "CredentialStore",
    "Secret",
    "SecretSet",
    "build_from_store",
    "fetch_secrets",
    "find_config_file",
    "load_file",
    "load_from_env",
    "remove_key",
    "update_key",
]
