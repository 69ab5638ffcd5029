"""Populate a target structure from the system credential store.

Secrets are addressed by a logical service name (SourceConfig.name) and
a field key (the field's kind tag). In keyring terms the field key is
the keyring service and the logical name is the username, so entries
written by other tools sharing this layout are found.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field

import keyring
import structlog
from keyring.errors import KeyringError, PasswordDeleteError

from envsource.coercion import assign
from envsource.errors import CoercionError, CredentialStoreError, FieldCoercionError
from envsource.fields import describe_fields, get_keys, is_skipped
from envsource.models import SourceConfig
from envsource.observability.logging import get_logger


class CredentialStore:
    """Thin adapter over the active keyring backend."""

    def get(self, service: str, key: str) -> str | None:
        """Fetch a secret, or None when no entry exists."""
        try:
            return keyring.get_password(key, service)
        except KeyringError as exc:
            raise CredentialStoreError(
                f"failed to read secret {key} for {service}: {exc}", service, key
            ) from exc

    def set(self, service: str, key: str, value: str) -> None:
        """Create or replace a secret."""
        try:
            keyring.set_password(key, service, value)
        except KeyringError as exc:
            raise CredentialStoreError(
                f"failed to write secret {key} for {service}: {exc}", service, key
            ) from exc

    def delete(self, service: str, key: str) -> None:
        """Remove a secret."""
        try:
            keyring.delete_password(key, service)
        except PasswordDeleteError as exc:
            raise CredentialStoreError(
                f"secret {key} for {service} not found: {exc}", service, key
            ) from exc
        except KeyringError as exc:
            raise CredentialStoreError(
                f"failed to delete secret {key} for {service}: {exc}", service, key
            ) from exc


@dataclass(frozen=True)
class Secret:
    """One fetched secret."""

    name: str
    value: str


@dataclass
class SecretSet:
    """Secrets fetched for one resolution call."""

    service: str
    secrets: list[Secret] = field(default_factory=list)

    def __iter__(self) -> Iterator[Secret]:
        return iter(self.secrets)

    def __len__(self) -> int:
        return len(self.secrets)

    def to_map(self, *skip: str) -> dict[str, str]:
        """Map secret names to values, leaving out the skipped names."""
        return {secret.name: secret.value for secret in self.secrets if secret.name not in skip}


def fetch_secrets(
    service: str,
    *keys: str,
    store: CredentialStore | None = None,
) -> SecretSet:
    """Fetch the given keys for a service.

    Keys with no entry in the store are left out of the result.
    """
    store = store or CredentialStore()
    secrets = SecretSet(service=service)
    for key in keys:
        value = store.get(service, key)
        if value is None:
            continue
        secrets.secrets.append(Secret(name=key, value=value))
    return secrets


def update_key(service: str, key: str, value: str) -> None:
    """Create or replace a single secret in the credential store."""
    CredentialStore().set(service, key, value)


def remove_key(service: str, key: str) -> None:
    """Remove a single secret from the credential store."""
    CredentialStore().delete(service, key)


def build_from_store(
    config: SourceConfig,
    secrets: SecretSet | None = None,
    *skip: str,
    store: CredentialStore | None = None,
    logger: structlog.stdlib.BoundLogger | None = None,
) -> None:
    """Populate config.target from credential store secrets.

    Each non-skipped field is matched by its kind tag only. A field whose
    secret is missing keeps its current value; this is not an error.

    Args:
        config: Resolution request; name is the credential store service
        secrets: Pre-fetched secrets, fetched from the store when None
        *skip: Secret names to leave out of the lookup map
        store: Credential store adapter (defaults to the keyring backend)
        logger: Logger for debug events

    Raises:
        CredentialStoreError: If the keyring backend fails
        FieldCoercionError: If a secret cannot be assigned to its field
    """
    log = logger or get_logger(__name__, debug=config.debug)

    if secrets is None:
        keys = get_keys(config.target, config.tag_kind, config.skip_fields)
        log.debug("fetching_secrets", service=config.name, key_count=len(keys))
        secrets = fetch_secrets(config.name, *keys, store=store)
    secret_map = secrets.to_map(*skip)

    populated = 0
    for spec in describe_fields(config.target):
        if is_skipped(spec, config.skip_fields):
            continue
        tag = spec.tag(config.tag_kind)
        if not tag or tag not in secret_map:
            continue
        try:
            assign(config.target, spec, secret_map[tag])
        except CoercionError as exc:
            raise FieldCoercionError(spec.name, exc.message) from exc
        populated += 1

    log.debug("secrets_loaded", service=config.name, field_count=populated)