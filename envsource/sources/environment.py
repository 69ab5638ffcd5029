"""Populate a target structure from process environment variables."""

import os
from typing import Any

import structlog

from envsource.coercion import assign
from envsource.errors import CoercionError, FieldCoercionError, MissingEnvironmentError
from envsource.fields import derive_key, describe_fields, is_skipped
from envsource.observability.logging import get_logger


def load_from_env(
    target: Any,
    kind: str,
    prefix: str = "",
    skip_fields: list[str] | tuple[str, ...] = (),
    logger: structlog.stdlib.BoundLogger | None = None,
) -> None:
    """Populate every non-skipped field from its env var.

    Unset or empty variables do not stop the pass; they are collected and
    reported together once every field has been visited. Fields set
    before that point keep their new values.

    Args:
        target: Dataclass or pydantic model instance to populate
        kind: Tag kind used first when deriving keys
        prefix: Optional env var prefix, joined with an underscore
        skip_fields: Declared field names to leave untouched
        logger: Logger for debug events

    Raises:
        FieldCoercionError: If a present value cannot be assigned
        MissingEnvironmentError: If any derived key was unset
    """
    log = logger or get_logger(__name__)
    log.debug("loading_config_from_env", prefix=prefix)

    missing: list[str] = []
    for spec in describe_fields(target):
        log.debug("loading_field", field=spec.name, kind=spec.kind.value)
        if is_skipped(spec, skip_fields):
            continue

        env_name = derive_key(spec, kind, prefix)
        env_value = os.environ.get(env_name, "")
        if not env_value:
            missing.append(env_name)
            continue

        try:
            assign(target, spec, env_value)
        except CoercionError as exc:
            raise FieldCoercionError(spec.name, exc.message) from exc
        log.debug("env_value_loaded", field=spec.name, env=env_name)

    if missing:
        for env_name in missing:
            log.debug("env_not_found", env=env_name)
        raise MissingEnvironmentError(missing)
