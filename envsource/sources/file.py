"""Populate a target structure from a JSON or YAML config file.

When the file cannot be found the environment source is used instead,
with the same prefix, tag kind and skip list.
"""

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog
import yaml

from envsource.coercion import assign_decoded
from envsource.errors import (
    CoercionError,
    DecodeError,
    FieldCoercionError,
    FileReadError,
    UnsupportedFormatError,
)
from envsource.fields import describe_fields, is_skipped
from envsource.models import ConfigType, SourceConfig
from envsource.observability.logging import get_logger
from envsource.sources.environment import load_from_env


def find_config_file(name: str, path: str = "") -> Path | None:
    """Locate a config file.

    The name is tried as given first, then joined to the directory
    (which defaults to the current one).

    Returns:
        The first candidate that exists, or None
    """
    candidates = [Path(name), Path(path or "./") / name]
    for candidate in candidates:
        if name and candidate.exists():
            return candidate
    return None


def _decode(data: str, format: str, raw_type: str, path: Path) -> Any:
    if format == ConfigType.JSON.value:
        try:
            return json.loads(data)
        except ValueError as exc:
            # JSONDecodeError, or an integer literal past the int digit limit
            raise DecodeError(f"failed to decode json file {path}: {exc}", str(path)) from exc
    if format == ConfigType.YAML.value:
        try:
            return yaml.safe_load(data)
        except (yaml.YAMLError, ValueError) as exc:
            raise DecodeError(f"failed to decode yaml file {path}: {exc}", str(path)) from exc
    raise UnsupportedFormatError(raw_type)


def _lookup(document: Mapping[str, Any], key: str) -> tuple[bool, Any]:
    if key in document:
        return True, document[key]
    folded = key.casefold()
    for doc_key, value in document.items():
        if isinstance(doc_key, str) and doc_key.casefold() == folded:
            return True, value
    return False, None


def populate_from_document(
    target: Any,
    document: Mapping[str, Any],
    kind: str,
    skip_fields: list[str] | tuple[str, ...] = (),
) -> None:
    """Copy decoded document values onto the target.

    Each field reads the document key named by its kind tag, or its
    declared name when untagged. Exact matches win over case-insensitive
    ones. Missing keys leave the field as it was. For yaml, plain numbers
    and bools load into string fields as their text.
    """
    for spec in describe_fields(target):
        if is_skipped(spec, skip_fields):
            continue
        found, value = _lookup(document, spec.tag(kind) or spec.name)
        if not found or value is None:
            continue
        try:
            assign_decoded(target, spec, value, scalar_text=kind == ConfigType.YAML.value)
        except CoercionError as exc:
            raise FieldCoercionError(spec.name, exc.message) from exc


def load_file(
    config: SourceConfig,
    logger: structlog.stdlib.BoundLogger | None = None,
) -> None:
    """Populate config.target from its file, or from env vars if absent.

    Raises:
        FileReadError: If the file exists but cannot be read
        UnsupportedFormatError: If config.type is neither json nor yaml
        DecodeError: If the file content is malformed
        FieldCoercionError: If a decoded value does not fit its field
        MissingEnvironmentError: On the env fallback, if keys are unset
    """
    log = logger or get_logger(__name__, debug=config.debug)

    conf_file = find_config_file(config.name, config.path)
    if conf_file is None:
        log.debug("config_file_not_found", file=config.name, path=config.path)
        load_from_env(
            config.target,
            config.tag_kind,
            prefix=config.env_prefix,
            skip_fields=config.skip_fields,
            logger=log,
        )
        return

    log.debug("loading_config_file", file=str(conf_file), format=config.format)
    try:
        with conf_file.open(encoding="utf-8") as f:
            data = f.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise FileReadError(f"failed to read file: {conf_file}: {exc}", str(conf_file)) from exc

    document = _decode(data, config.format, config.type, conf_file)
    if document is None:
        return
    if not isinstance(document, Mapping):
        raise DecodeError(
            f"config file {conf_file} must contain a mapping, got {type(document).__name__}",
            str(conf_file),
        )

    populate_from_document(config.target, document, config.format, config.skip_fields)
    log.debug("config_file_loaded", file=str(conf_file))
