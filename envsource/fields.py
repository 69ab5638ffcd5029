"""Field discovery and lookup-key derivation for target structures.

A target is any dataclass instance or pydantic model instance. Each field
may declare tags keyed by kind ("json", "yaml", "env" or a custom kind):

    @dataclass
    class AppConfig:
        api_key: str = tagged("", json="api_key")

    class AppConfig(BaseModel):
        api_key: str = Field("", json_schema_extra={"json": "api_key"})

Field descriptors are rebuilt on every call; nothing here is cached.
"""

import dataclasses
from dataclasses import dataclass
from typing import Any, get_type_hints

from pydantic import BaseModel

from envsource.coercion import FieldKind, field_kind


@dataclass(frozen=True)
class FieldSpec:
    """Descriptor for one populatable field of a target."""

    name: str
    tags: dict[str, str]
    kind: FieldKind
    settable: bool

    def tag(self, kind: str) -> str:
        """Return the tag declared for a kind, or an empty string."""
        return self.tags.get(kind, "")


def _string_tags(source: Any) -> dict[str, str]:
    if not isinstance(source, dict):
        return {}
    return {key: value for key, value in source.items() if isinstance(value, str)}


def _describe_dataclass(target: Any) -> list[FieldSpec]:
    cls = type(target)
    try:
        hints = get_type_hints(cls, include_extras=True)
    except NameError:
        # annotations naming TYPE_CHECKING-only types stay unresolved
        hints = {}
    frozen = cls.__dataclass_params__.frozen
    specs = []
    for item in dataclasses.fields(target):
        specs.append(
            FieldSpec(
                name=item.name,
                tags=_string_tags(dict(item.metadata)),
                kind=field_kind(hints.get(item.name, item.type)),
                settable=not frozen and not item.name.startswith("_"),
            )
        )
    return specs


def _describe_model(target: BaseModel) -> list[FieldSpec]:
    cls = type(target)
    frozen = bool(cls.model_config.get("frozen", False))
    specs = []
    for name, info in cls.model_fields.items():
        specs.append(
            FieldSpec(
                name=name,
                tags=_string_tags(info.json_schema_extra),
                kind=field_kind(info.annotation, info.metadata),
                settable=not frozen and not info.frozen and not name.startswith("_"),
            )
        )
    return specs


def describe_fields(target: Any) -> list[FieldSpec]:
    """Describe the fields of a target in declaration order.

    Args:
        target: Dataclass instance or pydantic model instance

    Returns:
        One FieldSpec per declared field

    Raises:
        TypeError: If the target is neither a dataclass nor a model instance
    """
    if isinstance(target, BaseModel):
        return _describe_model(target)
    if dataclasses.is_dataclass(target) and not isinstance(target, type):
        return _describe_dataclass(target)
    raise TypeError(
        f"target must be a dataclass or pydantic model instance, got {type(target).__name__}"
    )


def derive_key(spec: FieldSpec, kind: str, prefix: str = "") -> str:
    """Compute the lookup key for a field.

    Priority: the kind tag, then the yaml tag, then the env tag (all
    upper-cased), then the declared name as-is. A prefix is joined with
    an underscore.
    """
    if tag := spec.tag(kind):
        key = tag.upper()
    elif tag := spec.tag("yaml"):
        key = tag.upper()
    elif tag := spec.tag("env"):
        key = tag.upper()
    else:
        key = spec.name

    if prefix:
        key = f"{prefix}_{key}"
    return key


def is_skipped(spec: FieldSpec, skip_fields: list[str] | tuple[str, ...]) -> bool:
    """Whether a field is excluded from population by declared name."""
    return spec.name in skip_fields


def get_keys(
    target: Any,
    kind: str,
    skip_fields: list[str] | tuple[str, ...] = (),
) -> list[str]:
    """List the kind tag values of all non-skipped fields.

    Only fields carrying the kind tag are listed; the yaml/env/name
    fallbacks used by derive_key do not apply here. Tag values are
    returned as declared, not upper-cased.
    """
    keys = []
    for spec in describe_fields(target):
        if is_skipped(spec, skip_fields):
            continue
        if tag := spec.tag(kind):
            keys.append(tag)
    return keys


def tagged(
    default: Any = dataclasses.MISSING,
    *,
    default_factory: Any = dataclasses.MISSING,
    json: str | None = None,
    yaml: str | None = None,
    env: str | None = None,
    **custom: str,
) -> Any:
    """Declare a dataclass field carrying lookup tags.

    Custom tag kinds are passed as extra keyword arguments, e.g.
    ``tagged("", vault="db_pass")``.
    """
    tags = {"json": json, "yaml": yaml, "env": env, **custom}
    metadata = {kind: value for kind, value in tags.items() if value is not None}
    return dataclasses.field(
        default=default,
        default_factory=default_factory,
        metadata=metadata,
    )
