"""Scalar type coercion for source values.

Values from env vars and the credential store arrive as text and are
converted to the field's declared scalar kind. Values decoded from a
config file may already be native and are checked instead.
"""

import math
import types
from collections.abc import Iterable
from enum import Enum
from typing import TYPE_CHECKING, Annotated, Any, Union, get_args, get_origin

from pydantic import ValidationError

from envsource.errors import CoercionError

if TYPE_CHECKING:
    from envsource.fields import FieldSpec

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
UINT64_MAX = 2**64 - 1

TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})


class FieldKind(str, Enum):
    """Scalar kinds a field can be populated with."""

    STRING = "string"
    INT = "int"
    UINT = "uint"
    BOOL = "bool"
    FLOAT = "float"
    UNSUPPORTED = "unsupported"


def _is_non_negative(metadata: Iterable[Any]) -> bool:
    for item in metadata:
        ge = getattr(item, "ge", None)
        if isinstance(ge, int) and ge >= 0:
            return True
        gt = getattr(item, "gt", None)
        if isinstance(gt, int) and gt >= -1:
            return True
        # Field(ge=0) inside Annotated carries its constraints as metadata
        nested = getattr(item, "metadata", None)
        if isinstance(nested, list) and _is_non_negative(nested):
            return True
    return False


def field_kind(annotation: Any, metadata: Iterable[Any] = ()) -> FieldKind:
    """Resolve a type annotation to the scalar kind used for coercion.

    Optional[X] resolves like X. An int constrained to be non-negative
    (NonNegativeInt, Field(ge=0)) resolves to UINT.
    """
    metadata = list(metadata)
    origin = get_origin(annotation)

    if origin is Annotated:
        base, *extra = get_args(annotation)
        return field_kind(base, [*metadata, *extra])

    if origin is Union or origin is types.UnionType:
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return field_kind(args[0], metadata)
        return FieldKind.UNSUPPORTED

    # bool before int: bool is an int subclass
    if annotation is bool:
        return FieldKind.BOOL
    if annotation is str:
        return FieldKind.STRING
    if annotation is int:
        return FieldKind.UINT if _is_non_negative(metadata) else FieldKind.INT
    if annotation is float:
        return FieldKind.FLOAT
    return FieldKind.UNSUPPORTED


def _parse_int(text: str) -> int:
    stripped = text[1:] if text[:1] in ("+", "-") else text
    if not stripped.isdigit() or not stripped.isascii():
        raise CoercionError(f'failed to parse integer value: invalid syntax "{text}"')
    value = int(text)
    if not INT64_MIN <= value <= INT64_MAX:
        raise CoercionError(f'failed to parse integer value: value out of range "{text}"')
    return value


def _parse_uint(text: str) -> int:
    if not text.isdigit() or not text.isascii():
        raise CoercionError(
            f'failed to parse unsigned integer value: invalid syntax "{text}"'
        )
    value = int(text)
    if value > UINT64_MAX:
        raise CoercionError(
            f'failed to parse unsigned integer value: value out of range "{text}"'
        )
    return value


def _parse_bool(text: str) -> bool:
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise CoercionError(f'failed to parse boolean value: invalid syntax "{text}"')


def _parse_float(text: str) -> float:
    if text != text.strip() or "_" in text:
        raise CoercionError(f'failed to parse float value: invalid syntax "{text}"')
    unsigned = text.lstrip("+-").lower()
    try:
        if unsigned.startswith("0x"):
            # hex floats need a binary exponent, e.g. 0x1p-2
            if "p" not in unsigned:
                raise ValueError(text)
            value = float.fromhex(text)
        else:
            value = float(text)
    except OverflowError as exc:
        raise CoercionError(f'failed to parse float value: value out of range "{text}"') from exc
    except ValueError as exc:
        raise CoercionError(f'failed to parse float value: invalid syntax "{text}"') from exc
    if math.isinf(value) and "inf" not in text.lower():
        raise CoercionError(f'failed to parse float value: value out of range "{text}"')
    return value


def coerce(kind: FieldKind, text: str) -> Any:
    """Convert a textual value to the given scalar kind.

    Args:
        kind: Target scalar kind
        text: Source value as text

    Returns:
        The converted value

    Raises:
        CoercionError: If the text does not parse or the kind is unsupported
    """
    if kind is FieldKind.STRING:
        return text
    if kind is FieldKind.INT:
        return _parse_int(text)
    if kind is FieldKind.UINT:
        return _parse_uint(text)
    if kind is FieldKind.BOOL:
        return _parse_bool(text)
    if kind is FieldKind.FLOAT:
        return _parse_float(text)
    raise CoercionError("unsupported field type")


def _check_native(kind: FieldKind, value: Any) -> Any:
    if kind is FieldKind.STRING and isinstance(value, str):
        return value
    if kind is FieldKind.BOOL and isinstance(value, bool):
        return value
    if isinstance(value, bool):
        raise CoercionError(f"cannot use bool value as {kind.value}")
    if kind is FieldKind.INT and isinstance(value, int):
        if not INT64_MIN <= value <= INT64_MAX:
            raise CoercionError(f"integer value out of range: {value}")
        return value
    if kind is FieldKind.UINT and isinstance(value, int):
        if not 0 <= value <= UINT64_MAX:
            raise CoercionError(f"unsigned integer value out of range: {value}")
        return value
    if kind is FieldKind.FLOAT and isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError as exc:
            raise CoercionError("float value out of range") from exc
    if kind is FieldKind.UNSUPPORTED:
        raise CoercionError("unsupported field type")
    raise CoercionError(f"cannot use {type(value).__name__} value as {kind.value}")


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _store(target: Any, spec: "FieldSpec", value: Any) -> None:
    try:
        setattr(target, spec.name, value)
    except ValidationError as exc:
        # models with validate_assignment run their own constraints here
        raise CoercionError(str(exc)) from exc


def assign(target: Any, spec: "FieldSpec", text: str) -> None:
    """Coerce a textual value and store it on the target field."""
    if not spec.settable:
        raise CoercionError("field cannot be set")
    _store(target, spec, coerce(spec.kind, text))


def assign_decoded(
    target: Any, spec: "FieldSpec", value: Any, *, scalar_text: bool = False
) -> None:
    """Store a value decoded from a config file on the target field.

    Strings are coerced like env values so quoted numbers still load.
    Other values must already match the field kind, except that with
    scalar_text a plain number or bool loads into a string field as its
    text (YAML `port: 5432` into a str field gives "5432").
    """
    if not spec.settable:
        raise CoercionError("field cannot be set")
    if isinstance(value, str):
        converted = coerce(spec.kind, value)
    elif (
        scalar_text
        and spec.kind is FieldKind.STRING
        and isinstance(value, (bool, int, float))
    ):
        converted = _scalar_text(value)
    else:
        converted = _check_native(spec.kind, value)
    _store(target, spec, converted)
