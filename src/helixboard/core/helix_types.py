"""
Helix type system.

Parses Helix type names and converts raw wire strings into typed JSON values.

Grammar:
    String | I32 | I64 | U32 | U64 | U128 | F64 | ID
    [T]          canonical array form
    Array(T)     legacy array form (accepted on input, never produced)

Usage:
    t = parse_type("[F64]")
    to_text(t)                      # "[F64]"
    coerce("1.0, 2.0", t)           # [1.0, 2.0]
    coerce("42", parse_type("I32")) # 42
"""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .errors import ConversionError, TypeParseError


SCALAR_NAMES = ("String", "I32", "I64", "U32", "U64", "U128", "F64", "ID")

ARRAY = "Array"


@dataclass(frozen=True)
class HelixType:
    """
    A Helix type expression.

    Scalars carry only their name; arrays carry kind "Array" and the
    element type. Instances are immutable and compare structurally.
    """
    kind: str
    inner: Optional[HelixType] = None

    @classmethod
    def array(cls, inner: HelixType) -> HelixType:
        return cls(ARRAY, inner)

    @property
    def is_array(self) -> bool:
        return self.kind == ARRAY

    def __str__(self) -> str:
        return to_text(self)


STRING = HelixType("String")
I32 = HelixType("I32")
I64 = HelixType("I64")
U32 = HelixType("U32")
U64 = HelixType("U64")
U128 = HelixType("U128")
F64 = HelixType("F64")
ID = HelixType("ID")


# =============================================================================
# Type names
# =============================================================================


def parse_type(text: str) -> HelixType:
    """
    Parse a type name.

    Scalar names match exactly (case-sensitive). Arrays accept `[T]` and the
    legacy `Array(T)`, recursively.

    Raises:
        TypeParseError: If the text is not a known type
    """
    if text in SCALAR_NAMES:
        return HelixType(text)

    if text.startswith("[") and text.endswith("]"):
        return HelixType.array(parse_type(text[1:-1]))

    if text.startswith("Array(") and text.endswith(")"):
        return HelixType.array(parse_type(text[6:-1]))

    raise TypeParseError(text)


def to_text(helix_type: HelixType) -> str:
    """Render a type in canonical form. Arrays always use `[T]`."""
    if helix_type.is_array:
        return f"[{to_text(helix_type.inner)}]"
    return helix_type.kind


# =============================================================================
# Value conversion
# =============================================================================

_SIGNED = re.compile(r"^[+-]?[0-9]+$")
_UNSIGNED = re.compile(r"^\+?[0-9]+$")

# (pattern, min, max) per fixed-width integer type
INTEGER_BOUNDS: dict[str, tuple[re.Pattern, int, int]] = {
    "I32": (_SIGNED, -(2**31), 2**31 - 1),
    "I64": (_SIGNED, -(2**63), 2**63 - 1),
    "U32": (_UNSIGNED, 0, 2**32 - 1),
    "U64": (_UNSIGNED, 0, 2**64 - 1),
    "U128": (_UNSIGNED, 0, 2**128 - 1),
}

_FLOAT = re.compile(
    r"^[+-]?(?:"
    r"(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
    r"|inf|infinity|nan"
    r")$",
    re.IGNORECASE,
)


def _parse_int(value: str, kind: str) -> int:
    """Parse an integer the way a fixed-width integer parse would."""
    pattern, lower, upper = INTEGER_BOUNDS[kind]

    if value == "":
        raise ValueError("cannot parse integer from empty string")
    if not pattern.match(value):
        raise ValueError("invalid digit found in string")

    number = int(value)
    if number > upper:
        raise ValueError("number too large to fit in target type")
    if number < lower:
        raise ValueError("number too small to fit in target type")
    return number


def _parse_float(value: str) -> float:
    """Parse a float literal. Non-finite spellings (inf, nan) are accepted here."""
    if not _FLOAT.match(value):
        raise ValueError("invalid float literal")
    return float(value)


def _coerce_string(value: str, helix_type: HelixType) -> Any:
    return value


def _coerce_integer(value: str, helix_type: HelixType) -> Any:
    try:
        return _parse_int(value, helix_type.kind)
    except ValueError as e:
        raise ConversionError(value, helix_type, str(e)) from e


def _coerce_u128(value: str, helix_type: HelixType) -> Any:
    # JSON numbers are doubles: values above 2**53 lose precision here.
    try:
        number = _parse_int(value, "U128")
    except ValueError as e:
        raise ConversionError(value, helix_type, str(e)) from e
    return float(number)


def _coerce_f64(value: str, helix_type: HelixType) -> Any:
    try:
        number = _parse_float(value)
    except ValueError as e:
        raise ConversionError(value, helix_type, str(e)) from e

    if not math.isfinite(number):
        raise ConversionError(value, helix_type, "Invalid float value for JSON")
    return number


def _coerce_array(value: str, helix_type: HelixType) -> Any:
    if helix_type.inner != F64:
        raise ConversionError(value, helix_type, "Array type not yet supported")
    return parse_f64_array(value)


def parse_f64_array(value: str) -> list[float]:
    """
    Parse a list of floats from a JSON array or a comma-separated string.

    Elements that are not finite numbers are dropped rather than rejected.

    Examples:
        "[1.0, 2.0]"    -> [1.0, 2.0]
        "1.0, 2.0"      -> [1.0, 2.0]
        "1.0, abc, 3"   -> [1.0, 3.0]
    """
    try:
        decoded = json.loads(value)
    except ValueError:
        decoded = None

    if isinstance(decoded, list):
        candidates = [
            float(item) for item in decoded
            if isinstance(item, (int, float)) and not isinstance(item, bool)
        ]
    else:
        candidates = []
        for part in value.split(","):
            try:
                candidates.append(_parse_float(part.strip()))
            except ValueError:
                continue

    return [number for number in candidates if math.isfinite(number)]


_CONVERTERS: dict[str, Callable[[str, HelixType], Any]] = {
    "String": _coerce_string,
    "ID": _coerce_string,
    "I32": _coerce_integer,
    "I64": _coerce_integer,
    "U32": _coerce_integer,
    "U64": _coerce_integer,
    "U128": _coerce_u128,
    "F64": _coerce_f64,
    ARRAY: _coerce_array,
}


def coerce(value: str, helix_type: HelixType) -> Any:
    """
    Convert a raw string into a JSON value matching the given type.

    Args:
        value: Raw string (e.g. from a URL query string)
        helix_type: Declared type of the value

    Returns:
        str, int, float or list[float]

    Raises:
        ConversionError: If the value does not fit the type
    """
    converter = _CONVERTERS.get(helix_type.kind)
    if converter is None:
        raise ConversionError(value, helix_type, "Unsupported type")
    return converter(value, helix_type)
