"""
Utility functions for Helixboard.

Includes:
- Case conversion (camelCase -> kebab-case) for derived endpoint paths
- JSON canonicalization (deterministic key order for API responses)
"""

from __future__ import annotations

from typing import Any


# =============================================================================
# Case conversion utilities
# =============================================================================


def to_kebab_case(name: str) -> str:
    """
    Convert camelCase to kebab-case.

    Every uppercase character except the first starts a new word, so
    acronyms are split letter by letter.

    Examples:
        getUserById -> get-user-by-id
        createUser -> create-user
        getAllUsersFromDB -> get-all-users-from-d-b
    """
    result = []
    for i, char in enumerate(name):
        if char.isupper() and i > 0:
            result.append("-")
        result.append(char.lower())
    return "".join(result)


# =============================================================================
# JSON canonicalization
# =============================================================================


def is_numeric_key(key: str) -> bool:
    """True for non-empty keys made only of ASCII digits."""
    return key != "" and all("0" <= char <= "9" for char in key)


def canonicalize(value: Any) -> Any:
    """
    Recursively impose a stable key order on a JSON value.

    Object keys are ordered as: numeric keys (by numeric value), then "id",
    then every other key in its input order. Arrays keep their order;
    scalars pass through unchanged.

    Example:
        {"name": "John", "id": "123", "2": "second", "1": "first"}
        ->
        {"1": "first", "2": "second", "id": "123", "name": "John"}
    """
    if isinstance(value, dict):
        numeric: list[tuple[str, Any]] = []
        id_items: list[tuple[str, Any]] = []
        other: list[tuple[str, Any]] = []

        for key, item in value.items():
            entry = (key, canonicalize(item))
            if is_numeric_key(key):
                numeric.append(entry)
            elif key == "id":
                id_items.append(entry)
            else:
                other.append(entry)

        numeric.sort(key=lambda entry: int(entry[0]))
        return dict(numeric + id_items + other)
    elif isinstance(value, list):
        return [canonicalize(item) for item in value]
    else:
        return value
