"""Shared parsing helpers for environment, YAML, and CLI value normalization."""

from __future__ import annotations

import math


_UNBOUNDED_TIMEOUT_TOKENS = frozenset({"none", "off", "0", "unbounded"})


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_timeout_seconds(value: object, field_name: str) -> float | None:
    """Parse a per-strategy timeout in seconds.

    Accepts positive numbers (ints, floats, or numeric strings). The tokens
    `none`, `off`, `unbounded`, and `0` select an unbounded wait and map to `None`.

    Raises:
        ValueError: If the value is negative, non-finite, non-numeric, or a boolean.
    """

    if isinstance(value, bool):
        raise ValueError(f"`{field_name}` must be a positive number of seconds.")
    if isinstance(value, (int, float)):
        parsed = float(value)
    else:
        normalized = normalize_optional_string(value)
        if normalized is None or normalized.lower() in _UNBOUNDED_TIMEOUT_TOKENS:
            return None
        try:
            parsed = float(normalized)
        except ValueError as exc:
            raise ValueError(
                f"`{field_name}` must be a positive number of seconds."
            ) from exc

    if parsed == 0:
        return None
    if parsed < 0 or not math.isfinite(parsed):
        raise ValueError(f"`{field_name}` must be a positive number of seconds.")
    return parsed


def parse_string_list(value: object, field_name: str) -> tuple[str, ...]:
    """Parse a comma-separated string or a sequence into a tuple of non-blank strings."""

    if isinstance(value, str):
        items: list[object] = list(value.split(","))
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        raise ValueError(f"`{field_name}` must be a list or comma-separated string.")

    parsed = tuple(
        normalized
        for normalized in (normalize_optional_string(item) for item in items)
        if normalized is not None
    )
    if not parsed:
        raise ValueError(f"`{field_name}` must contain at least one value.")
    return parsed
