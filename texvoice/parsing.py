"""Shared parsing helpers for config, environment and CLI value normalization."""

from __future__ import annotations

import re

_TRUE_BOOLEAN_TOKENS = frozenset({"1", "true", "yes", "on"})
_FALSE_BOOLEAN_TOKENS = frozenset({"0", "false", "no", "off"})
_BITRATE_RE = re.compile(r"^[1-9]\d*k$")


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


def parse_permissive_boolean(value: object) -> bool | None:
    """Parse a permissive boolean token and return `None` for invalid values."""

    if isinstance(value, bool):
        return value

    normalized = normalize_optional_string(value)
    if normalized is None:
        return None

    token = normalized.lower()
    if token in _TRUE_BOOLEAN_TOKENS:
        return True
    if token in _FALSE_BOOLEAN_TOKENS:
        return False
    return None


def parse_positive_int(value: object, field_name: str) -> int:
    """Parse a positive integer from an int or a numeric string.

    Raises:
        ValueError: If the value is a boolean, non-numeric, or not positive.
    """

    if isinstance(value, bool):
        raise ValueError(f"`{field_name}` must be a positive integer.")
    if isinstance(value, int):
        parsed = value
    else:
        normalized = normalize_optional_string(value)
        try:
            parsed = int(normalized) if normalized is not None else 0
        except ValueError as exc:
            raise ValueError(f"`{field_name}` must be a positive integer.") from exc
    if parsed <= 0:
        raise ValueError(f"`{field_name}` must be a positive integer.")
    return parsed


def is_valid_bitrate(value: str) -> bool:
    """Return whether `value` is an ffmpeg kilobit bitrate such as `256k`."""

    return bool(_BITRATE_RE.fullmatch(value))


def parse_token_list(value: object, field_name: str) -> tuple[str, ...]:
    """Parse a list of tokens from a sequence or a comma/space separated string."""

    if value is None:
        return tuple()
    if isinstance(value, str):
        raw_items: list[object] = re.split(r"[,\s]+", value)
    elif isinstance(value, (list, tuple)):
        raw_items = list(value)
    else:
        raise ValueError(f"`{field_name}` must be a list or a comma-separated string.")
    tokens = [normalize_optional_string(item) for item in raw_items]
    return tuple(token for token in tokens if token is not None)
