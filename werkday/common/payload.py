"""Tolerant accessors for loosely-shaped upstream JSON payloads."""

from typing import Any


def safe_dict(value: Any) -> dict[str, Any]:
    """Return dict-like values, else empty dict."""
    return value if isinstance(value, dict) else {}


def safe_list(value: Any) -> list[Any]:
    """Return list-like values, else empty list."""
    return value if isinstance(value, list) else []


def safe_str(value: Any) -> str:
    """Return stripped string for scalars, empty string for None/containers."""
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()
