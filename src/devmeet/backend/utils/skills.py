"""Skill tag normalization

Skill tags keep their display casing for presentation but are compared
exclusively through their comparison key (trimmed, lower-cased).
"""
from typing import Any, Iterable


def normalize_display(value: Any) -> str:
    """Trimmed display form of a single tag (``None`` -> ``""``)"""
    if value is None:
        return ""
    return str(value).strip()


def normalize_key(value: Any) -> str:
    """Comparison key of a single tag

    >>> normalize_key("  Python ") == normalize_key("python")
    True
    """
    return normalize_display(value).lower()


def _as_items(raw: Any) -> Iterable[Any]:
    if isinstance(raw, (list, tuple)):
        return raw
    if isinstance(raw, str):
        # Legacy clients send comma-separated strings
        return raw.split(",")
    return ()


def normalize_list(raw: Any) -> list[str]:
    """Clean a skill list

    Accepts a list or a legacy comma-separated string; any other input is
    treated as empty. Empty entries are dropped and duplicates (by key) are
    removed, keeping the first-seen display casing and the original order.
    """
    seen: set[str] = set()
    cleaned: list[str] = []
    for item in _as_items(raw):
        display = normalize_display(item)
        if not display:
            continue
        key = display.lower()
        if key in seen:
            continue
        seen.add(key)
        cleaned.append(display)
    return cleaned


def keys_of(raw: Any) -> set[str]:
    """Set of comparison keys of a skill list"""
    return {item.lower() for item in normalize_list(raw)}
