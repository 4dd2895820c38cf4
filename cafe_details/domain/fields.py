"""Field access shared by the domain functions."""

from typing import Any, Mapping, Optional


def get_field(item: Any, *names: str) -> Optional[Any]:
    """
    Read the first present field from a mapping or an object.

    Reviews arrive either as dataclasses or as raw JSON dicts, and the two
    sources spell some fields differently (`user_id` / `userId`).
    """
    for name in names:
        if isinstance(item, Mapping):
            if name in item:
                return item[name]
        elif hasattr(item, name):
            return getattr(item, name)
    return None


def to_rating(value: Any) -> float:
    """Coerce a stored or API rating to a number, 0 when missing or malformed."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0
    return 0
