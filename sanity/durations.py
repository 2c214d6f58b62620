"""Duration strings used by module frequencies — "30s", "10m", "1h30m", "2d"."""

from __future__ import annotations

import re

_UNITS: dict[str, float] = {
    "ms": 0.001,
    "s": 1,
    "m": 60,
    "h": 3600,
    "d": 86_400,
    "w": 604_800,
}

_PART = re.compile(r"(\d+(?:\.\d+)?)\s*(ms|s|m|h|d|w)", re.IGNORECASE)


def parse_duration(value: str | int | float) -> float:
    """Convert a duration string to seconds. Sub-second parts are kept.

    Bare numbers are seconds. Raises ``ValueError`` for empty, negative or
    unparseable values.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        if value < 0:
            raise ValueError(f"Invalid duration: {value!r}")
        return float(value)

    text = str(value).strip().replace(" ", "")
    if not text:
        raise ValueError("Empty duration")
    if text.isdigit():
        return float(text)

    total = 0.0
    pos = 0
    for match in _PART.finditer(text):
        if match.start() != pos:
            break
        amount, unit = match.groups()
        total += float(amount) * _UNITS[unit.lower()]
        pos = match.end()

    if pos != len(text):
        raise ValueError(f"Invalid duration: {value!r}")
    return total
