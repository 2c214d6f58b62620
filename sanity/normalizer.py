"""Result normalizer — flattens raw handler output into ModuleReports.

Handlers may return:

* ``"text"`` — PASS with that text
* ``"WARN: text"`` — status prefix, one of the five status tokens
* ``["line", "line"]`` — a multi-line leaf, joined with newlines
* ``{"sub": <any of the above>}`` — composite, flattened as ``<id>/sub``
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping, Sequence
from typing import Any

from sanity.errors import MalformedResultError
from sanity.models import ModuleReport, Status

_TOKENS = {s.value: s for s in Status}


def parse_status(value: str) -> tuple[Status, str | None]:
    """Split ``"FAIL: disk full"`` into ``(Status.FAIL, "disk full")``.

    Strings without a recognised prefix are PASS with the full string as text.
    """
    head, sep, tail = value.partition(":")
    if sep and head in _TOKENS and tail[:1].isspace():
        return _TOKENS[head], tail.lstrip() or None
    return Status.PASS, value


def normalize(
    module_id: str,
    value: Any,
    *,
    status: Status | None = None,
    cached: str | None = None,
) -> list[ModuleReport]:
    """Convert a raw handler result into one or more ModuleReports.

    ``status`` overrides the parsed status (used for the ERRO path).
    Raises ``MalformedResultError`` for anything that isn't a string, a
    sequence of strings or a mapping of those.
    """
    if isinstance(value, str):
        if status is not None:
            return [ModuleReport(id=module_id, status=status, text=value, cached=cached)]
        parsed, text = parse_status(value)
        return [ModuleReport(id=module_id, status=parsed, text=text, cached=cached)]

    if isinstance(value, Mapping):
        reports: list[ModuleReport] = []
        for key, sub in value.items():
            reports.extend(normalize(f"{module_id}/{key}", sub, status=status, cached=cached))
        return reports

    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        if not all(isinstance(line, str) for line in value):
            raise MalformedResultError(module_id, value)
        return normalize(module_id, "\n".join(value), status=status, cached=cached)

    raise MalformedResultError(module_id, value)


def splice(modules: MutableMapping[str, ModuleReport], reports: list[ModuleReport]) -> None:
    """Insert ``reports`` into the cycle's module map. Last write wins."""
    for report in reports:
        modules[report.id] = report
