"""Module contract and report models.

``Module`` holds callables so it stays a plain dataclass; the report side is
pydantic so it serializes straight to JSON for the HTTP endpoint.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, Field

# ── Status ───────────────────────────────────────────────────────────────────


class Status(str, Enum):
    PASS = "PASS"  # handler passed
    WARN = "WARN"
    FAIL = "FAIL"  # handler reported a failure
    TIME = "TIME"  # timeout, reported by the handler itself
    ERRO = "ERRO"  # handler raised or returned garbage


FAILING_STATUSES = frozenset({Status.FAIL, Status.ERRO})


class Verdict(str, Enum):
    PASS = "PASS"
    FAIL = "FAIL"


# ── Module contract ──────────────────────────────────────────────────────────

RawResult = Union[str, list[str], dict[str, Any]]
Handler = Callable[[], Union[RawResult, Awaitable[RawResult]]]
SetupHook = Callable[[], Union[None, Awaitable[None]]]


@dataclass
class Module:
    """A single named health check."""

    id: str
    handler: Handler
    title: str | None = None
    frequency: str | None = None  # duration string, enables caching
    enabled: bool = True
    setup: SetupHook | None = None
    setup_has_run: bool = False
    ttl_seconds: float | None = None  # parsed from frequency at registration
    source: str | None = None

    @property
    def cacheable(self) -> bool:
        return bool(self.frequency)


# ── Reports ──────────────────────────────────────────────────────────────────


class ModuleReport(BaseModel):
    """One normalized outcome line."""

    id: str
    status: Status
    text: str | None = None
    cached: str | None = None  # ISO-8601 of the cached run, if served from cache


class Report(BaseModel):
    """Result of one execution cycle."""

    verdict: Verdict
    summary: dict[Status, int] = Field(default_factory=dict)
    modules: dict[str, ModuleReport] = Field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Plain-JSON view with absent optional fields dropped."""
        return self.model_dump(mode="json", exclude_none=True)
