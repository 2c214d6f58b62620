"""Module registry — validates and stores loaded modules by unique id.

Single source of truth for the modules an Executor runs. Populate it before
running any cycle.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from typing import Any

from sanity.durations import parse_duration
from sanity.errors import ModuleLoadError
from sanity.models import Module

logger = logging.getLogger(__name__)

ModuleFilter = Callable[[Module], bool]


class ModuleRegistry:
    """Holds modules keyed by id. Rejects malformed or duplicate definitions."""

    def __init__(self) -> None:
        self._modules: dict[str, Module] = {}

    def register(self, definition: Mapping[str, Any] | Module, source: str | None = None) -> Module:
        """Validate ``definition`` and add it to the registry.

        Raises ``ModuleLoadError`` naming ``source`` and the violated rule;
        nothing is registered on failure.
        """
        module = _parse_module(definition, source)
        if module.id in self._modules:
            raise ModuleLoadError(source, f'Module ID "{module.id}" is already loaded')

        self._modules[module.id] = module
        logger.info("Loaded module %s", module.id)
        return module

    def unregister(self, module_id: str) -> Module | None:
        return self._modules.pop(module_id, None)

    def clear(self) -> None:
        self._modules.clear()

    def get(self, module_id: str) -> Module | None:
        return self._modules.get(module_id)

    def ids(self) -> list[str]:
        return list(self._modules)

    def list_enabled(self, filter: ModuleFilter | None = None) -> list[Module]:
        """Return enabled modules accepted by ``filter`` (all when omitted)."""
        return [
            m for m in self._modules.values()
            if m.enabled and (filter is None or filter(m))
        ]

    def __len__(self) -> int:
        return len(self._modules)

    def __contains__(self, module_id: object) -> bool:
        return module_id in self._modules

    def __iter__(self) -> Iterator[Module]:
        return iter(list(self._modules.values()))


# ── Parsers ──────────────────────────────────────────────────────────────────


def _parse_module(raw: Mapping[str, Any] | Module, source: str | None) -> Module:
    if isinstance(raw, Module):
        raw = {
            "id": raw.id,
            "title": raw.title,
            "frequency": raw.frequency,
            "enabled": raw.enabled,
            "setup": raw.setup,
            "handler": raw.handler,
        }

    if not isinstance(raw, Mapping):
        raise ModuleLoadError(source, "Loaded content does not resemble a sanity module")

    module_id = raw.get("id")
    if not isinstance(module_id, str) or not module_id.strip():
        raise ModuleLoadError(source, "Module 'id' is required")

    handler = raw.get("handler")
    if handler is None:
        raise ModuleLoadError(source, "No handler function specified")
    if not callable(handler):
        raise ModuleLoadError(source, "Module 'handler' must be callable")

    setup = raw.get("setup", raw.get("before"))
    if setup is not None and not callable(setup):
        raise ModuleLoadError(source, "Module 'setup' must be callable")

    enabled = raw.get("enabled", True)
    if not isinstance(enabled, bool):
        raise ModuleLoadError(source, "Module 'enabled' must be a boolean")

    frequency = raw.get("frequency") or None
    ttl = None
    if frequency is not None:
        try:
            ttl = parse_duration(frequency)
        except ValueError as e:
            raise ModuleLoadError(source, f"Invalid frequency: {e}") from e
        if ttl <= 0:
            raise ModuleLoadError(source, f"Invalid frequency: {frequency!r} must be positive")
        frequency = str(frequency)

    return Module(
        id=module_id,
        handler=handler,
        title=raw.get("title"),
        frequency=frequency,
        enabled=enabled,
        setup=setup,
        ttl_seconds=ttl,
        source=source,
    )
