"""Executor — runs one cycle over the registry and returns a Report.

Setup hooks and handlers within a phase run concurrently and are joined in
full. Every per-module task catches its own failure and turns it into an
ERRO record, so one broken check never hides the others.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any

from sanity.aggregator import aggregate
from sanity.cache import CacheAdapter
from sanity.errors import EmptyRegistryError
from sanity.models import Module, ModuleReport, Report, Status
from sanity.normalizer import normalize, splice
from sanity.registry import ModuleFilter, ModuleRegistry

logger = logging.getLogger(__name__)


class Executor:
    """Runs registered modules against an optional cache adapter.

    Sync handlers run in a thread pool so a blocking check doesn't stall the
    event loop for its siblings. Async handlers are awaited directly.

    A module never has more than one live sync call: while a previous call is
    still running, later cycles await that same call instead of starting a
    new one. The pool holds at least two workers per registered module (one
    handler, one setup hook), so a hung check only ever holds its own threads.
    """

    def __init__(
        self,
        registry: ModuleRegistry,
        cache: CacheAdapter | None = None,
        max_workers: int = 8,
    ) -> None:
        self.registry = registry
        self.cache = cache
        self._min_workers = max_workers
        self._pool: ThreadPoolExecutor | None = None
        self._pool_size = 0
        self._inflight: dict[str, Future[Any]] = {}
        self._setup_tasks: dict[str, asyncio.Future[str | None]] = {}

    async def run_cycle(
        self,
        use_cache: bool = True,
        filter: ModuleFilter | None = None,
    ) -> Report:
        """Execute every enabled module accepted by ``filter``.

        Raises ``EmptyRegistryError`` if nothing is registered; every other
        failure is contained to its module.
        """
        if len(self.registry) == 0:
            raise EmptyRegistryError()

        modules = self.registry.list_enabled(filter)
        setup_errors = await self._setup_phase(modules)

        results: dict[str, ModuleReport] = {}
        batches = await asyncio.gather(
            *(self._run_module(m, use_cache, setup_errors.get(m.id)) for m in modules)
        )
        for reports in batches:
            splice(results, reports)

        report = aggregate(results)
        logger.info(
            "Cycle finished: %s (%d modules, %d records)",
            report.verdict.value, len(modules), len(results),
        )
        return report

    async def _setup_phase(self, modules: list[Module]) -> dict[str, str]:
        """Run pending setup hooks, joining any already in flight.

        A hook is claimed (``setup_has_run``) before it starts, so overlapping
        cycles share one run. Returns ``setup failed`` messages by module id.
        """
        errors: dict[str, str] = {}
        waiting: list[tuple[str, asyncio.Future[str | None]]] = []
        for module in modules:
            if module.setup is None:
                continue
            task = self._setup_tasks.get(module.id)
            if task is None and not module.setup_has_run:
                module.setup_has_run = True
                task = asyncio.ensure_future(self._run_setup(module))
                self._setup_tasks[module.id] = task
            if task is None:
                continue
            if task.done():
                # left behind by a cycle that was cancelled before joining it
                del self._setup_tasks[module.id]
                error = _setup_outcome(task)
                if error is not None:
                    errors[module.id] = error
                continue
            waiting.append((module.id, task))

        if waiting:
            await asyncio.gather(
                *(asyncio.shield(task) for _, task in waiting),
                return_exceptions=True,
            )
        for module_id, task in waiting:
            if self._setup_tasks.get(module_id) is task:
                del self._setup_tasks[module_id]
            error = _setup_outcome(task)
            if error is not None:
                errors[module_id] = error
        return errors

    async def _run_setup(self, module: Module) -> str | None:
        try:
            await self._call(module.setup)
        except Exception as e:
            logger.exception("Setup hook failed for module %s", module.id)
            return f"setup failed: {_describe(e)}"
        return None

    async def _run_module(
        self,
        module: Module,
        use_cache: bool,
        setup_error: str | None = None,
    ) -> list[ModuleReport]:
        """Produce the records for one module. Never raises."""
        if setup_error is not None:
            return [ModuleReport(id=module.id, status=Status.ERRO, text=setup_error)]

        caching = use_cache and self.cache is not None and module.cacheable

        try:
            if caching:
                hit = await self.cache.get(module.id)
                if hit is not None:
                    logger.debug("Cache hit for %s (last run %s)", module.id, hit.get("last_run"))
                    return normalize(module.id, hit["value"], cached=hit.get("last_run"))

            raw = await self._call(module.handler, key=module.id)
            logger.debug("Got raw result %s = %r", module.id, raw)
            reports = normalize(module.id, raw)

            if caching:
                await self.cache.set(
                    module.id,
                    {
                        "last_run": datetime.now(timezone.utc).isoformat(),
                        "frequency": module.frequency,
                        "value": raw,
                    },
                    module.ttl_seconds or 0,
                )
            return reports
        except Exception as e:
            logger.debug("Module %s raised: %r", module.id, e)
            return [ModuleReport(id=module.id, status=Status.ERRO, text=_describe(e))]

    async def _call(self, fn: Callable[[], Any], key: str | None = None) -> Any:
        """Invoke ``fn``; sync callables go to the pool, shared per ``key``."""
        if inspect.iscoroutinefunction(fn):
            return await fn()

        future = self._inflight.get(key) if key is not None else None
        if future is None or future.done():
            future = self._get_pool().submit(fn)
            if key is not None:
                self._inflight[key] = future
        else:
            logger.info("Module %s is still running from an earlier cycle, joining it", key)

        result = await asyncio.shield(asyncio.wrap_future(future))
        if inspect.isawaitable(result):
            result = await result
        return result

    def _get_pool(self) -> ThreadPoolExecutor:
        size = max(self._min_workers, 2 * len(self.registry))
        if self._pool is None or size > self._pool_size:
            if self._pool is not None:
                self._pool.shutdown(wait=False)
            self._pool = ThreadPoolExecutor(max_workers=size, thread_name_prefix="sanity")
            self._pool_size = size
        return self._pool

    def close(self) -> None:
        if self._pool is not None:
            self._pool.shutdown(wait=False)
            self._pool = None


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def _setup_outcome(task: asyncio.Future[str | None]) -> str | None:
    if task.cancelled():
        return "setup failed: cancelled"
    exc = task.exception()
    if exc is not None:
        return f"setup failed: {_describe(exc)}"
    return task.result()
