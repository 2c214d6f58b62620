"""Sanity facade — ties a registry, cache and executor together.

Create one per embedding (CLI run, web app, test) rather than sharing a
process-wide instance.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from sanity.cache import CacheAdapter, SqliteCache
from sanity.config import settings
from sanity.errors import SanityConfigError
from sanity.executor import Executor
from sanity.loader import discover, read_definition, run_require, split_paths
from sanity.models import Module, Report
from sanity.registry import ModuleFilter, ModuleRegistry

logger = logging.getLogger(__name__)


class Sanity:
    def __init__(
        self,
        registry: ModuleRegistry | None = None,
        cache: CacheAdapter | None = None,
    ) -> None:
        self.registry = registry or ModuleRegistry()
        self.cache = cache
        self._executor: Executor | None = None

    @property
    def modules(self) -> dict[str, Module]:
        return {m.id: m for m in self.registry}

    @property
    def executor(self) -> Executor:
        if self._executor is None:
            self._executor = Executor(self.registry, self.cache)
        self._executor.cache = self.cache
        return self._executor

    def load(self, source: Mapping[str, Any] | Module | str | Path) -> Module:
        """Register a module from a raw definition or a file path."""
        if isinstance(source, (str, Path)):
            logger.info("Loading module from path %s", source)
            return self.registry.register(read_definition(Path(source)), source=str(source))
        return self.registry.register(source)

    async def load_env(
        self,
        paths: str | None = None,
        require: str | None = None,
    ) -> list[Module]:
        """Run require files, prepare the cache, then load every module file.

        ``paths`` and ``require`` fall back to SANITY_MODULES / SANITY_REQUIRE.
        """
        for path in split_paths(require or settings.sanity_require):
            await run_require(path, self)

        if self.cache is None:
            db_path = Path(settings.sanity_cache_path) if settings.sanity_cache_path else None
            logger.info("Initialising fallback SQLite cache")
            self.cache = SqliteCache(db_path)
        await self.cache.init()

        spec = paths or settings.sanity_modules
        if not spec:
            raise SanityConfigError("Unable to determine SANITY_MODULES globpath")

        files = discover(spec)
        logger.info("Loading %d module files from %s", len(files), spec)
        return [self.load(f) for f in files]

    async def exec(
        self,
        use_cache: bool = True,
        filter: ModuleFilter | None = None,
    ) -> Report:
        """Run one cycle and return its Report."""
        return await self.executor.run_cycle(use_cache=use_cache, filter=filter)

    def close(self) -> None:
        if self._executor is not None:
            self._executor.close()
            self._executor = None
