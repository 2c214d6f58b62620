"""Sanity — run pluggable health check modules and produce a pass/fail report."""

from sanity.aggregator import aggregate
from sanity.cache import CacheAdapter, MemoryCache, SqliteCache
from sanity.core import Sanity
from sanity.errors import (
    EmptyRegistryError,
    MalformedResultError,
    ModuleLoadError,
    SanityConfigError,
    SanityError,
)
from sanity.executor import Executor
from sanity.models import Module, ModuleReport, Report, Status, Verdict
from sanity.normalizer import normalize, parse_status
from sanity.registry import ModuleRegistry

__all__ = [
    "CacheAdapter",
    "EmptyRegistryError",
    "Executor",
    "MalformedResultError",
    "MemoryCache",
    "Module",
    "ModuleLoadError",
    "ModuleRegistry",
    "ModuleReport",
    "Report",
    "Sanity",
    "SanityConfigError",
    "SanityError",
    "SqliteCache",
    "Status",
    "Verdict",
    "aggregate",
    "normalize",
    "parse_status",
]
