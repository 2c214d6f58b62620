"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from sanity.cache import MemoryCache
from sanity.config import settings
from sanity.registry import ModuleRegistry


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests away from the real environment and ~/.cache."""
    monkeypatch.setattr(settings, "sanity_modules", "")
    monkeypatch.setattr(settings, "sanity_require", "")
    monkeypatch.setattr(settings, "sanity_cache_path", str(tmp_path / "cache.db"))


@pytest.fixture
def registry() -> ModuleRegistry:
    return ModuleRegistry()


@pytest.fixture
def cache() -> MemoryCache:
    return MemoryCache()


@pytest.fixture
def module_dir(tmp_path: Path) -> Path:
    """A directory with a few module files."""
    d = tmp_path / "modules"
    d.mkdir()
    (d / "ok.py").write_text(
        'module = {"id": "ok", "handler": lambda: "PASS: fine"}\n', encoding="utf-8",
    )
    (d / "warn.py").write_text(
        'module = {"id": "warn", "frequency": "1m", "handler": lambda: "WARN: meh"}\n',
        encoding="utf-8",
    )
    return d
