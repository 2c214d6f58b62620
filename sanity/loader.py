"""Module discovery and loading from Python files.

A module file defines a top-level ``module`` mapping::

    module = {
        "id": "helloWorld",
        "title": "Hello World module",
        "frequency": "1m",
        "handler": lambda: "Hello World!",
    }

A require file defines ``setup(sanity)`` (sync or async), run once before
modules are loaded, e.g. to inject a custom cache adapter.
"""

from __future__ import annotations

import glob
import hashlib
import importlib.util
import inspect
import logging
import re
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING, Any

from sanity.errors import ModuleLoadError, SanityConfigError

if TYPE_CHECKING:
    from sanity.core import Sanity

logger = logging.getLogger(__name__)

_LIST_SEP = re.compile(r"\s*[,;]+\s*")


def split_paths(spec: str | None) -> list[str]:
    """Split a comma / semicolon separated path list, dropping blanks."""
    if not spec:
        return []
    return [p for p in _LIST_SEP.split(spec.strip()) if p]


def discover(spec: str) -> list[Path]:
    """Expand glob patterns into a sorted, de-duplicated list of files."""
    found: dict[str, Path] = {}
    for pattern in split_paths(spec):
        matches = glob.glob(str(Path(pattern).expanduser()), recursive=True)
        if not matches:
            logger.info("No module files match %s", pattern)
        for match in matches:
            path = Path(match).resolve()
            if path.is_file():
                found[str(path)] = path
    return [found[k] for k in sorted(found)]


def import_file(path: Path) -> ModuleType:
    """Import a Python source file under a unique private module name."""
    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:10]
    name = f"_sanity_{path.stem}_{digest}"
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot import {path}")
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    return mod


def read_definition(path: Path) -> Any:
    """Import a module file and return its ``module`` definition."""
    try:
        mod = import_file(path)
    except Exception as e:
        raise ModuleLoadError(str(path), f"Import failed: {type(e).__name__}: {e}") from e

    if not hasattr(mod, "module"):
        raise ModuleLoadError(str(path), "File does not define a top-level 'module' mapping")
    return mod.module


async def run_require(path: str, sanity: Sanity) -> None:
    """Import a require file and call its ``setup(sanity)``."""
    logger.info("Running require file %s", path)
    try:
        mod = import_file(Path(path).expanduser().resolve())
        setup = getattr(mod, "setup", None)
        if not callable(setup):
            raise TypeError("No setup(sanity) function defined")
        result = setup(sanity)
        if inspect.isawaitable(result):
            await result
    except Exception as e:
        logger.warning("Error running require file %s: %s", path, e)
        raise SanityConfigError(f'Error during import of "{path}" - {e}') from e
