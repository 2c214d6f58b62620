"""Id-matching filters for selecting which modules a cycle runs.

Each expression is an exact id, a ``/regex/`` or a glob (``disk*``).
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from fnmatch import fnmatchcase

from sanity.models import Module
from sanity.registry import ModuleFilter


def is_match(expressions: Iterable[str], value: str) -> bool:
    """True if any expression accepts ``value``."""
    for expr in expressions:
        if len(expr) > 2 and expr.startswith("/") and expr.endswith("/"):
            if re.search(expr[1:-1], value):
                return True
        elif any(ch in expr for ch in "*?["):
            if fnmatchcase(value, expr):
                return True
        elif expr == value:
            return True
    return False


def id_filter(expressions: Iterable[str]) -> ModuleFilter | None:
    """Build a module filter from match expressions, or None to accept all."""
    exprs = [e for e in expressions if e]
    if not exprs:
        return None

    def _accept(module: Module) -> bool:
        return is_match(exprs, module.id)

    return _accept
