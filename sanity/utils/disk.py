"""Disk checks for a mount point or path."""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path


def check_disk(
    path: str | Path,
    min_free: float | None = None,
    writable: bool = False,
) -> dict[str, str]:
    """Check free space and, optionally, writability of ``path``.

    ``min_free`` is the minimum percentage of the disk that must be free.
    Returns a composite result, one status string per sub-check.
    """
    path = Path(path)
    results: dict[str, str] = {}

    try:
        usage = shutil.disk_usage(path)
    except OSError as e:
        return {"free": f"FAIL: Cannot stat {path}: {e}"}

    free_pct = usage.free / usage.total * 100 if usage.total else 0.0
    msg = f"{free_pct:.1f}% free ({_human(usage.free)} of {_human(usage.total)})"
    if min_free is not None and free_pct < min_free:
        results["free"] = f"FAIL: {msg}, minimum {min_free:g}%"
    else:
        results["free"] = msg

    if writable:
        target = path if path.is_dir() else path.parent
        try:
            with tempfile.NamedTemporaryFile(dir=target, prefix=".sanity-"):
                pass
            results["writable"] = f"{target} is writable"
        except OSError as e:
            results["writable"] = f"FAIL: {target} is not writable: {e}"

    return results


def _human(n: float) -> str:
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if n < 1024 or unit == "TB":
            return f"{n:.1f}{unit}"
        n /= 1024
    return f"{n:.1f}TB"
