"""Report aggregator — tallies records into a summary and overall verdict."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping

from sanity.models import FAILING_STATUSES, ModuleReport, Report, Verdict


def aggregate(modules: Mapping[str, ModuleReport]) -> Report:
    """Build the final Report for a cycle.

    Summary only lists statuses that occur. The verdict is FAIL iff any
    record is FAIL or ERRO; WARN and TIME never flip it on their own.
    """
    summary = Counter(m.status for m in modules.values())
    failed = any(m.status in FAILING_STATUSES for m in modules.values())
    return Report(
        verdict=Verdict.FAIL if failed else Verdict.PASS,
        summary=dict(summary),
        modules=dict(modules),
    )
