"""Report rendering — rich console lines for the CLI, plain text for HTTP."""

from __future__ import annotations

from rich.console import Console
from rich.text import Text

from sanity.models import ModuleReport, Report, Status, Verdict

STYLES: dict[str, str] = {
    "module": "on blue",
    "status_pass": "green",
    "status_warn": "yellow",
    "status_fail": "on red",
    "cached": "bright_black",
    "summary_label": "bold",
    "summary_value": "white",
    "verdict_label": "bold",
}


def _status_style(status: Status | Verdict) -> str:
    if status.value == "PASS":
        return STYLES["status_pass"]
    if status.value == "WARN":
        return STYLES["status_warn"]
    return STYLES["status_fail"]


def module_line(item: ModuleReport, width: int = 0) -> Text:
    """``STATUS id [padding] text (cached @ ts)``, padded to ``width``."""
    line = Text()
    line.append(item.status.value, style=_status_style(item.status))
    line.append(" ")
    line.append(item.id, style=STYLES["module"])
    prefix = len(line.plain)
    if prefix < width:
        line.append(" " * (width - prefix))
    if item.text:
        line.append(" ")
        line.append(item.text)
    if item.cached:
        line.append(" ")
        line.append(f"(cached @ {item.cached})", style=STYLES["cached"])
    return line


def summary_line(report: Report) -> Text:
    line = Text()
    for i, (status, count) in enumerate(report.summary.items()):
        if i:
            line.append(", ")
        line.append(status.value, style=STYLES["summary_label"])
        line.append(":")
        line.append(str(count), style=STYLES["summary_value"])
    return line


def verdict_line(report: Report) -> Text:
    line = Text()
    line.append("Verdict:", style=STYLES["verdict_label"])
    line.append(" ")
    line.append(report.verdict.value, style=_status_style(report.verdict))
    return line


def print_report(
    console: Console,
    report: Report,
    modules: bool = True,
    summary: bool = True,
    verdict: bool = True,
    align: bool = True,
) -> None:
    if modules:
        width = 0
        if align:
            width = max((len(m.status.value) + 1 + len(m.id) for m in report.modules.values()), default=0)
        for item in report.modules.values():
            console.print(module_line(item, width), highlight=False)

    if summary:
        console.print()
        console.print(summary_line(report), highlight=False)

    if verdict:
        console.print()
        console.print(verdict_line(report), highlight=False)


def render_text(report: Report, header: bool = True) -> str:
    """Plain-text form served by the HTTP endpoint."""
    lines = [f"SANITY:{report.verdict.value}"] if header else []
    for item in report.modules.values():
        parts = [f"{item.status.value}:", item.id]
        if item.text:
            parts.append(item.text.replace("\n", " \\\\ "))
        lines.append(" ".join(parts))
    return "\n".join(lines)
