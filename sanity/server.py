"""Entry point for the HTTP endpoint — `sanity-server` console script."""

from __future__ import annotations

import logging

import uvicorn
from rich.console import Console
from rich.panel import Panel

from sanity.config import settings
from sanity.endpoint import create_app

console = Console()


def main() -> None:
    """Serve /sanity and /sanity.json with uvicorn."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.WARNING),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    console.print(
        Panel.fit(
            f"[bold]Sanity endpoint[/bold]\n"
            f"Bind:    {settings.sanity_host}:{settings.sanity_port}\n"
            f"Modules: {settings.sanity_modules or '(not set)'}\n"
            f"Require: {settings.sanity_require or '-'}",
            title="sanity-server",
            border_style="green",
        )
    )

    if not settings.sanity_modules:
        console.print("[yellow]WARNING: SANITY_MODULES is not set, startup will fail.[/yellow]\n")

    uvicorn.run(
        create_app(),
        host=settings.sanity_host,
        port=settings.sanity_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
