"""HTTP endpoint — runs one cycle per request and returns the report.

Endpoints (via ``create_app``):
  GET /sanity       — plain text, ``SANITY:<verdict>`` header line
  GET /sanity.json  — the full report as JSON
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from sanity.core import Sanity
from sanity.render import render_text

logger = logging.getLogger(__name__)

RequestHandler = Callable[[Request], Awaitable[Response]]


def sanity_endpoint(
    sanity: Sanity,
    header: bool = True,
    use_cache: bool = True,
) -> RequestHandler:
    """Return a request handler that renders a fresh cycle as plain text.

    Mount it on any FastAPI / Starlette app, e.g.
    ``app.add_api_route("/health", sanity_endpoint(sanity))``.
    """

    async def handler(request: Request) -> Response:
        try:
            report = await sanity.exec(use_cache=use_cache)
        except Exception:
            logger.exception("Error invoking sanity endpoint")
            return PlainTextResponse("Internal Server Error", status_code=500)
        return PlainTextResponse(render_text(report, header=header))

    return handler


def sanity_json_endpoint(sanity: Sanity, use_cache: bool = True) -> RequestHandler:
    async def handler(request: Request) -> Response:
        try:
            report = await sanity.exec(use_cache=use_cache)
        except Exception:
            logger.exception("Error invoking sanity endpoint")
            return JSONResponse({"detail": "Internal Server Error"}, status_code=500)
        return JSONResponse(report.to_dict())

    return handler


def create_app(
    sanity: Sanity | None = None,
    paths: str | None = None,
    require: str | None = None,
    header: bool = True,
) -> FastAPI:
    """Create a FastAPI app serving sanity reports.

    Modules are loaded from ``paths`` / SANITY_MODULES on startup unless the
    given ``sanity`` already has modules registered.
    """
    sanity = sanity or Sanity()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if len(sanity.registry) == 0:
            await sanity.load_env(paths=paths, require=require)
        logger.info("Sanity endpoint ready: %d modules", len(sanity.registry))
        yield
        sanity.close()

    app = FastAPI(title="Sanity", version="0.1.0", lifespan=lifespan)
    app.state.sanity = sanity
    app.add_api_route("/sanity", sanity_endpoint(sanity, header=header), methods=["GET"])
    app.add_api_route("/sanity.json", sanity_json_endpoint(sanity), methods=["GET"])
    return app
