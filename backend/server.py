"""FastAPI application wiring for the ticker sentiment API."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.deps import Services, build_services
from backend.routes import health as health_routes
from backend.routes import sentiment as sentiment_routes
from core.logging import configure_logging
from core.settings import get_settings

# Load .env once on process start; don't override existing env
load_dotenv(override=False)

log = logging.getLogger(__name__)


def create_app(services: Optional[Services] = None) -> FastAPI:
    """Build the API. Passing ``services`` skips client construction (tests)."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if services is not None:
            app.state.services = services
            yield
            return

        settings = get_settings()
        configure_logging(settings.log_path)
        async with httpx.AsyncClient(timeout=settings.http_timeout_sec) as client:
            app.state.services = build_services(settings, client)
            log.info(
                "backend.started",
                extra={"backend": app.state.services.backend, "port": settings.port},
            )
            yield
        log.info("backend.stopped")

    app = FastAPI(title="Ticker Sentiment API", lifespan=lifespan)
    if services is not None:
        app.state.services = services

    # The consumer is a browser extension running on arbitrary pages.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.include_router(health_routes.router)
    app.include_router(sentiment_routes.router)
    return app


app = create_app()


# ---------- Entrypoint ----------
def run(host: str = "0.0.0.0", port: Optional[int] = None) -> None:
    uvicorn.run(
        "backend.server:app",
        host=host,
        port=port or get_settings().port,
        reload=False,
        log_level="info",
    )


if __name__ == "__main__":
    run()
