"""FastAPI application for order confirmation calls."""
from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware

from .core.config import Settings, get_settings
from .db.session import build_engine, build_session_factory
from .routers import calls, orders
from .services.follow_up import FollowUpScheduler
from .services.gateway import VapiCallGateway

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the storage handle and provider client, and release them on shutdown."""

    settings: Settings = app.state.settings
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    engine = build_engine(settings)
    session_factory = build_session_factory(engine)
    gateway = VapiCallGateway.from_settings(settings)
    scheduler = FollowUpScheduler(
        gateway,
        session_factory,
        delay_seconds=settings.follow_up_delay_seconds,
    )

    app.state.session_factory = session_factory
    app.state.call_gateway = gateway
    app.state.follow_up_scheduler = scheduler
    logger.info("Backend started (env=%s)", settings.app_env)

    try:
        yield
    finally:
        await scheduler.shutdown()
        await gateway.aclose()
        await engine.dispose()
        logger.info("Backend stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    application = FastAPI(title="Curbside Calls API", version="0.1.0", lifespan=lifespan)
    application.state.settings = settings

    if settings.cors_allow_origins:
        application.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_allow_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    application.include_router(orders.router, prefix="/api")
    application.include_router(calls.router, prefix="/api")

    @application.get("/api/health", tags=["meta"])
    async def health() -> dict[str, str]:
        """Simple liveness probe."""

        return {"status": "ok"}

    @application.head("/api/health", tags=["meta"])
    async def health_head() -> Response:
        """Allow HEAD for uptime monitors that only need the status code."""

        return Response(status_code=200)

    return application


app = create_app()
