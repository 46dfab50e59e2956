"""
FastAPI application.

`create_app()` builds the app from explicit settings and an optional store,
so tests and the server entry point share one construction path.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from userapi.api.users import create_user_router
from userapi.auth.jwt import TokenCodec
from userapi.config import Settings, get_settings
from userapi.errors import ApiError
from userapi.services.users import UserService
from userapi.storage import UserStore, create_user_store

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, store: UserStore | None = None) -> FastAPI:
    """Build the API with its dependencies wired in."""
    settings = settings or get_settings()
    store = store or create_user_store(settings)

    if not settings.jwt_secret:
        logger.warning("JWT_SECRET not set - protected routes will answer 500")

    codec = TokenCodec.from_settings(settings)
    service = UserService(store, timeout_seconds=settings.store_operation_timeout_seconds)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await store.open()
        logger.info("User API started")
        try:
            yield
        finally:
            await store.close()
            logger.info("User API stopped")

    app = FastAPI(
        title="User API",
        description="User CRUD with bearer-token authentication",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        return exc.to_response()

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    app.include_router(create_user_router(service, codec))
    return app
