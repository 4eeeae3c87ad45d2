from __future__ import annotations

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from movie_hangman.api.routes import router
from movie_hangman.api.session import SessionStore, create_session_store
from movie_hangman.core.config import Settings, load_settings
from movie_hangman.core.tmdb import TMDBClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run the session sweeper for as long as the app is serving."""

    store: SessionStore = app.state.session_store
    task = asyncio.create_task(store.run_sweeper())
    app.state.sweeper_task = task
    logger.info("Session sweeper started (every %.0fs)", store.sweep_interval_s)
    try:
        yield
    finally:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        if app.state.owns_catalog:
            app.state.catalog.close()
        logger.info("Session sweeper stopped")


def create_app(
    *,
    settings: Settings | None = None,
    session_store: SessionStore | None = None,
    catalog=None,
) -> FastAPI:
    settings = settings or load_settings()

    app = FastAPI(title="Movie Hangman", version="0.1.0", lifespan=lifespan)

    # Attach shared components.
    app.state.settings = settings
    app.state.session_store = session_store or create_session_store(
        timeout_s=settings.session_timeout_s
    )
    app.state.owns_catalog = catalog is None
    app.state.catalog = catalog or TMDBClient(
        settings.tmdb_token,
        base_url=settings.tmdb_base_url,
        release_date_floor=settings.release_date_floor,
        timeout_s=settings.tmdb_timeout_s,
    )
    if not settings.tmdb_token:
        logger.warning("THE_MOVIE_DB_TOKEN is not set; TMDB requests will be rejected")

    # CORS is opt-in. Configure allowed origins via env var, e.g.
    #   MOVIE_HANGMAN_CORS_ORIGINS=https://your.site,https://admin.your.site
    if settings.cors_origins:
        # Allow '*' for quick demos; do not allow credentials with wildcard.
        allow_all = "*" in settings.cors_origins
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"] if allow_all else settings.cors_origins,
            allow_credentials=False,
            allow_methods=["GET", "OPTIONS"],
            allow_headers=["*"],
        )

    # Ensure unexpected errors don't leak internals.
    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(_request, exc: Exception):
        logger.exception("Unhandled error", exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    app.include_router(router)
    return app


app = create_app()
