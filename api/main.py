"""FastAPI application for the legacy redirects service."""

import logging

import fastapi
from fastapi import Request
from fastapi.responses import JSONResponse

from core.config import Settings, get_settings
from core.logger import configure_logging
from core.redirects import RouteRegistrar
from routes import LegacyRedirectHandler, RedirectHandler, health_router

configure_logging()
logger = logging.getLogger(__name__)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler for unhandled exceptions."""
    logger.exception(
        "unhandled.exception",
        extra={
            "exc_type": type(exc).__name__,
            "path": request.url.path,
            "method": request.method,
        },
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "An unexpected error occurred. Please try again."},
    )


def build_handlers(
    settings: Settings,
) -> list[RedirectHandler | LegacyRedirectHandler]:
    """Construct every handler the settings describe, most specific first.

    The legacy index is built here, synchronously, so a collision or a
    missing content directory aborts startup before any route exists.
    """
    handlers: list[RedirectHandler | LegacyRedirectHandler] = [
        RedirectHandler(rule) for rule in settings.redirect_rules
    ]
    if settings.legacy_enabled:
        handlers.append(
            LegacyRedirectHandler.from_directory(
                settings.normalized_legacy_prefix,
                settings.legacy_content_path,
                id_field=settings.legacy_id_field,
                posts_dir=settings.legacy_posts_dir,
            )
        )
    # Starlette matches routes in order: "a/b" before "a", "" last.
    handlers.sort(key=lambda h: len(h.prefix), reverse=True)
    return handlers


def register_handlers(
    router: RouteRegistrar,
    handlers: list[RedirectHandler | LegacyRedirectHandler],
) -> None:
    for handler in handlers:
        handler.register(router)


def create_app(settings: Settings | None = None) -> fastapi.FastAPI:
    """Build the app. Raises on invalid configuration."""
    settings = settings or get_settings()
    handlers = build_handlers(settings)

    app = fastapi.FastAPI(
        title="Legacy Redirects",
        description="Permanent redirects from legacy URLs to site permalinks",
        version="1.0.0",
        docs_url="/docs" if settings.docs_enabled else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.docs_enabled else None,
    )
    app.add_exception_handler(Exception, global_exception_handler)

    app.state.rule_count = len(settings.redirect_rules)
    app.state.legacy_id_count = sum(
        len(h.index) for h in handlers if isinstance(h, LegacyRedirectHandler)
    )

    # Health first so a catch-all prefix cannot shadow it
    app.include_router(health_router)
    register_handlers(app, handlers)

    logger.info(
        "app.routes_registered",
        extra={
            "prefixes": [h.prefix for h in handlers],
            "rules": app.state.rule_count,
            "legacy_ids": app.state.legacy_id_count,
        },
    )
    return app


app = create_app()
