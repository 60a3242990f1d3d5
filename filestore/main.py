"""FastAPI application entry point.

Wiring only: lifespan, exception handlers, middleware, routers and the
process-wide storage collaborators on app.state.

Settings are loaded inside create_app() so that tests can set env (and
clear the get_settings cache) before calling create_app().
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from filestore.api.v1 import api_router
from filestore.application.services.url_guard import UrlGuard
from filestore.core.config import get_settings
from filestore.core.exception_handlers import register_exception_handlers
from filestore.core.lifespan import create_lifespan
from filestore.infrastructure.external.http import RemoteFetcher
from filestore.infrastructure.external.storage import build_default_registry
from filestore.middleware import RequestIDMiddleware, RequestSizeLimitMiddleware


def create_app() -> FastAPI:
    """Build and return the FastAPI application. Settings are resolved here (deferred from import)."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    app.state.provider_registry = build_default_registry()
    app.state.url_guard = UrlGuard(resolve_dns=settings.remote_fetch_resolve_dns)
    app.state.remote_fetcher = RemoteFetcher(
        max_bytes=settings.remote_fetch_max_bytes,
        user_agent=settings.remote_fetch_user_agent,
        chunk_size=settings.upload_chunk_size,
    )

    register_exception_handlers(app)

    # Last added = outermost. Order: size limit → request ID → CORS.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware, header_name=settings.request_id_header)
    app.add_middleware(RequestSizeLimitMiddleware, max_bytes=settings.max_upload_size)

    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()
