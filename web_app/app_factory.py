"""FastAPI application factory."""

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shortlinks.errors import PersistenceError

from .api import api_router
from .web import web_router
from .middleware.client_context import ClientContextMiddleware
from .middleware.logging import LoggingMiddleware


async def _persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": f"Storage error: {exc}"},
    )


def create_app(config, service=None, lifespan=None) -> FastAPI:
    """Create the shortener application.

    Routes reach the service through ``app.state.service``. Pass it
    directly (tests, scripts) or let ``lifespan`` build it on startup.

    Args:
        config: Configuration instance
        service: URLShortenerService, optional when lifespan sets it
        lifespan: Optional lifespan context manager

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="URL Shortener",
        description="Expiring short links with click analytics",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(ClientContextMiddleware)
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(PersistenceError, _persistence_error_handler)

    app.include_router(api_router, prefix="/api", tags=["API"])
    # Registered last: its /{short_code} route matches any single segment
    app.include_router(web_router, tags=["Redirect"])

    return app
