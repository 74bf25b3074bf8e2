"""FastAPI application factory."""

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from link_registry.errors import (
    RegistryError,
    InvalidInput,
    KeyConflict,
    NotFound,
    Unauthorized,
    AuthenticationFailed,
)
from .api import api_router
from .web import web_router
from .middleware.logging import LoggingMiddleware

ERROR_STATUS = {
    InvalidInput: status.HTTP_400_BAD_REQUEST,
    AuthenticationFailed: status.HTTP_401_UNAUTHORIZED,
    Unauthorized: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_404_NOT_FOUND,
    KeyConflict: status.HTTP_409_CONFLICT,
}


async def registry_error_handler(request: Request, exc: RegistryError) -> JSONResponse:
    """Render a registry failure as ``{"error": code, "detail": message}``."""
    status_code = ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationFailed) else None
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.code, "detail": exc.message},
        headers=headers,
    )


def create_app(registry, config) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        registry: Registry instance (may be None and set later in a lifespan)
        config: Configuration instance

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Link Registry",
        description="Short links with owner-gated updates",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.state.registry = registry
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(RegistryError, registry_error_handler)

    # API first so /api/* is never taken for a short key
    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(web_router, tags=["Web"])

    return app
