"""
FastAPI application entry point for the remoting backend.

This module creates the FastAPI app instance, registers the transports and
maps remoting errors onto HTTP responses.

Error responses (REST):
    {"error": {"message": "...", "statusCode": 400}}

Status codes come from the error itself (CoercionError -> 400,
MethodNotFoundError -> 404, errors carrying `status_code`/`statusCode`);
anything else is a 500.
"""

import logging
from typing import List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from remoting.config import settings
from remoting.errors import RemotingError, error_to_dict
from remoting.routes.health import router as health_router
from remoting.routes.rest import router as rest_router
from remoting.routes.socket import router as socket_router
from remoting.services.remote_objects import RemoteObjects, remote_objects
from remoting.utils.logging import LOG_FORMAT

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format=LOG_FORMAT
)

logger = logging.getLogger(__name__)


def _get_cors_origins() -> List[str]:
    """
    Get allowed CORS origins based on environment.

    - ENVIRONMENT=production: CORS_ALLOWED_ORIGINS (none when unset)
    - anything else: all origins, for local development
    """
    if settings.is_production():
        if not settings.CORS_ALLOWED_ORIGINS:
            logger.warning(
                "CORS_ALLOWED_ORIGINS not set in production. "
                "No web origins allowed. Set CORS_ALLOWED_ORIGINS for web clients."
            )
        else:
            logger.info(f"CORS configured for production with {len(settings.CORS_ALLOWED_ORIGINS)} allowed origins")
        return list(settings.CORS_ALLOWED_ORIGINS)

    logger.info(f"CORS configured for {settings.ENVIRONMENT}: allowing all origins")
    return ["*"]


async def remoting_exception_handler(request: Request, exc: RemotingError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last-resort handler for errors escaping the routes.

    Errors carrying their own status code keep it; everything else is a 500.
    """
    detail = error_to_dict(exc)
    logger.error(f"{request.method} {request.url.path} raised {type(exc).__name__}: {exc}", exc_info=exc)
    return JSONResponse(status_code=detail["statusCode"], content={"error": detail})


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Log detailed validation errors for debugging."""
    logger.error(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": {"message": "Invalid request.", "statusCode": status.HTTP_400_BAD_REQUEST}},
    )


def create_app(remotes: Optional[RemoteObjects] = None) -> FastAPI:
    """
    Build the application around a set of exposed classes.

    Args:
        remotes: Exposed classes to serve (defaults to the module-level
                 `remote_objects` registry)
    """
    app = FastAPI(
        title="Remoting API",
        description="Remote method invocation over REST and WebSocket",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.remotes = remotes if remotes is not None else remote_objects

    app.add_exception_handler(RemotingError, remoting_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(health_router)
    app.include_router(rest_router, prefix=settings.REST_API_ROOT)
    app.include_router(socket_router)

    logger.info(f"FastAPI app initialized with {len(app.state.remotes.classes())} remote class(es)")
    return app


app = create_app()
