"""FastAPI application for scheduling rooms and issuing join tokens."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from .core.config import settings, validate_settings
from .core.errors import ErrorKind, RoomServiceError, ValidationError
from .db.session import dispose_engine
from .routers import rooms as rooms_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

ERROR_STATUS: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.ROOM_UNAVAILABLE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.REPOSITORY: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.SIGNING: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.INVALID_TOKEN: status.HTTP_401_UNAUTHORIZED,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Validate configuration on startup and release the engine on shutdown."""

    logger.info("Starting room service (%s)", settings.app_env)
    try:
        validate_settings(settings)
    except RuntimeError as exc:
        logger.error("Configuration validation failed: %s", exc)
        raise

    yield

    logger.info("Shutting down room service")
    await dispose_engine()


app = FastAPI(title="Roomgate API", version="0.1.0", lifespan=lifespan)

if settings.cors_allow_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

app.include_router(rooms_router.router, prefix="/api/rooms", tags=["rooms"])


@app.exception_handler(RoomServiceError)
async def room_service_error_handler(request: Request, exc: RoomServiceError) -> JSONResponse:
    """Render service failures as JSON with a status derived from the error kind."""

    content: dict[str, object] = {"error": exc.kind.value, "message": exc.message}
    if isinstance(exc, ValidationError) and exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=ERROR_STATUS[exc.kind], content=content)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed bodies (e.g. invalid JSON) in the same shape as service validation errors."""

    details = [{"loc": list(error["loc"]), "msg": error["msg"]} for error in exc.errors()]
    return await room_service_error_handler(request, ValidationError("Invalid request body", details=details))


@app.get("/api/health", tags=["meta"])
async def health() -> dict[str, str]:
    """Simple liveness probe."""

    return {"status": "ok"}


@app.head("/api/health", tags=["meta"])
async def health_head() -> Response:
    """Allow HEAD for uptime monitors that only need the status code."""

    return Response(status_code=200)


@app.get("/robots.txt", response_class=PlainTextResponse, include_in_schema=False)
async def robots() -> PlainTextResponse:
    """Serve a minimal robots.txt to avoid 404 noise."""

    return PlainTextResponse("User-agent: *\nDisallow:")
