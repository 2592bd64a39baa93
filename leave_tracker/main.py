import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, get_settings
from .database import Base, build_engine, build_session_factory
from .core.errors import LeaveTrackerError
from .api import auth, leaves, users, dashboard
from . import models  # noqa: F401  registers the tables on Base.metadata

logger = logging.getLogger(__name__)


def _failure(status_code: int, message: str, **extra) -> JSONResponse:
    body = {"success": False, "message": message}
    body.update({key: value for key, value in extra.items() if value is not None})
    return JSONResponse(status_code=status_code, content=body)


def _field_errors(errors) -> list:
    result = []
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        result.append({"field": ".".join(location), "message": error.get("msg", "Invalid value")})
    return result


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:

    @app.exception_handler(LeaveTrackerError)
    async def leave_tracker_error_handler(request: Request, exc: LeaveTrackerError):
        return _failure(exc.status_code, exc.message, errors=exc.errors)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _failure(status.HTTP_400_BAD_REQUEST, "Validation failed", errors=_field_errors(exc.errors()))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return _failure(exc.status_code, "API endpoint not found")
        return _failure(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        detail = None if settings.is_production else str(exc)
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "Something went wrong!", error=detail)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application around one settings object and its database."""
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    engine = build_engine(settings)
    # Create database tables
    Base.metadata.create_all(bind=engine)

    app = FastAPI(
        title=settings.app_name,
        description="Student leave applications with faculty review",
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, settings)

    # Include routers
    app.include_router(auth.router, prefix=settings.api_prefix)
    app.include_router(leaves.router, prefix=settings.api_prefix)
    app.include_router(users.router, prefix=settings.api_prefix)
    app.include_router(dashboard.router, prefix=settings.api_prefix)

    @app.get(f"{settings.api_prefix}/health")
    def health_check():
        return {
            "success": True,
            "message": "College Leave Tracker API is running!",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": settings.environment,
        }

    logger.info("%s started (%s)", settings.app_name, settings.environment)
    return app
