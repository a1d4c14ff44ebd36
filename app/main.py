"""FastAPI application instance and startup hooks."""
from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from app.core import get_logger, get_settings
from app.core.logger import LoggingConfig, init_logging
from app.core.security import get_security_provider
from app.db import create_tables
from app.middleware.auth import AuthMiddleware
from app.routers import health_router, salary_history_router
from app.services import SalaryHistoryError
from app.web.dependencies import get_session_factory

LOGGER = get_logger(__name__)


def _error_body(status_code: int, message: object, error: str) -> dict[str, object]:
    return {"statusCode": status_code, "message": message, "error": error}


def _format_validation_error(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part not in {"body", "query", "path"})
    message = error.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


async def handle_domain_error(request: Request, exc: SalaryHistoryError) -> JSONResponse:
    return JSONResponse(
        _error_body(exc.status_code, exc.message, exc.error),
        status_code=exc.status_code,
    )


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = [_format_validation_error(error) for error in exc.errors()]
    LOGGER.info("Rejected request %s %s: %s", request.method, request.url.path, messages)
    return JSONResponse(
        _error_body(status.HTTP_400_BAD_REQUEST, messages, "Bad Request"),
        status_code=status.HTTP_400_BAD_REQUEST,
    )


async def handle_http_error(request: Request, exc: HTTPException) -> JSONResponse:
    error = {
        status.HTTP_401_UNAUTHORIZED: "Unauthorized",
        status.HTTP_403_FORBIDDEN: "Forbidden",
        status.HTTP_404_NOT_FOUND: "Not Found",
        status.HTTP_405_METHOD_NOT_ALLOWED: "Method Not Allowed",
    }.get(exc.status_code, "Error")
    return JSONResponse(
        _error_body(exc.status_code, exc.detail, error),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    init_logging(LoggingConfig.from_settings(settings.logging))

    app = FastAPI(title="Teamified Salary History", version="0.1.0")
    app.add_middleware(AuthMiddleware, security_provider=get_security_provider())
    app.add_exception_handler(SalaryHistoryError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(HTTPException, handle_http_error)
    app.include_router(health_router)
    app.include_router(salary_history_router)

    if settings.database.create_tables:

        @app.on_event("startup")
        def create_missing_tables() -> None:
            create_tables(get_session_factory().kw["bind"])

    LOGGER.info("FastAPI application initialised")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=False)
