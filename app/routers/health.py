"""Liveness endpoint reporting database reachability."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.logger import get_logger
from app.web.dependencies import get_db_session

router = APIRouter(tags=["health"])
LOGGER = get_logger(__name__)


@router.get("/health")
def health(session: Session = Depends(get_db_session)) -> JSONResponse:
    try:
        session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        LOGGER.exception("Database health check failed")
        return JSONResponse(
            {"status": "error", "database": "down"},
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return JSONResponse({"status": "ok", "database": "up"})
