"""FastAPI routers for the salary history service."""

from .health import router as health_router
from .salary_history import router as salary_history_router

__all__ = ["health_router", "salary_history_router"]
