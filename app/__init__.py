"""Salary history service for employment records."""

from .core import get_logger, get_settings

__all__ = ["get_logger", "get_settings"]
