"""Configuration, logging and security shared by every layer."""

from .config import Settings, get_settings
from .logger import get_logger, log_context

__all__ = ["Settings", "get_logger", "get_settings", "log_context"]
