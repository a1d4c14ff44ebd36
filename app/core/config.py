"""Configuration loaded from environment variables (and ``.env``)."""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os
from pathlib import Path

from dotenv import load_dotenv

from .logger import get_logger

load_dotenv(dotenv_path=Path(__file__).resolve().parents[2] / ".env")

_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


def _env(name: str, default: str) -> str:
    return os.getenv(name, default)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in _FALSE_VALUES


@dataclass(slots=True)
class DatabaseSettings:
    """Where the employment and salary tables live."""

    driver: str = "mysql+pymysql"
    host: str = "127.0.0.1"
    port: int = 3306
    user: str = "teamified"
    password: str = "teamified"
    name: str = "teamified_accounts"
    url_override: str | None = None
    create_tables: bool = False

    @classmethod
    def from_env(cls) -> "DatabaseSettings":
        return cls(
            driver=_env("DB_DRIVER", "mysql+pymysql"),
            host=_env("DB_HOST", "127.0.0.1"),
            port=_env_int("DB_PORT", 3306),
            user=_env("DB_USER", "teamified"),
            password=_env("DB_PASSWORD", "teamified"),
            name=_env("DB_NAME", "teamified_accounts"),
            url_override=_env("DB_URL", "") or None,
            create_tables=_env_flag("DB_CREATE_TABLES", False),
        )

    @property
    def sqlalchemy_url(self) -> str:
        """``DB_URL`` when set, otherwise a URL composed from the parts."""

        if self.url_override:
            return self.url_override
        credentials = f"{self.user}:{self.password}" if self.password else self.user
        return f"{self.driver}://{credentials}@{self.host}:{self.port}/{self.name}"


@dataclass(slots=True)
class AuthSettings:
    """Bearer token verification settings."""

    secret_key: str = "change-me"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    enabled: bool = True

    @classmethod
    def from_env(cls) -> "AuthSettings":
        return cls(
            secret_key=_env("JWT_SECRET_KEY", "change-me"),
            algorithm=_env("JWT_ALGORITHM", "HS256"),
            access_token_expire_minutes=_env_int("JWT_EXPIRE_MINUTES", 60),
            enabled=_env_flag("AUTH_ENABLED", True),
        )


@dataclass(slots=True)
class LoggingSettings:
    level: str = "INFO"
    log_dir: str | None = "logs"

    @classmethod
    def from_env(cls) -> "LoggingSettings":
        return cls(
            level=_env("LOG_LEVEL", "INFO"),
            log_dir=_env("LOG_DIR", "logs") or None,
        )


@dataclass(slots=True)
class Settings:
    """Top-level application configuration container."""

    database: DatabaseSettings
    auth: AuthSettings
    logging: LoggingSettings
    sqlalchemy_echo: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database=DatabaseSettings.from_env(),
            auth=AuthSettings.from_env(),
            logging=LoggingSettings.from_env(),
            sqlalchemy_echo=_env_flag("SQLALCHEMY_ECHO", False),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance."""

    settings = Settings.from_env()

    get_logger(__name__).debug(
        "Settings loaded: db=%s:%s/%s driver=%s auth_enabled=%s create_tables=%s",
        settings.database.host,
        settings.database.port,
        settings.database.name,
        settings.database.driver,
        settings.auth.enabled,
        settings.database.create_tables,
    )
    return settings


__all__ = [
    "AuthSettings",
    "DatabaseSettings",
    "LoggingSettings",
    "Settings",
    "get_settings",
]
