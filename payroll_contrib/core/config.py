"""Application configuration primitives."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _load_env(dotenv_path: Optional[Path] = None) -> None:
    """Load the .env file once for the process."""

    if getattr(_load_env, "_loaded", False):  # type: ignore[attr-defined]
        return

    load_dotenv(dotenv_path)
    setattr(_load_env, "_loaded", True)  # type: ignore[attr-defined]


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() not in _FALSE_VALUES


@dataclass(frozen=True)
class DatabaseSettings:
    """Configuration for the relational store holding salaries, cities and results."""

    driver: str = "mysql+pymysql"
    user: str = "contrib"
    password: str = "contrib"
    host: str = "127.0.0.1"
    port: int = 3306
    name: str = "contributions"
    url: str | None = None

    @classmethod
    def from_env(cls) -> "DatabaseSettings":
        """Instantiate settings using environment overrides when present."""

        defaults = cls()
        return cls(
            driver=os.getenv("DB_DRIVER", defaults.driver),
            user=os.getenv("DB_USER", defaults.user),
            password=os.getenv("DB_PASSWORD", defaults.password),
            host=os.getenv("DB_HOST", defaults.host),
            port=int(os.getenv("DB_PORT", defaults.port)),
            name=os.getenv("DB_NAME", defaults.name),
            url=os.getenv("DATABASE_URL") or None,
        )

    @property
    def sqlalchemy_url(self) -> str:
        """Return a SQLAlchemy compatible URL.

        ``DATABASE_URL`` wins over the individual connection fields so that
        local runs can point at SQLite without touching the rest.
        """

        if self.url:
            return self.url
        if self.password:
            credentials = f"{self.user}:{self.password}"
        else:
            credentials = self.user
        return f"{self.driver}://{credentials}@{self.host}:{self.port}/{self.name}"

    @property
    def masked_url(self) -> str:
        if self.url:
            return self.url.split("@")[-1] if "@" in self.url else self.url
        pwd = "***" if self.password else ""
        return f"{self.driver}://{self.user}:{pwd}@{self.host}:{self.port}/{self.name}"


@dataclass(frozen=True)
class LoggingSettings:
    """Where and how verbosely the application logs."""

    level: str = "INFO"
    log_dir: Path | None = field(default_factory=lambda: Path("logs"))

    @classmethod
    def from_env(cls) -> "LoggingSettings":
        raw_dir = os.getenv("LOG_DIR")
        if raw_dir is None:
            log_dir: Path | None = Path("logs")
        elif raw_dir.strip().lower() in _FALSE_VALUES:
            log_dir = None
        else:
            log_dir = Path(raw_dir)
        return cls(level=os.getenv("LOG_LEVEL", "INFO").upper(), log_dir=log_dir)


@dataclass(frozen=True)
class Settings:
    """Container for application configuration."""

    database: DatabaseSettings
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    sqlalchemy_echo: bool = False
    create_tables: bool = False

    @classmethod
    def from_env(cls, dotenv_path: Optional[Path] = None) -> "Settings":
        """Build ``Settings`` using environment variables (optionally from ``.env``)."""

        _load_env(dotenv_path)

        return cls(
            database=DatabaseSettings.from_env(),
            logging=LoggingSettings.from_env(),
            sqlalchemy_echo=_env_flag("SQLALCHEMY_ECHO"),
            create_tables=_env_flag("DB_CREATE_TABLES"),
        )


@lru_cache()
def get_settings(dotenv_path: Optional[Path] = None) -> Settings:
    """Return a cached settings instance."""

    return Settings.from_env(dotenv_path=dotenv_path)
