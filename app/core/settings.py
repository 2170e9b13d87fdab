from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

load_dotenv()


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "y", "on"}


def _as_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


class AppSettings(BaseModel):
    """Runtime configuration for the catalog API and its web client."""

    database_url: str = Field(default="sqlite:///./books.db", alias="DATABASE_URL")
    database_echo: bool = Field(default=False, alias="DATABASE_ECHO")
    log_level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"], alias="CORS_ALLOW_ORIGINS")
    books_api_url: str = Field(default="http://localhost:8000/books", alias="BOOKS_API_URL")
    books_api_timeout_seconds: float = Field(default=10.0, alias="BOOKS_API_TIMEOUT_SECONDS", gt=0)

    model_config = {"populate_by_name": True}

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        if value is None:
            return "INFO"
        return value.upper()

    @field_validator("books_api_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


@lru_cache
def get_settings() -> AppSettings:
    """Load application configuration from environment variables."""
    return AppSettings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///./books.db"),
        database_echo=_as_bool(os.getenv("DATABASE_ECHO"), default=False),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        cors_allow_origins=_as_list(os.getenv("CORS_ALLOW_ORIGINS"), default=["*"]),
        books_api_url=os.getenv("BOOKS_API_URL", "http://localhost:8000/books"),
        books_api_timeout_seconds=float(os.getenv("BOOKS_API_TIMEOUT_SECONDS", "10")),
    )
