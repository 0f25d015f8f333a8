"""Core configuration, logging, and exceptions."""

import logging
import sys
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AskBoardException(Exception):
    """Base exception for AskBoard."""

    status_code: int = 500
    default_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        code: Optional[str] = None,
        message: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        """
        Initialize AskBoardException.

        Args:
            code: Error code
            message: Error message
            details: Additional error details
        """
        self.code = code or self.default_code
        self.message = message or "An error occurred"
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert exception to dictionary format."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(AskBoardException):
    """Malformed or out-of-range input, rejected before touching storage."""

    status_code = 400
    default_code = "VALIDATION_ERROR"


class NotFoundException(AskBoardException):
    """A referenced question, answer or user has no matching row."""

    status_code = 404
    default_code = "NOT_FOUND"


class ForbiddenException(AskBoardException):
    """The caller is not allowed to perform the operation."""

    status_code = 403
    default_code = "FORBIDDEN"


class ConflictException(AskBoardException):
    """An integrity constraint fired despite the upsert logic."""

    status_code = 500
    default_code = "CONFLICT"


class Settings(BaseSettings):
    """Application settings.

    Read from ASKBOARD_* environment variables and .env; askboard.config layers
    YAML files underneath.
    """

    model_config = SettingsConfigDict(
        env_prefix="ASKBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_version: str = Field(default="0.1.0")
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")
    cors_origins: list[str] = Field(default=["*"])

    # API Server
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    api_reload: bool = Field(default=True)

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    # Database
    database_url: str = Field(default="sqlite+aiosqlite:///./data/askboard.db")
    database_echo: bool = Field(default=False)
    auto_create_tables: bool = Field(default=True)

    @property
    def is_sqlite(self) -> bool:
        """Check if the configured database is SQLite."""
        return self.database_url.startswith("sqlite")

    # Questions and answers
    title_min_length: int = Field(default=10)
    title_max_length: int = Field(default=300)
    max_tags_per_question: int = Field(default=5)
    tag_max_length: int = Field(default=50)  # matches the tags.name column width

    # Listing
    default_page_size: int = Field(default=20)
    max_page_size: int = Field(default=100)
    search_max_results: int = Field(default=100)

    # Who may accept an answer: "any" or "question_author"
    accept_policy: str = Field(default="any")


def setup_logging(level: Optional[str] = None) -> None:
    """
    Setup logging configuration.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    if level is None:
        from askboard.config import get_config

        level = get_config().log_level

    # Configure root logger
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


class StructuredLogger:
    """Logger wrapper that supports structured logging with keyword arguments."""

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def _format_message(self, msg: str, **kwargs) -> str:
        """Append keyword context to the message as ``k=v`` pairs."""
        if kwargs:
            context = " ".join(f"{k}={v}" for k, v in kwargs.items())
            return f"{msg} | {context}"
        return msg

    def debug(self, msg: str, **kwargs) -> None:
        self._logger.debug(self._format_message(msg, **kwargs))

    def info(self, msg: str, **kwargs) -> None:
        self._logger.info(self._format_message(msg, **kwargs))

    def warning(self, msg: str, **kwargs) -> None:
        self._logger.warning(self._format_message(msg, **kwargs))

    def error(self, msg: str, **kwargs) -> None:
        self._logger.error(self._format_message(msg, **kwargs))

    def exception(self, msg: str, **kwargs) -> None:
        self._logger.exception(self._format_message(msg, **kwargs))


def get_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        StructuredLogger instance
    """
    return StructuredLogger(logging.getLogger(name))
