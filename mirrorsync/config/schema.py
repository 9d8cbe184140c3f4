"""
Configuration Schema and Models

Defines Pydantic models for the configuration schema, providing validation,
default values, and type checking for all configuration options.

Author: mirrorsync Project
License: MIT
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, validator

from .intervals import parse_interval


class LogLevel(str, Enum):
    """Logging level options."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingConfig(BaseModel):
    """Logging output configuration."""

    log_level: LogLevel = Field(
        default=LogLevel.INFO.value,  # defaults skip validation, so store the plain string
        description="Application logging level"
    )
    log_to_file: bool = Field(
        default=False,
        description="Enable logging to file"
    )
    log_file_path: str = Field(
        default="logs/mirrorsync.log",
        description="Path to the log file"
    )
    log_rotation_size: int = Field(
        default=10485760,  # 10MB
        description="Log file size before rotation (bytes)"
    )
    log_retention_count: int = Field(
        default=5,
        description="Number of rotated log files to keep"
    )
    json_format: bool = Field(
        default=False,
        description="Emit log records as JSON"
    )

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class RetryConfig(BaseModel):
    """
    Retry policy for filesystem operations.

    Only transient I/O and permission errors are retried; not-found and
    already-exists errors fail immediately.
    """

    retry_count: int = Field(
        default=3,
        ge=1,
        description="Total attempts per operation"
    )
    retry_delay: float = Field(
        default=1.0,
        ge=0,
        description="Delay between attempts in seconds"
    )


class SyncConfig(BaseModel):
    """Mirror job configuration."""

    source: Optional[str] = Field(
        default=None,
        description="Source directory to mirror from"
    )
    destination: Optional[str] = Field(
        default=None,
        description="Destination directory to mirror into"
    )
    interval: Optional[str] = Field(
        default=None,
        description="Sync interval (minutes or 15s/1m/1h/1d/1y); None runs once"
    )
    progress_interval: int = Field(
        default=100,
        ge=1,
        description="Log file-sync progress every N files"
    )

    @validator("interval")
    def validate_interval(cls, v):
        """Reject malformed intervals early."""
        if v is None or str(v).strip().lower() in ("", "once"):
            return None
        parse_interval(v)
        return str(v).strip()


class Config(BaseModel):
    """
    Root configuration model for mirrorsync.

    Loaded from config.yaml and overridable by environment variables and
    command-line options.
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        validate_assignment = True
