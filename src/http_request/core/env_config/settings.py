"""
Pydantic models for request defaults read from the environment or files.
"""

from typing import Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..config import DEFAULT_CHUNK_SIZE


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    format: Literal["json", "text", "colored"] = Field(default="text")
    enable_console: bool = Field(default=True)
    enable_file: bool = Field(default=False)
    file_path: Optional[str] = None
    max_bytes: int = Field(default=10 * 1024 * 1024, gt=0, description="10MB")
    backup_count: int = Field(default=5, ge=0)
    enable_request_id: bool = Field(default=True)

    @model_validator(mode="after")
    def validate_file_path(self) -> "LoggingSettings":
        """file_path обязателен при enable_file=True."""
        if self.enable_file and not self.file_path:
            raise ValueError("file_path is required when enable_file=True")
        return self


class RequestSettings(BaseSettings):
    """
    Request defaults from environment variables.

    Reads from:
    1. Environment variables (HTTP_REQUEST_*)
    2. .env file
    3. Defaults

    Timeouts are in milliseconds, 0 waits forever.

    Example .env file:
        HTTP_REQUEST_CONNECT_TIMEOUT_MS=5000
        HTTP_REQUEST_READ_TIMEOUT_MS=30000
        HTTP_REQUEST_PROXY_HOST=proxy.local
        HTTP_REQUEST_PROXY_PORT=3128
        HTTP_REQUEST_HEADERS={"User-Agent": "app/1.0"}
        HTTP_REQUEST_LOG_ENABLED=true
        HTTP_REQUEST_LOG_LEVEL=DEBUG

    Usage:
        >>> settings = RequestSettings()
        >>> settings.connect_timeout_ms
        5000
    """

    model_config = SettingsConfigDict(
        env_prefix='HTTP_REQUEST_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    headers: Dict[str, str] = Field(default_factory=dict, description="Headers added to every request")

    connect_timeout_ms: Optional[int] = Field(default=None, ge=0)
    read_timeout_ms: Optional[int] = Field(default=None, ge=0)

    proxy_host: str = Field(default="")
    proxy_port: int = Field(default=0, ge=0, le=65535)

    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, gt=0)

    # Logging is off unless explicitly enabled
    log_enabled: bool = Field(default=False)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["json", "text", "colored"] = Field(default="text")
    log_enable_console: bool = Field(default=True)
    log_enable_file: bool = Field(default=False)
    log_file_path: Optional[str] = None
    log_max_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    log_backup_count: int = Field(default=5, ge=0)
    log_enable_request_id: bool = Field(default=True)

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator('log_format', mode='before')
    @classmethod
    def normalize_format(cls, v):
        return v.lower() if isinstance(v, str) else v

    def to_logging_settings(self) -> Optional[LoggingSettings]:
        """Convert to LoggingSettings if logging enabled."""
        if not self.log_enabled:
            return None

        return LoggingSettings(
            level=self.log_level,
            format=self.log_format,
            enable_console=self.log_enable_console,
            enable_file=self.log_enable_file,
            file_path=self.log_file_path,
            max_bytes=self.log_max_bytes,
            backup_count=self.log_backup_count,
            enable_request_id=self.log_enable_request_id,
        )


class TimeoutSection(BaseModel):
    """Timeouts in milliseconds."""

    connect_ms: Optional[int] = Field(default=None, ge=0)
    read_ms: Optional[int] = Field(default=None, ge=0)


class ProxySection(BaseModel):
    host: str = ""
    port: int = Field(default=0, ge=0, le=65535)


class RequestFileSettings(BaseModel):
    """
    Request defaults from a JSON/YAML file.

    Example (YAML):
        headers:
          User-Agent: app/1.0
        timeout:
          connect_ms: 5000
          read_ms: 30000
        proxy:
          host: proxy.local
          port: 3128
        logging:
          level: DEBUG
          format: json
    """

    model_config = ConfigDict(extra="forbid")

    headers: Dict[str, str] = Field(default_factory=dict)
    timeout: TimeoutSection = Field(default_factory=TimeoutSection)
    proxy: Optional[ProxySection] = None
    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, gt=0)
    logging: Optional[LoggingSettings] = None
