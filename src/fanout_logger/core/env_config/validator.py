"""
Pydantic validators for environment configuration.

Provides a validated settings model for all Logger options.
"""

from typing import Dict, List, Literal, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..config import DEFAULT_LOG_ENTRIES
from ..levels import parse_severity


class LoggerSettings(BaseSettings):
    """
    Logger configuration from environment variables.

    Reads from:
    1. Environment variables (FANOUT_LOGGER_*)
    2. .env file
    3. Defaults

    Example .env file:
        FANOUT_LOGGER_LEVEL=warn
        FANOUT_LOGGER_CONTEXT=billing-api
        FANOUT_LOGGER_URL=https://logs.example.com/ingest
        FANOUT_LOGGER_AUTH_BEARER=secret-token
        FANOUT_LOGGER_HEADERS={"X-Source": "billing"}
        FANOUT_LOGGER_FILENAME=app.log
        FANOUT_LOGGER_DIRNAME=/var/log/billing

    Usage:
        >>> settings = LoggerSettings()
        >>> print(settings.level)
        'warn'
    """

    model_config = SettingsConfigDict(
        env_prefix='FANOUT_LOGGER_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    level: str = Field(default="verbose", description="Threshold severity")
    context: Optional[str] = Field(default=None, description="Static context name")

    # Console
    console: bool = Field(default=True)
    console_format: Literal["text", "colored"] = Field(default="text")

    # HTTP sink
    url: Optional[str] = Field(default=None, description="HTTP sink endpoint")
    headers: Dict[str, str] = Field(default_factory=dict)
    auth_username: Optional[str] = None
    auth_password: Optional[str] = None
    auth_bearer: Optional[str] = None
    timeout: Optional[float] = Field(default=None, gt=0)
    verify_ssl: bool = Field(default=True)

    # File sink
    filename: Optional[str] = None
    dirname: Optional[str] = None
    file_when: str = Field(default="midnight")
    file_backup_count: int = Field(default=14, ge=0)

    log_entries: List[str] = Field(default_factory=lambda: list(DEFAULT_LOG_ENTRIES))

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate level is a known severity (aliases info/warning allowed)."""
        severity = parse_severity(v)
        if severity is None:
            raise ValueError(
                f"Unknown level: {v}. Available: error, warn, log, debug, verbose"
            )
        return severity.value

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        """Validate url scheme."""
        if v and not v.startswith(("http://", "https://")):
            raise ValueError("url must start with http:// or https://")
        return v or None

    @model_validator(mode='after')
    def validate_file_pair(self) -> 'LoggerSettings':
        """filename and dirname must be set together."""
        if bool(self.filename) != bool(self.dirname):
            raise ValueError("filename and dirname must be set together")
        return self

    def auth_dict(self) -> Optional[Dict[str, str]]:
        auth = {
            "username": self.auth_username,
            "password": self.auth_password,
            "bearer": self.auth_bearer,
        }
        auth = {key: value for key, value in auth.items() if value}
        return auth or None
