"""
Configuration Management
Environment-based configuration for the gateway
"""

from functools import lru_cache
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.utils.logger import LOG_FORMATS


class Settings(BaseSettings):
    # App config
    service_name: str = "gateway"
    environment: str = "development"
    log_level: str = "INFO"
    log_format: str = "console"

    # Listener
    host: str = "0.0.0.0"
    port: int = 5921

    # Backend (reachable only on the private network)
    backend_url: str = "http://backend:3000"
    backend_timeout: float = 10.0
    backend_connect_timeout: float = 3.0

    # CORS, comma separated; empty disables the middleware
    cors_allowed_origins: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator('port')
    @classmethod
    def validate_port(cls, v):
        if not 1 <= v <= 65535:
            raise ValueError('Port must be between 1 and 65535')
        return v

    @field_validator('backend_timeout', 'backend_connect_timeout')
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError('Timeouts must be positive')
        return v

    @field_validator('backend_url')
    @classmethod
    def validate_backend_url(cls, v):
        if not v.startswith(("http://", "https://")):
            raise ValueError('BACKEND_URL must be an http(s) URL')
        return v.rstrip("/")

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v):
        if v not in LOG_FORMATS:
            raise ValueError(f'LOG_FORMAT must be one of {", ".join(LOG_FORMATS)}')
        return v

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get gateway configuration instance"""
    return Settings()
