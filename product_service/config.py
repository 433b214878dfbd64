"""
Configuration Management
Environment-based configuration for the product service and its MongoDB store
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.utils.logger import LOG_FORMATS


class Settings(BaseSettings):
    # App config
    service_name: str = "product-service"
    environment: str = "development"
    log_level: str = "INFO"
    log_format: str = "console"

    # Listener
    host: str = "0.0.0.0"
    port: int = 3000

    # MongoDB
    mongo_url: str = "mongodb://mongo:27017"
    mongo_database: str = "ecommerce"
    products_collection: str = "products"
    mongo_timeout_ms: int = 5000

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

    @field_validator('mongo_timeout_ms')
    @classmethod
    def validate_mongo_timeout(cls, v):
        if v < 1:
            raise ValueError('MONGO_TIMEOUT_MS must be at least 1')
        return v

    @field_validator('mongo_url')
    @classmethod
    def validate_mongo_url(cls, v):
        if not v.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError('MONGO_URL must be a mongodb:// connection string')
        return v

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v):
        if v not in LOG_FORMATS:
            raise ValueError(f'LOG_FORMAT must be one of {", ".join(LOG_FORMATS)}')
        return v


@lru_cache
def get_settings() -> Settings:
    """Get product service configuration instance"""
    return Settings()
