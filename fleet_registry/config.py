"""Configuration module for constants, storage locations, and settings."""

from typing import Optional
from pydantic_settings import BaseSettings


# Threshold / sort prefix selecting "at most" and descending order
DESCENDING_PREFIX = "-"

# Buy/sell quantity when the caller does not give one
DEFAULT_TRADE_QUANTITY = 1


class Config(BaseSettings):
    """Application configuration with environment variable support."""

    # Record files
    DATA_DIR: str = "data"
    AIRCRAFT_FILE: str = "avion.json"
    COMPANY_FILE: str = "company.json"
    JSON_INDENT: int = 2

    # When False, unreadable/malformed record files are logged and read as empty
    STRICT_STORAGE_READS: bool = True

    # Optional catalog seed (semicolon separated CSV)
    SEED_AIRCRAFT_CSV: Optional[str] = None
    SEED_CSV_SEPARATOR: str = ";"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "registry.log"
    AUDIT_LOG_FILE: Optional[str] = None

    # HTTP server
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8080

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }
