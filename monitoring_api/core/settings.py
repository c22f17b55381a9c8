"""
Monitoring Lab API configuration
"""

from pathlib import Path
from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the project root directory path
PROJECT_DIR = Path(__file__).parent.parent.parent
ENV_FILE = PROJECT_DIR / ".env"


class ApiSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Monitoring Lab API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Service specific
    SERVICE_NAME: str = "monitoring-lab-api"
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./monitoring_lab.db"
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 20

    # CORS
    CORS_ORIGINS: List[str] = ["*"]
    CORS_CREDENTIALS: bool = False
    CORS_METHODS: List[str] = ["GET", "POST", "OPTIONS"]
    CORS_HEADERS: List[str] = ["*"]

    # Logging
    ENABLE_REQUEST_LOGGING: bool = True

    # Response caching
    CACHE_ENABLED: bool = True
    CACHE_MAX_SIZE: int = Field(1000, ge=1)
    CACHE_TTL_DEFAULT: int = 300
    CACHE_INVALIDATE_ON_WRITE: bool = False

    # Telemetry
    TELEMETRY_BACKEND: Literal["log", "kafka"] = "log"
    TELEMETRY_ON_CACHE_HIT: bool = False
    TELEMETRY_TIMEOUT_SECONDS: float = 5.0

    # Kafka for telemetry events
    KAFKA_BOOTSTRAP_SERVERS: str = "localhost:9092"
    KAFKA_TELEMETRY_TOPIC: str = "telemetry.events"
    KAFKA_CLIENT_ID: Optional[str] = None
    KAFKA_MAX_RETRIES: int = 3
    KAFKA_RETRY_DELAY: float = 2.0

    # Store call bound, None disables it
    STORE_TIMEOUT_SECONDS: Optional[float] = 10.0


# Create a singleton instance
_settings_instance = None


def get_settings() -> ApiSettings:
    """Get settings singleton instance"""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = ApiSettings()
    return _settings_instance
