# app/core/config.py - Task Blaster API configuration
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import List

class Settings(BaseSettings):
    """
    Settings for the Task Blaster API, loaded from the environment or .env
    """
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Database Settings
    DATABASE_URL: str = Field(..., description="Async database URL (postgresql+asyncpg or sqlite+aiosqlite)")

    # Authentication Settings
    AUTH_HEADER_NAME: str = Field("TB_TOKEN", description="Header carrying the static per-user access token")

    # Application Settings
    ENVIRONMENT: str = Field("development", description="Environment name")
    LOG_LEVEL: str = Field("INFO", description="Log level")

    # Logging Configuration
    ENABLE_JSON_LOGGING: bool = Field(True, description="Enable JSON structured logging")

    # OpenTelemetry Tracing Settings
    ENABLE_OTEL_EXPORTER: bool = Field(False, description="Enable OpenTelemetry tracing")
    ENABLE_OTEL_CONSOLE_EXPORT: bool = Field(False, description="Enable OpenTelemetry console export (JSON spam)")

    # CORS Settings
    CORS_ORIGINS: str = Field(
        "http://localhost:5173,http://127.0.0.1:5173",
        description="Comma-separated list of allowed CORS origins"
    )

    # Rate Limiting Settings
    RATE_LIMIT_ENABLED: bool = Field(True, description="Enable rate limiting")
    DEFAULT_RATE_LIMIT: str = Field("300/minute", description="Default rate limit")

    # Performance Settings
    DB_POOL_SIZE: int = Field(20, description="Database connection pool size")
    DB_MAX_OVERFLOW: int = Field(0, description="Database max overflow connections")

    # Kanban Settings
    DEFAULT_STATUS_WORKFLOW: str = Field(
        "TO_DO,IN_PROGRESS,DONE",
        description="Comma-separated workflow given to projects created without one"
    )

    # Image Settings
    MAX_IMAGE_SIZE_BYTES: int = Field(5 * 1024 * 1024, description="Largest accepted image upload")

    @property
    def cors_origins_list(self) -> List[str]:
        """Convert CORS_ORIGINS string to list"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def default_status_workflow_list(self) -> List[str]:
        return [code.strip() for code in self.DEFAULT_STATUS_WORKFLOW.split(",") if code.strip()]

    @property
    def should_use_json_logging(self) -> bool:
        """Use JSON logging in production or when explicitly enabled"""
        return self.ENVIRONMENT == "production" or self.ENABLE_JSON_LOGGING

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

# Create settings instance
settings = Settings()
