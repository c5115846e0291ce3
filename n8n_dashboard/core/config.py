from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    PROJECT_NAME: str = "n8n Execution Dashboard"
    API_PREFIX: str = "/api"

    # Supabase (optional - missing values make every storage call fail with a 500)
    SUPABASE_URL: Optional[str] = None
    SUPABASE_SERVICE_KEY: Optional[str] = None
    EXECUTION_LOGS_TABLE: str = "n8n_execution_logs"

    # Query defaults
    DEFAULT_EXECUTIONS_LIMIT: int = 100
    DEFAULT_DAILY_DAYS: int = 14

    # Calendar day boundaries for daily buckets and date range filters
    DASHBOARD_TIMEZONE: str = "UTC"

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "*"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def supabase_configured(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_SERVICE_KEY)

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()
