"""
Application configuration using Pydantic settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # App
    app_name: str = "Finance Dashboard"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./data/db.sqlite"

    # AI Provider
    ai_provider: str = "gemini"  # gemini, openrouter, ollama, openai, anthropic
    ai_model: str = "gemini-1.5-flash"
    ai_base_url: Optional[str] = None  # For Ollama: http://localhost:11434

    # API Keys (optional based on provider)
    gemini_api_key: Optional[str] = None
    openrouter_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None

    # Google OAuth
    google_client_id: Optional[str] = None
    google_client_secret: Optional[str] = None

    # JWT
    jwt_secret: str = "change-me"
    jwt_expires_days: int = 7
    jwt_issuer: str = "finance-dashboard"
    jwt_audience: str = "finance-dashboard-users"

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 3001
    backend_url: str = "http://localhost:3001"
    frontend_url: str = "http://localhost:5173"

    # Rate limiting, per client address across all routes
    rate_limit: str = "100 per 15 minutes"
    rate_limit_enabled: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
