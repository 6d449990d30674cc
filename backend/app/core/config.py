"""
Configuration management using Pydantic Settings
"""
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env from project root
# config.py is at: backend/app/core/config.py
_current_file = Path(__file__).resolve()
_backend_dir = _current_file.parent.parent.parent
_project_root = _backend_dir.parent
ENV_FILE = _project_root / ".env"
# Fallback: try in backend/ directory if not found in project root
if not ENV_FILE.exists():
    ENV_FILE = _backend_dir / ".env"
if ENV_FILE.exists():
    load_dotenv(ENV_FILE, override=False)


class Settings(BaseSettings):
    """Application settings"""

    # Application
    app_name: str = "FormSG"
    app_env: str = Field(default="development", description="Application environment")
    log_level: str = Field(default="INFO", description="Logging level")
    secret_key: str = Field(default="change-me", description="Secret key for encryption")
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, ge=1, le=65535, description="API port")
    allowed_origins: str = Field(
        default="http://localhost:5173",
        description="Allowed CORS origins (comma-separated)"
    )

    # Logging
    log_sqlalchemy: bool = Field(default=False, description="Enable SQLAlchemy query logging")
    log_uvicorn_access: bool = Field(default=False, description="Enable Uvicorn access logging")
    log_module_levels: Optional[str] = Field(
        default=None,
        description='Module-specific log levels (JSON string, e.g., {"app.api": "DEBUG"})'
    )
    log_format: str = Field(
        default="json",
        description="Log format: 'json' for structured logging, 'text' for plain text"
    )
    log_file_enabled: bool = Field(default=False, description="Enable file logging")
    log_file_path: str = Field(
        default="logs/formsg.log",
        description="Path to log file (relative to project root)"
    )
    log_file_rotation: str = Field(
        default="midnight",
        description="Log file rotation: 'midnight' or 'W0'..'W6' (weekly)"
    )
    log_file_retention: int = Field(
        default=30,
        ge=1,
        description="Number of days to keep log files"
    )
    log_sensitive_data: bool = Field(
        default=False,
        description="Enable logging of sensitive data (passwords, tokens) - NOT RECOMMENDED"
    )

    # Database
    database_url: str = Field(
        default="sqlite:///./formsg.db",
        description="SQLAlchemy database URL"
    )
    database_pool_size: int = Field(default=20, ge=1, description="Database pool size")
    database_max_overflow: int = Field(default=10, ge=0, description="Database max overflow")

    # Sessions
    session_cookie_name: str = Field(default="session_token", description="Session cookie name")
    session_duration_hours: int = Field(default=24, ge=1, description="Admin session lifetime (hours)")
    session_cookie_secure: bool = Field(default=False, description="Send session cookie over HTTPS only")

    # Workspaces
    workspace_title_max_length: int = Field(default=50, ge=1, description="Maximum workspace title length")

    # Tracing
    enable_tracing: bool = Field(default=False, description="Enable OpenTelemetry tracing")
    tracing_service_name: str = Field(default="formsg", description="Service name for tracing")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept lowercase level names"""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured database is SQLite"""
        return self.database_url.startswith("sqlite")

    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
