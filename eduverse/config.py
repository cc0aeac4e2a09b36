"""
Configuration Management
Environment-based settings for Supabase access, HTTP serving and logging
"""

from typing import List, Optional
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import logging

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application Configuration"""

    # Service info
    app_name: str = "EduVerse Backend"
    app_version: str = "1.0.0"

    # Supabase project
    supabase_url: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE_URL", "VITE_SUPABASE_URL")
    )
    supabase_anon_key: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE_ANON_KEY", "VITE_SUPABASE_ANON_KEY")
    )
    profiles_table: str = "profiles"
    health_table: str = "users"

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: List[str] = ["*"]

    # Logging
    log_level: str = "INFO"
    log_format: str = "default"
    logging_config_path: Optional[str] = None

    # Login creates missing profiles as students unless this is enabled
    login_honors_metadata_role: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True
    )

    @field_validator('port')
    @classmethod
    def validate_port(cls, v):
        if not 1 <= v <= 65535:
            raise ValueError('Port must be between 1 and 65535')
        return v

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v):
        if v not in ('default', 'detailed', 'json'):
            raise ValueError('Log format must be one of default, detailed, json')
        return v

    def is_supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)

    def log_config(self):
        """Log configuration (without sensitive data)"""
        logger.info(f"Service: {self.app_name} {self.app_version}")
        logger.info(f"Listening on {self.host}:{self.port}")
        logger.info(f"Supabase URL: {self.supabase_url or 'not configured'}")
        logger.info(f"Anon key: {'Yes' if self.supabase_anon_key else 'No'}")
        logger.info(f"Profiles table: {self.profiles_table}")
        logger.info(f"Login honors metadata role: {self.login_honors_metadata_role}")


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get settings instance, loaded once per process"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
