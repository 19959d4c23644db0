"""
Configuration Settings.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # App info
    app_name: str = "Medico Assistant"
    app_version: str = "1.0.0"
    debug: bool = True

    # Security (tokens only, accounts carry no password)
    secret_key: str = "your-secret-key-change-this-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 days

    # Storage
    storage_type: str = "local"
    local_storage_path: str = "./data"

    # LLM Provider settings
    llm_provider: str = "gemini"  # "gemini" or "openai"
    llm_api_key: Optional[str] = None
    llm_model: Optional[str] = None  # uses provider default if not set
    llm_base_url: Optional[str] = None  # uses provider default if not set
    llm_timeout: float = 120.0
    llm_temperature: float = 0.7

    # Accepted as fallback keys for the gemini provider
    gemini_api_key: Optional[str] = None
    google_api_key: Optional[str] = None

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
    ]

    # Logging configuration
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file_path: str = "./logs/medico.log"
    log_file_enabled: bool = True
    log_console_enabled: bool = True
    log_json_format: bool = True  # JSON for files, human-readable for console
    log_api_requests: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def resolved_llm_api_key(self) -> Optional[str]:
        """API key for the configured provider, honouring the fallback keys."""
        if self.llm_api_key:
            return self.llm_api_key
        if self.llm_provider == "gemini":
            return self.gemini_api_key or self.google_api_key
        return None


settings = Settings()
