"""
Configuration Settings.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # App info
    app_name: str = "Audio Session Store"
    app_version: str = "1.0.0"
    debug: bool = True

    # Security (bearer tokens issued by the upstream identity provider)
    secret_key: str = "your-secret-key-change-this-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24  # 1 day

    # Storage
    storage_type: str = "local"  # local, memory
    local_storage_path: str = "./data"
    storage_page_size: int = 1000  # keys per list page
    max_chunk_size_bytes: int = 25 * 1024 * 1024  # 25MB per audio chunk

    # Session defaults
    default_chunk_duration: int = 5  # seconds
    default_sample_rate: int = 44100
    default_language: str = "en"

    # Logging configuration
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file_path: str = "./logs/audiosession.log"
    log_file_enabled: bool = True
    log_console_enabled: bool = True
    log_json_format: bool = True  # JSON format for files, human-readable for console

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
