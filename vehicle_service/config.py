"""
Configuration settings for the Vehicle Service Management API.
Uses Pydantic for type-safe configuration management.
"""
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Vehicle Service Management"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "vehicle_service"

    # Security
    secret_key: str = "your-secret-key-change-this-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440  # 24 hours
    reset_token_expire_minutes: int = 60
    bcrypt_rounds: int = 12

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # API
    api_prefix: str = "/api"

    # Uploads
    upload_dir: str = "uploads"
    public_base_url: str = "http://localhost:5000"
    max_upload_size: int = 5 * 1024 * 1024  # 5MB
    max_photos: int = 5

    # Email (password reset)
    frontend_url: str = "http://localhost:5173"
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_tls: bool = True
    mail_sender: Optional[str] = None

    # Bootstrap admin account, created on startup when set
    admin_email: Optional[str] = None
    admin_password: Optional[str] = None
    admin_name: str = "System Administrator"
    admin_phone: str = "0000000000"

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
