"""
Configuration management using Pydantic settings.
Handles database URL, JWT secrets, object storage credentials and the image domain allow-list.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings
from typing import Optional, List
from functools import lru_cache
from urllib.parse import urlparse


class Settings(BaseSettings):
    """Application settings with Docker environment variable support."""

    # Application configuration
    app_name: str = "Estate Portal"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False
    testing: bool = False

    # Database configuration
    database_url: str = "postgresql+asyncpg://postgres:postgres@db:5432/estate_portal"

    # JWT configuration
    jwt_secret_key: str = "your-secret-key-change-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 30
    session_cookie_name: str = "access_token"

    # Object storage (S3) configuration
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: Optional[str] = None
    aws_bucket_name: Optional[str] = None

    # Upload configuration
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    allowed_file_types: List[str] = ["image/jpeg", "image/png", "image/webp"]

    # Image hosts accepted as property/avatar image sources (bucket host is appended)
    static_image_domains: List[str] = [
        "res.cloudinary.com",
        "lh3.googleusercontent.com",
        "avatars.githubusercontent.com",
    ]
    unoptimized_images: bool = True

    # Undefined template variables raise when strict, render empty otherwise
    strict_templates: bool = False

    # Listing defaults
    default_page_size: int = 20
    max_page_size: int = 100

    # API configuration
    api_v1_prefix: str = "/api/v1"
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8000

    @field_validator("database_url", mode="before")
    @classmethod
    def validate_database_url(cls, v):
        """Ensure an async driver is used."""
        if v and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        if v and v.startswith("sqlite://"):
            return v.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return v

    @field_validator("jwt_secret_key", mode="before")
    @classmethod
    def validate_jwt_secret_key(cls, v):
        """Validate JWT secret key strength."""
        if not v:
            raise ValueError("JWT_SECRET_KEY is required")
        if len(v) < 32 and v != "your-secret-key-change-in-production":
            raise ValueError("JWT_SECRET_KEY must be at least 32 characters long")
        return v

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        allowed_envs = ["development", "testing", "staging", "production"]
        if v not in allowed_envs:
            raise ValueError(f"Environment must be one of: {allowed_envs}")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == "testing" or self.testing

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    @property
    def bucket_domain(self) -> Optional[str]:
        """Public host of the storage bucket, None until bucket and region are both set."""
        if not (self.aws_bucket_name and self.aws_region):
            return None
        return f"{self.aws_bucket_name}.s3.{self.aws_region}.amazonaws.com"

    @property
    def image_domains(self) -> List[str]:
        """Hosts allowed as image sources, including the storage bucket."""
        if self.bucket_domain is None:
            return list(self.static_image_domains)
        return [*self.static_image_domains, self.bucket_domain]

    def is_allowed_image_url(self, url: str) -> bool:
        """
        Check an image URL against the domain allow-list.

        Relative paths (served by this application) are always allowed.
        """
        if url.startswith("/"):
            return True
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https"):
            return False
        return parsed.hostname in self.image_domains

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one instance of settings throughout the app lifecycle.
    """
    return Settings()


# Global settings instance
settings = get_settings()
