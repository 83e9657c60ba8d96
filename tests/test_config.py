"""
Tests for application settings.
"""

import pytest
from pydantic import ValidationError

from portal.config import Settings


class TestSettings:

    def test_postgres_url_gets_async_driver(self):
        settings = Settings(database_url="postgresql://user:pass@db:5432/portal")
        assert settings.database_url == "postgresql+asyncpg://user:pass@db:5432/portal"

    def test_sqlite_url_gets_async_driver(self):
        settings = Settings(database_url="sqlite:///./portal.db")
        assert settings.database_url == "sqlite+aiosqlite:///./portal.db"

    def test_unknown_environment_rejected(self):
        with pytest.raises(ValidationError):
            Settings(environment="qa")

    def test_short_jwt_secret_rejected(self):
        with pytest.raises(ValidationError):
            Settings(jwt_secret_key="too-short")

    def test_environment_flags(self):
        assert Settings(environment="production").is_production
        assert Settings(environment="testing").is_testing
        assert not Settings(environment="development").is_production


class TestImageDomains:

    @pytest.fixture
    def settings(self) -> Settings:
        return Settings(aws_bucket_name="portal-media", aws_region="eu-central-1")

    def test_bucket_domain_is_appended(self, settings: Settings):
        assert settings.bucket_domain == "portal-media.s3.eu-central-1.amazonaws.com"
        assert settings.image_domains[-1] == settings.bucket_domain
        assert "res.cloudinary.com" in settings.image_domains

    @pytest.mark.parametrize("url", [
        "https://res.cloudinary.com/demo/image.jpg",
        "https://lh3.googleusercontent.com/a/photo",
        "https://avatars.githubusercontent.com/u/1",
        "https://portal-media.s3.eu-central-1.amazonaws.com/properties/abc.png",
        "/images/default-avatar.png",
    ])
    def test_allowed_urls(self, settings: Settings, url):
        assert settings.is_allowed_image_url(url)

    @pytest.mark.parametrize("url", [
        "https://example.com/image.jpg",
        "https://res.cloudinary.com.evil.net/image.jpg",
        "ftp://res.cloudinary.com/image.jpg",
        "javascript:alert(1)",
        "images/relative.png",
    ])
    def test_rejected_urls(self, settings: Settings, url):
        assert not settings.is_allowed_image_url(url)


class TestBucketHost:

    @pytest.mark.parametrize("overrides", [
        {"aws_bucket_name": None, "aws_region": "eu-central-1"},
        {"aws_bucket_name": "portal-media", "aws_region": None},
        {"aws_bucket_name": None, "aws_region": None},
    ])
    def test_incomplete_bucket_config_adds_no_host(self, overrides):
        settings = Settings(**overrides)

        assert settings.bucket_domain is None
        assert settings.image_domains == settings.static_image_domains
        assert not any("None" in host for host in settings.image_domains)
        assert not settings.is_allowed_image_url("https://None.s3.None.amazonaws.com/a.png")

    def test_featured_count_is_not_a_setting(self):
        assert "featured_limit" not in Settings.model_fields
