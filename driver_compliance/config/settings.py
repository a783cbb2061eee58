"""Application configuration with environment-based settings."""
import os
from typing import List, Optional
from dotenv import load_dotenv


def _split_list(value: Optional[str]) -> List[str]:
    """Split a comma-separated environment value into a clean list."""
    if not value:
        return []
    return [item.strip().lower() for item in value.split(",") if item.strip()]


class Config:
    """Base configuration class."""

    # Load environment variables
    load_dotenv()

    # Durable store
    DATABASE_URL: Optional[str] = os.getenv("DATABASE_URL")
    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "5"))

    # Cache
    REDIS_URL: Optional[str] = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    WORKDAY_CACHE_TTL: int = int(os.getenv("WORKDAY_CACHE_TTL", str(3600 * 6)))
    UPDATE_CACHE_TTL: int = int(os.getenv("UPDATE_CACHE_TTL", str(3600 * 6)))
    VERIFY_EMAIL_TTL: int = int(os.getenv("VERIFY_EMAIL_TTL", str(60 * 15)))
    RESET_PASSWORD_TTL: int = int(os.getenv("RESET_PASSWORD_TTL", str(60 * 15)))
    VERIFICATION_TOKEN_LENGTH: int = int(os.getenv("VERIFICATION_TOKEN_LENGTH", "100"))

    # Session tokens
    JWT_SECRET_KEY: Optional[str] = os.getenv("JWT_SECRET_KEY")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ACCESS_TTL: int = int(os.getenv("JWT_ACCESS_TTL", "3600"))
    JWT_REFRESH_TTL: int = int(os.getenv("JWT_REFRESH_TTL", "86400"))
    DOMAIN_NAME: str = os.getenv("DOMAIN_NAME", "http://localhost:8080")

    # Credentials (werkzeug scrypt: N=2**15, r=8, p=1 -> 32 MiB per hash)
    PASSWORD_HASH_METHOD: str = os.getenv("PASSWORD_HASH_METHOD", "scrypt:32768:8:1")

    # Signup checks
    EMAIL_DOMAIN_DENYLIST: List[str] = _split_list(os.getenv("EMAIL_DOMAIN_DENYLIST"))

    # Workdays
    GARBAGE_RETENTION_DAYS: int = int(os.getenv("GARBAGE_RETENTION_DAYS", "30"))

    # Mail
    SMTP_HOST: str = os.getenv("SMTP_HOST", "localhost")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USERNAME: Optional[str] = os.getenv("SMTP_USERNAME")
    SMTP_PASSWORD: Optional[str] = os.getenv("SMTP_PASSWORD")
    SMTP_USE_TLS: bool = os.getenv("SMTP_USE_TLS", "true").lower() == "true"
    MAIL_FROM: str = os.getenv("MAIL_FROM", "no-reply@localhost")

    # Document generator
    DOCUMENT_SERVICE_URL: str = os.getenv("DOCUMENT_SERVICE_URL", "http://localhost:50051")
    DOCUMENT_SERVICE_TIMEOUT: float = float(os.getenv("DOCUMENT_SERVICE_TIMEOUT", "30"))

    # Monitoring
    ENABLE_METRICS: bool = os.getenv("ENABLE_METRICS", "true").lower() == "true"

    # Application
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    @classmethod
    def validate(cls) -> None:
        """Validate required configuration values."""
        required_vars = [
            ("DATABASE_URL", cls.DATABASE_URL),
            ("REDIS_URL", cls.REDIS_URL),
            ("JWT_SECRET_KEY", cls.JWT_SECRET_KEY),
        ]

        missing = [name for name, value in required_vars if not value]
        if missing:
            raise ValueError(f"Missing required environment variables: {', '.join(missing)}")


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    REDIS_URL = "redis://localhost:6379/15"  # Use different DB for tests
    JWT_SECRET_KEY = "test-secret-key"
    PASSWORD_HASH_METHOD = "scrypt:1024:8:1"
    EMAIL_DOMAIN_DENYLIST = ["mail.com", "yopmail.com"]
    DOMAIN_NAME = "https://api.example.com:8443"


def get_config() -> type[Config]:
    """Factory method to get configuration based on environment."""
    env = os.getenv("APP_ENV", "development").lower()

    config_map = {
        "development": DevelopmentConfig,
        "production": ProductionConfig,
        "testing": TestingConfig,
    }

    return config_map.get(env, DevelopmentConfig)
