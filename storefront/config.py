"""
Configuration management for the storefront payments service.
Fails fast in production when critical settings are missing.
"""

import os
from datetime import timedelta
from enum import Enum
from urllib.parse import urlparse


class Environment(str, Enum):
    """Environment types"""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class ConfigurationError(Exception):
    """Raised when configuration validation fails"""
    pass


def _env_bool(name, default="false"):
    return os.getenv(name, default).lower() in ("1", "true", "yes")


def _env_list(name, default=""):
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


class BaseConfig:
    """
    Base configuration shared by all environments.
    """

    # ============================================
    # APPLICATION META
    # ============================================
    APP_NAME = os.getenv("APP_NAME", "Al-Mubarak Storefront API")
    APP_VERSION = os.getenv("APP_VERSION", "1.0.0")
    ENVIRONMENT = Environment.DEVELOPMENT.value

    DEBUG = False
    TESTING = False

    # ============================================
    # SECURITY KEYS
    # ============================================
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-immediately-in-production")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", os.getenv("JWT_SECRET", SECRET_KEY))
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.getenv("JWT_ACCESS_TOKEN_HOURS", "12")))
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_HEADER_NAME = "Authorization"
    JWT_HEADER_TYPE = "Bearer"
    JWT_ALGORITHM = "HS256"

    # ============================================
    # DATABASE
    # ============================================
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///storefront.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": int(os.getenv("DATABASE_POOL_RECYCLE", "3600")),
    }
    CREATE_TABLES_ON_START = _env_bool("CREATE_TABLES_ON_START")

    # ============================================
    # CORS
    # ============================================
    CORS_ORIGINS = _env_list(
        "CORS_ORIGINS",
        os.getenv("FRONTEND_URL", "http://localhost:5173,http://localhost:5174"),
    )

    # ============================================
    # MAIL
    # ============================================
    MAIL_SERVER = os.getenv("MAIL_SERVER", "smtp.gmail.com")
    MAIL_PORT = int(os.getenv("MAIL_PORT", "587"))
    MAIL_USE_TLS = _env_bool("MAIL_USE_TLS", "true")
    MAIL_USE_SSL = _env_bool("MAIL_USE_SSL")
    MAIL_USERNAME = os.getenv("MAIL_USERNAME")
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD")
    MAIL_DEFAULT_SENDER = os.getenv("MAIL_DEFAULT_SENDER", "noreply@almubarakcosmetics.com.ng")
    MAIL_SUPPRESS_SEND = False
    NOTIFICATIONS_ASYNC = True

    # Store details rendered into customer emails
    STORE_NAME = os.getenv("STORE_NAME", "Al-Mubarak Cosmetics")
    STORE_SUPPORT_EMAIL = os.getenv("STORE_SUPPORT_EMAIL", "info@almubarakcosmetics.com.ng")
    STORE_SUPPORT_PHONE = os.getenv("STORE_SUPPORT_PHONE", "+234 806 160 5271")
    STORE_ADDRESS = os.getenv(
        "STORE_ADDRESS",
        "Sabuwar Gandu, Medile Road, Kano | Gwarzo Road, Bakin Asibiti, Kano",
    )

    # ============================================
    # RATE LIMITING
    # ============================================
    RATELIMIT_ENABLED = True
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    PAYMENT_CONFIRM_RATE_LIMIT = os.getenv("PAYMENT_CONFIRM_RATE_LIMIT", "20 per minute")

    # ============================================
    # LOGGING & MONITORING
    # ============================================
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_REQUESTS = _env_bool("LOG_REQUESTS")
    SENTRY_DSN = os.getenv("SENTRY_DSN")

    @classmethod
    def validate(cls):
        """Hook for environment-specific validation."""
        return None


class DevelopmentConfig(BaseConfig):
    """
    Development configuration.
    """

    ENVIRONMENT = Environment.DEVELOPMENT.value
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()


class TestingConfig(BaseConfig):
    """
    Testing configuration. In-memory database, no outgoing mail.
    """

    ENVIRONMENT = Environment.TESTING.value
    TESTING = True
    SECRET_KEY = "test-secret-key"
    JWT_SECRET_KEY = "super-secret-test-key-2024-storefront-payments"
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URI", "sqlite:///:memory:")
    SQLALCHEMY_ENGINE_OPTIONS = {}
    MAIL_SUPPRESS_SEND = True
    MAIL_DEFAULT_SENDER = "test@example.com"
    NOTIFICATIONS_ASYNC = False
    RATELIMIT_ENABLED = False
    LOG_LEVEL = "WARNING"


class ProductionConfig(BaseConfig):
    """
    Production configuration.
    """

    ENVIRONMENT = Environment.PRODUCTION.value
    DEBUG = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_size": int(os.getenv("DATABASE_POOL_SIZE", "10")),
        "max_overflow": int(os.getenv("DATABASE_MAX_OVERFLOW", "20")),
        "pool_recycle": int(os.getenv("DATABASE_POOL_RECYCLE", "3600")),
        "pool_timeout": int(os.getenv("DATABASE_POOL_TIMEOUT", "30")),
        "pool_pre_ping": True,
    }

    @classmethod
    def validate(cls):
        """Refuse to boot with development fallbacks."""
        for name in ("SECRET_KEY", "JWT_SECRET_KEY", "DATABASE_URL"):
            if not os.getenv(name):
                raise ConfigurationError(f"{name} is required in production")

        if urlparse(os.getenv("DATABASE_URL")).scheme.startswith("sqlite"):
            raise ConfigurationError("SQLite is not allowed in production. Use PostgreSQL or MySQL.")

        if "*" in cls.CORS_ORIGINS:
            raise ConfigurationError("Wildcard CORS origin '*' is not allowed in production")


CONFIG_BY_NAME = {
    Environment.DEVELOPMENT.value: DevelopmentConfig,
    Environment.TESTING.value: TestingConfig,
    Environment.PRODUCTION.value: ProductionConfig,
}


def get_config(name=None):
    """
    Resolve and return the configuration class for ``name``,
    falling back to the APP_ENV environment variable.
    """
    env = (name or os.getenv("APP_ENV", "development")).lower()

    try:
        config = CONFIG_BY_NAME[env]
    except KeyError:
        raise ConfigurationError(f"Invalid APP_ENV value: {env}") from None

    config.validate()
    return config
