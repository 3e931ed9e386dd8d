import logging

import pytest
from pythonjsonlogger import jsonlogger

from storefront import create_app
from storefront.extensions import db
from storefront.logging_config import configure_logging_for_cli
from storefront.config import (
    ConfigurationError,
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    get_config,
)


def test_named_configs():
    assert get_config("testing") is TestingConfig
    assert get_config("DEVELOPMENT") is DevelopmentConfig


def test_app_env_fallback(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    assert get_config() is TestingConfig


def test_unknown_environment_fails_fast():
    with pytest.raises(ConfigurationError):
        get_config("staging")


def test_production_requires_secrets(monkeypatch):
    monkeypatch.delenv("SECRET_KEY", raising=False)
    monkeypatch.setenv("JWT_SECRET_KEY", "x" * 40)
    monkeypatch.setenv("DATABASE_URL", "postgresql://db/storefront")

    with pytest.raises(ConfigurationError, match="SECRET_KEY"):
        create_app("production")


def test_production_rejects_sqlite(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "x" * 40)
    monkeypatch.setenv("JWT_SECRET_KEY", "y" * 40)
    monkeypatch.setenv("DATABASE_URL", "sqlite:///prod.db")

    with pytest.raises(ConfigurationError, match="SQLite"):
        ProductionConfig.validate()


def test_testing_config_is_isolated():
    assert TestingConfig.SQLALCHEMY_DATABASE_URI.startswith("sqlite")
    assert TestingConfig.MAIL_SUPPRESS_SEND is True
    assert TestingConfig.NOTIFICATIONS_ASYNC is False
    assert TestingConfig.RATELIMIT_ENABLED is False


def test_health_check(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.get_json()
    assert body["status"] == "healthy"
    assert body["checks"]["database"] == "healthy"
    assert body["environment"] == "testing"


def test_confirm_is_rate_limited(monkeypatch):
    monkeypatch.setattr(TestingConfig, "RATELIMIT_ENABLED", True)
    monkeypatch.setattr(TestingConfig, "PAYMENT_CONFIRM_RATE_LIMIT", "2 per minute", raising=False)
    app = create_app("testing")

    with app.app_context():
        db.create_all()
        try:
            client = app.test_client()
            statuses = [client.post("/api/payments/confirm", json={"payment_method": "card"}).status_code
                        for _ in range(3)]
        finally:
            db.session.remove()
            db.drop_all()

    assert statuses == [200, 200, 429]


def test_cli_logging_is_json():
    configure_logging_for_cli()

    handlers = logging.getLogger().handlers
    assert handlers
    assert isinstance(handlers[0].formatter, jsonlogger.JsonFormatter)
