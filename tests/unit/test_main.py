"""
Unit tests for backend/main.py

Part of RIT-3: Settings and app factory
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from unittest.mock import patch

from backend.main import create_app, _init_sentry, _configure_cors, _log_startup
from backend.settings import Settings


@pytest.mark.unit
class TestCreateApp:
    """Test the create_app() factory function."""

    def test_create_app_returns_fastapi_instance(self):
        settings = Settings(environment="test", _env_file=None)
        app = create_app(settings=settings)
        assert isinstance(app, FastAPI)

    def test_create_app_uses_default_settings_when_none_provided(self):
        with patch("backend.main.get_settings") as mock_get_settings:
            mock_get_settings.return_value = Settings(environment="test", _env_file=None)

            app = create_app(settings=None)

            mock_get_settings.assert_called_once()
            assert isinstance(app, FastAPI)

    def test_create_app_configures_app_metadata(self):
        app = create_app(settings=Settings(environment="test", _env_file=None))

        assert app.title == "Rituals API"
        assert app.version == "1.0.0"

    def test_all_routes_registered(self):
        app = create_app(settings=Settings(environment="test", _env_file=None))
        paths = {route.path for route in app.routes}

        assert {
            "/health",
            "/schedule",
            "/rituals",
            "/rituals/public",
            "/rituals/batch-complete",
            "/rituals/{ritual_id}",
            "/rituals/{ritual_id}/publish",
            "/rituals/{ritual_id}/unpublish",
            "/rituals/{ritual_id}/fork",
            "/rituals/{ritual_id}/occurrences",
            "/rituals/{ritual_id}/stats",
            "/rituals/{ritual_id}/complete",
            "/completions",
            "/completions/{completion_id}",
            "/units",
            "/units/convert",
        } <= paths

    def test_static_ritual_paths_precede_ritual_id(self):
        app = create_app(settings=Settings(environment="test", _env_file=None))
        paths = [route.path for route in app.routes]

        assert paths.index("/rituals/public") < paths.index("/rituals/{ritual_id}")
        assert paths.index("/rituals/batch-complete") < paths.index("/rituals/{ritual_id}")


@pytest.mark.unit
class TestInitSentry:
    """Test Sentry initialization."""

    def test_init_sentry_skipped_when_no_dsn(self):
        settings = Settings(sentry_dsn=None, _env_file=None)

        with patch("backend.main.sentry_sdk.init") as mock_init:
            _init_sentry(settings)
            mock_init.assert_not_called()

    def test_init_sentry_called_when_dsn_provided(self):
        settings = Settings(
            sentry_dsn="https://test@sentry.io/123",
            environment="test",
            _env_file=None,
        )

        with patch("backend.main.sentry_sdk.init") as mock_init:
            _init_sentry(settings)
            mock_init.assert_called_once_with(
                dsn="https://test@sentry.io/123",
                environment="test",
                traces_sample_rate=0.1,
                profiles_sample_rate=0.1,
            )


@pytest.mark.unit
class TestConfigureCors:
    """Test CORS configuration."""

    def test_configure_cors_adds_middleware(self):
        app = FastAPI()
        initial_middleware_count = len(app.user_middleware)

        _configure_cors(app, Settings(_env_file=None))

        assert len(app.user_middleware) == initial_middleware_count + 1

    def test_extra_origins_allowed(self):
        settings = Settings(
            environment="test",
            cors_allowed_origins="https://rituals.example.com, ",
            _env_file=None,
        )
        app = create_app(settings=settings)

        response = TestClient(app).get(
            "/health", headers={"Origin": "https://rituals.example.com"}
        )

        assert response.headers["access-control-allow-origin"] == "https://rituals.example.com"


@pytest.mark.unit
class TestLogStartup:
    """Test startup configuration logging."""

    def test_warns_when_supabase_missing(self, caplog):
        settings = Settings(_env_file=None, supabase_url=None)

        with caplog.at_level("WARNING"):
            _log_startup(settings)

        assert "Supabase is not configured" in caplog.text

    def test_warns_on_default_jwt_secret_in_production(self, caplog):
        settings = Settings(
            environment="production",
            jwt_secret="rituals-jwt-secret-change-in-production",
            _env_file=None,
        )

        with caplog.at_level("WARNING"):
            _log_startup(settings)

        assert "JWT_SECRET" in caplog.text


@pytest.mark.integration
class TestAppIntegration:
    """Integration tests for the created app."""

    def test_health_without_auth(self):
        app = create_app(settings=Settings(environment="test", _env_file=None))

        response = TestClient(app).get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_ritual_routes_require_auth(self):
        app = create_app(settings=Settings(environment="test", _env_file=None))

        response = TestClient(app).get("/rituals")

        assert response.status_code == 401
