"""Verify all modules can be imported without errors."""
import pytest

# All tests in this module are pure import checks - mark as unit tests
pytestmark = pytest.mark.unit


def test_backend_imports():
    """Import backend modules to catch bad import paths."""
    import backend.auth
    import backend.main
    import backend.settings


def test_domain_imports():
    import domain.converters
    import domain.exceptions
    import domain.models
    import domain.services


def test_application_imports():
    import application.exceptions
    import application.ports
    import application.use_cases


def test_api_imports():
    import api.deps
    import api.errors
    import api.routers


def test_app_starts():
    """Verify FastAPI app can be instantiated."""
    from backend.main import app
    assert app is not None
    assert hasattr(app, 'routes')


def test_schema_ships_with_package():
    from pathlib import Path

    import infrastructure.db

    schema = Path(infrastructure.db.__file__).parent / "sql" / "rituals_schema.sql"
    assert "create or replace function complete_ritual" in schema.read_text().lower()
