"""
Shared pytest fixtures for the rituals test suite.
"""

import pytest
from fastapi.testclient import TestClient

from api import deps
from backend.main import create_app
from backend.settings import Settings
from tests.fakes import FakeRepos, create_fake_repos
from tests.fakes.conftest import override_repos, override_user, reset_overrides

TEST_USER = "user-1"
OTHER_USER = "user-2"


@pytest.fixture
def settings() -> Settings:
    return Settings(environment="test", _env_file=None)


@pytest.fixture
def fake_repos() -> FakeRepos:
    """Fresh ritual, completion and stats fakes sharing one store."""
    return create_fake_repos()


@pytest.fixture
def app(settings: Settings, fake_repos: FakeRepos):
    """App wired to the fakes and authenticated as TEST_USER."""
    app = create_app(settings=settings)
    override_repos(app, fake_repos)
    override_user(app, TEST_USER)
    app.dependency_overrides[deps.get_settings] = lambda: settings
    yield app
    reset_overrides(app)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
