"""
Test Fixtures and Helpers for Fake Repositories.

Part of RIT-28: In-memory fake repositories

This module provides pytest fixtures and helper functions for overriding
FastAPI dependencies with fake repository implementations.

Usage:
    from tests.fakes.conftest import override_repos, reset_overrides

    def test_something():
        app = create_app(Settings(environment="test", _env_file=None))
        repos = override_repos(app)
        repos.rituals.seed([...])
        ...
        reset_overrides(app)
"""

from typing import Any, Callable

from fastapi import FastAPI

from api import deps
from tests.fakes import FakeRepos, create_fake_repos

RepoGetter = Callable[..., Any]


def reset_overrides(app: FastAPI) -> None:
    """Reset all FastAPI dependency overrides on app."""
    app.dependency_overrides.clear()


def override_dependency(app: FastAPI, getter: RepoGetter, implementation: Any) -> None:
    """
    Override a FastAPI dependency with a fake implementation.

    Args:
        getter: The dependency getter function (e.g., get_ritual_repo)
        implementation: The fake instance
    """
    app.dependency_overrides[getter] = lambda: implementation


def override_repos(app: FastAPI, repos: FakeRepos = None) -> FakeRepos:
    """Point every repository provider of app at one set of fakes."""
    repos = repos or create_fake_repos()
    override_dependency(app, deps.get_ritual_repo, repos.rituals)
    override_dependency(app, deps.get_completion_repo, repos.completions)
    override_dependency(app, deps.get_user_stats_repo, repos.stats)
    return repos


def override_user(app: FastAPI, user_id: str) -> None:
    """Authenticate every request of app as user_id."""
    app.dependency_overrides[deps.get_current_user] = lambda: user_id
