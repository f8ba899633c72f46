"""Root conftest — shared test configuration and fixtures."""

import os

import pytest

# Ensure tests don't accidentally call GitHub with a real token or user
os.environ["GITHUB_TOKEN"] = ""
os.environ["GITHUB_USER"] = ""

from app.config import Settings  # noqa: E402
from app.schemas import UpstreamRepository  # noqa: E402


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, GITHUB_USER="octocat", GITHUB_TOKEN=None)


@pytest.fixture
def make_repo():
    """Factory for upstream repository records with sensible defaults."""

    def _make(**overrides) -> UpstreamRepository:
        record = {
            "name": "repo",
            "description": "A repository",
            "language": "Python",
            "html_url": "https://github.com/octocat/repo",
            "fork": False,
            "archived": False,
            "disabled": False,
            "updated_at": "2024-06-01T12:00:00Z",
            "size": 100,
            "stargazers_count": 10,
            "forks_count": 2,
            "open_issues_count": 1,
            "default_branch": "main",
            "topics": ["cli"],
        }
        record.update(overrides)
        if "html_url" not in overrides:
            record["html_url"] = f"https://github.com/octocat/{record['name']}"
        return UpstreamRepository.model_validate(record)

    return _make


class FakeSource:
    """DataSource stand-in returning canned repositories or raising."""

    def __init__(self, repos=None, error: Exception | None = None):
        self.repos = repos or []
        self.error = error
        self.calls = []

    async def list_user_repositories(self, user: str):
        self.calls.append(user)
        if self.error is not None:
            raise self.error
        return list(self.repos)


@pytest.fixture
def fake_source():
    return FakeSource
