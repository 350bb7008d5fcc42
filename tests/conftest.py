"""Pytest configuration and shared fixtures."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from vcs_mcp.enums import ProviderKind
from vcs_mcp.models.domain import User
from vcs_mcp.providers.base import VcsProvider
from vcs_mcp.providers.factory import ProviderFactory
from vcs_mcp.tools.base import ToolContext

SETTINGS_ENV_VARS = (
    "GITEA_URL",
    "GITEA_TOKEN",
    "GITEA_USERNAME",
    "GITHUB_TOKEN",
    "GITHUB_URL",
    "GITHUB_USERNAME",
    "PROVIDER",
    "API_URL",
    "API_TOKEN",
    "PROVIDERS_JSON",
    "DEFAULT_PROVIDER",
    "DEMO_MODE",
    "DEBUG",
    "LOG_LEVEL",
    "TIMEOUT",
    "GIT_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate every test from the caller's provider environment and .env file."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def make_provider(kind: ProviderKind = ProviderKind.GITEA, login: str = "alice") -> AsyncMock:
    """Provider mock whose token belongs to ``login``."""
    provider = AsyncMock(spec=VcsProvider)
    provider.kind = kind
    provider.base_url = "https://gitea.example.com"
    provider.token = "secret-token"
    provider.get_current_user.return_value = User(id=1, login=login)
    return provider


@pytest.fixture
def mock_provider() -> AsyncMock:
    """Gitea-like provider mock authenticated as ``alice``."""
    return make_provider()


@pytest.fixture
def factory(mock_provider: AsyncMock) -> ProviderFactory:
    """Factory with the mock registered as the default ``gitea`` provider."""
    factory = ProviderFactory()
    factory.register("gitea", mock_provider)
    return factory


@pytest.fixture
def tool_context(factory: ProviderFactory) -> ToolContext:
    """Tool context around the mock factory."""
    return ToolContext(factory=factory, git_timeout=30.0)


@pytest.fixture
def provider_builder():
    """Build additional provider mocks inside a test."""
    return make_provider
