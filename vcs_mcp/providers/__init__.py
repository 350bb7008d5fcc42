"""VCS hosting providers.

Key Components:
    - VcsProvider: Abstract interface used by tool handlers
    - GiteaRestProvider: Gitea REST API v1 over an httpx connection pool
    - GitHubRestProvider: GitHub REST API through PyGithub
    - ProviderFactory: Name-keyed registry with a default provider

Example:
    >>> from vcs_mcp.providers import build_factory
    >>> factory = build_factory(settings)
    >>> user = await factory.get().get_current_user()
"""

from vcs_mcp.providers.base import VcsProvider
from vcs_mcp.providers.factory import ProviderFactory, build_factory, create_provider

__all__ = [
    "ProviderFactory",
    "VcsProvider",
    "build_factory",
    "create_provider",
]
