"""Provider construction and the name-keyed provider registry.

``ProviderFactory`` is an explicit context object: the server builds one at
startup and hands it to every tool call. There is no module-level registry.

Invariants:
    - Provider names are unique.
    - Whenever the registry is non-empty, exactly one provider is the default.
"""

import structlog

from vcs_mcp.config.settings import ProviderDescriptor, ServerSettings
from vcs_mcp.enums import ProviderKind
from vcs_mcp.exceptions import (
    ConfigurationError,
    NoDefaultProviderError,
    ProviderAlreadyExistsError,
    ProviderNotFoundError,
)
from vcs_mcp.providers.base import VcsProvider
from vcs_mcp.providers.gitea_rest import GiteaRestProvider
from vcs_mcp.providers.github_rest import GitHubRestProvider

log = structlog.get_logger(__name__)


def create_provider(descriptor: ProviderDescriptor, timeout: float = 30.0) -> VcsProvider:
    """Create the provider implementation a descriptor asks for.

    Args:
        descriptor: Provider name, kind, URL and token
        timeout: HTTP timeout in seconds

    Returns:
        VcsProvider instance (Gitea or GitHub)

    Raises:
        ConfigurationError: If the provider kind is not supported
    """
    token = descriptor.token.get_secret_value()

    if descriptor.kind == ProviderKind.GITEA:
        log.info("creating_gitea_provider", name=descriptor.name, base_url=descriptor.base_url)
        return GiteaRestProvider(
            base_url=descriptor.base_url,
            token=token,
            username=descriptor.username,
            timeout=timeout,
        )

    elif descriptor.kind == ProviderKind.GITHUB:
        log.info("creating_github_provider", name=descriptor.name, base_url=descriptor.base_url)
        return GitHubRestProvider(
            token=token,
            base_url=descriptor.base_url,
            username=descriptor.username,
            timeout=timeout,
        )

    else:
        raise ConfigurationError(
            f"Unsupported provider type: {descriptor.kind}. Supported types: gitea, github"
        )


class ProviderFactory:
    """Name-keyed registry of provider instances with a default pointer.

    Example:
        >>> factory = ProviderFactory()
        >>> factory.create(gitea_descriptor)
        >>> factory.create(github_descriptor)
        >>> factory.default_name
        'gitea'
        >>> provider = factory.get()  # the default
        >>> provider = factory.get("github")
    """

    def __init__(self, timeout: float = 30.0) -> None:
        self.timeout = timeout
        self._providers: dict[str, VcsProvider] = {}
        self._default: str | None = None

    def register(self, name: str, provider: VcsProvider, default: bool = False) -> VcsProvider:
        """Add an already-constructed provider.

        The first provider registered becomes the default; ``default=True``
        makes this one the default instead.

        Raises:
            ProviderAlreadyExistsError: If the name is taken
        """
        if name in self._providers:
            raise ProviderAlreadyExistsError(name)

        self._providers[name] = provider
        if default or self._default is None:
            self._default = name

        log.debug("provider_registered", name=name, kind=str(provider.kind), default=self._default == name)
        return provider

    def create(self, descriptor: ProviderDescriptor, default: bool = False) -> VcsProvider:
        """Construct a provider from its descriptor and register it."""
        if descriptor.name in self._providers:
            raise ProviderAlreadyExistsError(descriptor.name)

        provider = create_provider(descriptor, timeout=self.timeout)
        return self.register(descriptor.name, provider, default=default)

    def get(self, name: str | None = None) -> VcsProvider:
        """Fetch a provider by name, or the default when no name is given.

        Raises:
            ProviderNotFoundError: If ``name`` is not registered
            NoDefaultProviderError: If no name is given and the registry is empty
        """
        if name:
            try:
                return self._providers[name]
            except KeyError:
                raise ProviderNotFoundError(name, self.names()) from None

        if self._default is None:
            raise NoDefaultProviderError()
        return self._providers[self._default]

    def names(self) -> list[str]:
        return list(self._providers)

    def has(self, name: str) -> bool:
        return name in self._providers

    def __contains__(self, name: object) -> bool:
        return name in self._providers

    def __len__(self) -> int:
        return len(self._providers)

    @property
    def count(self) -> int:
        return len(self._providers)

    @property
    def default_name(self) -> str | None:
        return self._default

    def set_default(self, name: str) -> None:
        if name not in self._providers:
            raise ProviderNotFoundError(name, self.names())
        self._default = name
        log.info("default_provider_changed", name=name)

    def clear_default(self) -> None:
        """Drop the default pointer.

        Only an empty registry may have no default.

        Raises:
            ConfigurationError: If providers are still registered
        """
        if self._providers:
            raise ConfigurationError("Cannot remove the default provider while providers are registered")
        self._default = None

    def remove(self, name: str) -> bool:
        """Unregister a provider.

        Removing the default promotes the first remaining provider in
        registration order.

        Returns:
            True if the provider existed, False otherwise
        """
        if name not in self._providers:
            return False

        del self._providers[name]
        if self._default == name:
            self._default = next(iter(self._providers), None)
            log.info("default_provider_changed", name=self._default)
        return True

    def clear(self) -> None:
        self._providers.clear()
        self._default = None

    def providers_info(self) -> list[dict[str, object]]:
        """Describe registered providers without exposing tokens."""
        return [
            {
                "name": name,
                "kind": str(provider.kind),
                "base_url": provider.base_url,
                "default": name == self._default,
            }
            for name, provider in self._providers.items()
        ]

    async def aclose(self) -> None:
        """Close every registered provider."""
        for name, provider in self._providers.items():
            await provider.aclose()
            log.debug("provider_closed", name=name)


def build_factory(settings: ServerSettings) -> ProviderFactory:
    """Create a factory holding every provider the settings describe.

    Raises:
        ConfigurationError: If no provider is configured (outside demo mode),
            a descriptor is invalid, or the default names an unknown provider
    """
    descriptors, default = settings.provider_descriptors()

    factory = ProviderFactory(timeout=settings.timeout)
    for descriptor in descriptors:
        factory.create(descriptor)

    if default:
        if default not in factory:
            raise ConfigurationError(
                f"Default provider '{default}' is not configured. Available providers: "
                f"{', '.join(factory.names()) or 'none'}"
            )
        factory.set_default(default)

    log.info("providers_initialized", providers=factory.names(), default=factory.default_name)
    return factory
