"""
Configuration system using Pydantic for type-safe settings management.

Settings are read from the process environment (and an optional ``.env``
file). They describe which VCS providers the server registers at startup
and a handful of runtime knobs (log level, HTTP and git timeouts).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from vcs_mcp.enums import ProviderKind
from vcs_mcp.exceptions import ConfigurationError

GITHUB_API_URL = "https://api.github.com"


class ProviderDescriptor(BaseModel):
    """Everything needed to construct one provider instance.

    Field names accept both snake_case and the camelCase spelling used in
    PROVIDERS_JSON (``baseUrl``/``apiUrl``).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., min_length=1, description="Unique provider name")
    kind: ProviderKind = Field(..., alias="type", description="Hosting platform type")
    base_url: str = Field(..., min_length=1, alias="apiUrl", description="Base URL of the provider")
    token: SecretStr = Field(..., description="API token for authentication")
    username: str | None = Field(default=None, description="Account the token belongs to")

    @model_validator(mode="before")
    @classmethod
    def accept_base_url_alias(cls, data: object) -> object:
        if isinstance(data, dict) and "baseUrl" in data and "apiUrl" not in data and "base_url" not in data:
            data = {**data, "apiUrl": data["baseUrl"]}
        return data


class ProvidersDocument(BaseModel):
    """Shape of the PROVIDERS_JSON environment variable."""

    model_config = ConfigDict(populate_by_name=True)

    default_provider: str | None = Field(default=None, alias="defaultProvider")
    providers: list[ProviderDescriptor] = Field(default_factory=list)


class ServerSettings(BaseSettings):
    """Main server settings, loaded from the environment.

    Provider sources are consulted in this order:

    1. PROVIDERS_JSON, when it lists at least one provider
    2. GITEA_URL + GITEA_TOKEN, then GITHUB_TOKEN (Gitea is default when both exist)
    3. API_URL + API_TOKEN with PROVIDER as the kind, when nothing else matched

    DEFAULT_PROVIDER overrides whichever default the chosen source implies.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    gitea_url: str | None = Field(default=None, description="Gitea base URL")
    gitea_token: SecretStr | None = Field(default=None, description="Gitea API token")
    gitea_username: str | None = Field(default=None, description="Gitea account name")

    github_token: SecretStr | None = Field(default=None, description="GitHub API token")
    github_url: str = Field(default=GITHUB_API_URL, description="GitHub API base URL")
    github_username: str | None = Field(default=None, description="GitHub account name")

    provider: ProviderKind | None = Field(default=None, description="Kind for the generic API_URL/API_TOKEN pair")
    api_url: str | None = Field(default=None, description="Generic provider base URL")
    api_token: SecretStr | None = Field(default=None, description="Generic provider token")

    providers_json: str | None = Field(default=None, description="Multi-provider JSON document")
    default_provider: str | None = Field(default=None, description="Name of the default provider")

    demo_mode: bool = Field(default=False, description="Start without any provider configured")
    debug: bool = Field(default=False, description="Enable debug logging")
    log_level: str = Field(default="INFO", description="Logging level")
    timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")
    git_timeout: float = Field(default=300.0, gt=0, description="Default git subprocess timeout in seconds")

    @model_validator(mode="after")
    def validate_generic_provider(self) -> ServerSettings:
        if self.provider and not (self.api_url and self.api_token):
            raise ValueError("When PROVIDER is set, both API_URL and API_TOKEN are required")
        return self

    @property
    def effective_log_level(self) -> str:
        """Log level after applying the DEBUG switch."""
        return "DEBUG" if self.debug else self.log_level.upper()

    def providers_document(self) -> ProvidersDocument | None:
        """Parse PROVIDERS_JSON.

        Raises:
            ConfigurationError: If the variable is set but is not a valid document
        """
        if not self.providers_json:
            return None
        try:
            return ProvidersDocument.model_validate_json(self.providers_json)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid PROVIDERS_JSON: {e}") from e

    def provider_descriptors(self) -> tuple[list[ProviderDescriptor], str | None]:
        """Resolve the configured providers and the name of the default one.

        Returns:
            Tuple of (descriptors in registration order, default provider name)

        Raises:
            ConfigurationError: If no provider is configured and demo mode is off
        """
        descriptors: list[ProviderDescriptor] = []
        default: str | None = None

        document = self.providers_document()
        if document and document.providers:
            descriptors.extend(document.providers)
            default = document.default_provider
        else:
            if self.gitea_url and self.gitea_token:
                descriptors.append(
                    ProviderDescriptor(
                        name="gitea",
                        kind=ProviderKind.GITEA,
                        base_url=self.gitea_url,
                        token=self.gitea_token,
                        username=self.gitea_username,
                    )
                )
            if self.github_token:
                descriptors.append(
                    ProviderDescriptor(
                        name="github",
                        kind=ProviderKind.GITHUB,
                        base_url=self.github_url,
                        token=self.github_token,
                        username=self.github_username,
                    )
                )
            if not descriptors and self.api_url and self.api_token:
                kind = self.provider or ProviderKind.GITEA
                descriptors.append(
                    ProviderDescriptor(
                        name=kind.value,
                        kind=kind,
                        base_url=self.api_url,
                        token=self.api_token,
                    )
                )

        if not descriptors and not self.demo_mode:
            raise ConfigurationError(
                "No VCS providers configured. Set GITEA_URL and GITEA_TOKEN, GITHUB_TOKEN, "
                "API_URL and API_TOKEN, or PROVIDERS_JSON (or enable DEMO_MODE)"
            )

        return descriptors, self.default_provider or default


def load_settings(**overrides: object) -> ServerSettings:
    """Load settings from the environment, wrapping validation errors.

    Raises:
        ConfigurationError: If any environment value fails validation
    """
    try:
        return ServerSettings(**overrides)  # type: ignore[arg-type]
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
