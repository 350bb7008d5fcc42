"""Tests for vcs_mcp/config/settings.py - environment configuration."""

import json

import pytest

from vcs_mcp.config.settings import ProviderDescriptor, load_settings
from vcs_mcp.enums import ProviderKind
from vcs_mcp.exceptions import ConfigurationError

# =============================================================================
# ProviderDescriptor
# =============================================================================


class TestProviderDescriptor:
    """Tests for ProviderDescriptor parsing."""

    def test_camel_case_fields(self) -> None:
        """Should accept the PROVIDERS_JSON spelling."""
        descriptor = ProviderDescriptor.model_validate(
            {"name": "gh", "type": "github", "baseUrl": "https://api.github.com", "token": "t"}
        )

        assert descriptor.kind == ProviderKind.GITHUB
        assert descriptor.base_url == "https://api.github.com"
        assert descriptor.token.get_secret_value() == "t"

    def test_token_hidden_in_repr(self) -> None:
        """Should not expose the token when printed."""
        descriptor = ProviderDescriptor(name="g", kind=ProviderKind.GITEA, base_url="https://g", token="s3cr3t")

        assert "s3cr3t" not in repr(descriptor)

    def test_unknown_kind(self) -> None:
        """Should reject unsupported provider types."""
        with pytest.raises(ValueError):
            ProviderDescriptor.model_validate({"name": "x", "type": "gitlab", "baseUrl": "https://x", "token": "t"})


# =============================================================================
# Environment loading
# =============================================================================


class TestLoadSettings:
    """Tests for load_settings and provider resolution."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should use documented defaults."""
        monkeypatch.setenv("GITEA_URL", "https://gitea.example.com")
        monkeypatch.setenv("GITEA_TOKEN", "tok")

        settings = load_settings()

        assert settings.timeout == 30.0
        assert settings.git_timeout == 300.0
        assert settings.github_url == "https://api.github.com"
        assert settings.effective_log_level == "INFO"

    def test_debug_overrides_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should switch to DEBUG when DEBUG is set."""
        monkeypatch.setenv("LOG_LEVEL", "warning")
        monkeypatch.setenv("DEBUG", "true")

        assert load_settings().effective_log_level == "DEBUG"

    def test_gitea_and_github_descriptors(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should describe both providers, Gitea first."""
        monkeypatch.setenv("GITEA_URL", "https://gitea.example.com")
        monkeypatch.setenv("GITEA_TOKEN", "gitea-tok")
        monkeypatch.setenv("GITEA_USERNAME", "alice")
        monkeypatch.setenv("GITHUB_TOKEN", "ghp-tok")

        descriptors, default = load_settings().provider_descriptors()

        assert [(d.name, d.kind) for d in descriptors] == [
            ("gitea", ProviderKind.GITEA),
            ("github", ProviderKind.GITHUB),
        ]
        assert descriptors[0].username == "alice"
        assert default is None

    def test_providers_json_takes_precedence(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should use PROVIDERS_JSON over the single-provider variables."""
        monkeypatch.setenv("GITEA_URL", "https://ignored.example.com")
        monkeypatch.setenv("GITEA_TOKEN", "ignored")
        monkeypatch.setenv(
            "PROVIDERS_JSON",
            json.dumps(
                {
                    "defaultProvider": "work",
                    "providers": [
                        {"name": "home", "type": "gitea", "baseUrl": "https://git.home.lan", "token": "a"},
                        {"name": "work", "type": "github", "baseUrl": "https://api.github.com", "token": "b"},
                    ],
                }
            ),
        )

        descriptors, default = load_settings().provider_descriptors()

        assert [d.name for d in descriptors] == ["home", "work"]
        assert default == "work"

    def test_default_provider_env_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should let DEFAULT_PROVIDER override the document's default."""
        monkeypatch.setenv(
            "PROVIDERS_JSON",
            json.dumps(
                {
                    "defaultProvider": "a",
                    "providers": [
                        {"name": "a", "type": "gitea", "baseUrl": "https://a", "token": "x"},
                        {"name": "b", "type": "gitea", "baseUrl": "https://b", "token": "y"},
                    ],
                }
            ),
        )
        monkeypatch.setenv("DEFAULT_PROVIDER", "b")

        _, default = load_settings().provider_descriptors()

        assert default == "b"

    def test_invalid_providers_json(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should fail with ConfigurationError on malformed JSON."""
        monkeypatch.setenv("PROVIDERS_JSON", "{not json")

        with pytest.raises(ConfigurationError, match="Invalid PROVIDERS_JSON"):
            load_settings().provider_descriptors()

    def test_generic_provider(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should build a single provider from PROVIDER/API_URL/API_TOKEN."""
        monkeypatch.setenv("PROVIDER", "github")
        monkeypatch.setenv("API_URL", "https://ghe.example.com/api/v3")
        monkeypatch.setenv("API_TOKEN", "tok")

        descriptors, _ = load_settings().provider_descriptors()

        assert len(descriptors) == 1
        assert descriptors[0].name == "github"
        assert descriptors[0].base_url == "https://ghe.example.com/api/v3"

    def test_generic_provider_incomplete(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should reject PROVIDER without API_URL and API_TOKEN."""
        monkeypatch.setenv("PROVIDER", "gitea")

        with pytest.raises(ConfigurationError, match="API_URL and API_TOKEN"):
            load_settings()

    def test_no_providers(self) -> None:
        """Should refuse to start without any provider."""
        with pytest.raises(ConfigurationError, match="No VCS providers configured"):
            load_settings().provider_descriptors()

    def test_demo_mode_without_providers(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should allow an empty provider list in demo mode."""
        monkeypatch.setenv("DEMO_MODE", "true")

        assert load_settings().provider_descriptors() == ([], None)

    def test_dotenv_file(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should read a .env file in the working directory."""
        (tmp_path / ".env").write_text("GITHUB_TOKEN=from-dotenv\nGIT_TIMEOUT=60\n")
        monkeypatch.chdir(tmp_path)

        settings = load_settings()

        assert settings.github_token is not None
        assert settings.github_token.get_secret_value() == "from-dotenv"
        assert settings.git_timeout == 60.0

    def test_invalid_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should wrap validation errors in ConfigurationError."""
        monkeypatch.setenv("TIMEOUT", "-1")

        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_settings()
