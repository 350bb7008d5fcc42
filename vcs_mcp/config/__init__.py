"""Configuration for the vcs-mcp server.

Key Components:
    - ServerSettings: Environment-driven settings
    - ProviderDescriptor: Immutable description of one provider
    - load_settings: Build settings, raising ConfigurationError on bad input

Example:
    >>> from vcs_mcp.config import load_settings
    >>> settings = load_settings()
    >>> descriptors, default = settings.provider_descriptors()
"""

from vcs_mcp.config.settings import ProviderDescriptor, ProvidersDocument, ServerSettings, load_settings

__all__ = ["ProviderDescriptor", "ProvidersDocument", "ServerSettings", "load_settings"]
