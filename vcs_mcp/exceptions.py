"""Custom exception hierarchy for the vcs-mcp server.

Every failure a tool can hit is expressed as one of these exceptions, so the
dispatch layer can turn it into a failure result with a readable message.

Exception Hierarchy:
    VcsMcpError (base)
    ├── ConfigurationError
    ├── ProviderError
    │   ├── ProviderNotFoundError
    │   ├── ProviderAlreadyExistsError
    │   └── NoDefaultProviderError
    ├── AutoUserDetectionError
    ├── ToolInputError
    ├── GitOperationError
    └── ExternalServiceError

Example Usage:
    >>> from vcs_mcp.exceptions import ConfigurationError
    >>> try:
    ...     settings = ServerSettings()
    ... except ValidationError as e:
    ...     raise ConfigurationError(f"Invalid environment: {e}") from e
"""


class VcsMcpError(Exception):
    """Base exception for all vcs-mcp errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        """Initialize exception.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(message)


class ConfigurationError(VcsMcpError):
    """Configuration-related errors.

    Raised when the environment is missing required values, PROVIDERS_JSON
    cannot be parsed, or a provider descriptor names an unsupported kind.
    These are the only errors that stop the server at startup.
    """

    pass


class ProviderError(VcsMcpError):
    """Base class for provider registry errors."""

    pass


class ProviderNotFoundError(ProviderError):
    """A provider name is not registered in the factory.

    Attributes:
        name: The requested provider name
        available: Names registered at the time of the lookup
    """

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        self.name = name
        self.available = available or []
        message = f"Provider '{name}' not found"
        if self.available:
            message = f"{message}. Available providers: {', '.join(self.available)}"
        super().__init__(message)


class ProviderAlreadyExistsError(ProviderError):
    """A provider with the same name is already registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Provider '{name}' is already registered")


class NoDefaultProviderError(ProviderError):
    """The default provider was requested from an empty factory."""

    def __init__(self) -> None:
        super().__init__("No default provider configured")


class AutoUserDetectionError(VcsMcpError):
    """The current user could not be resolved to fill in a missing field.

    Attributes:
        field: Parameter that needed filling ("owner" or "username")
        action: Tool action being executed
    """

    def __init__(self, field: str, action: str, cause: str) -> None:
        self.field = field
        self.action = action
        super().__init__(
            f"{field.capitalize()} is required for action '{action}' and the current user "
            f"could not be auto-detected: {cause}"
        )


class ToolInputError(VcsMcpError):
    """Tool arguments are missing or inconsistent.

    Raised both for schema validation failures (with one entry per violated
    field in ``errors``) and for action-specific requirements checked by
    handlers, such as a missing ``owner`` for ``get``.
    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)


class GitOperationError(VcsMcpError):
    """A git subprocess failed or timed out.

    Attributes:
        returncode: Exit status of the git process, None on timeout
        output: Captured stdout and stderr
    """

    def __init__(self, message: str, returncode: int | None = None, output: str = "") -> None:
        self.returncode = returncode
        self.output = output
        full_message = message
        if output:
            full_message = f"{message}: {output}"
        super().__init__(full_message)
        self.message = full_message


class ExternalServiceError(VcsMcpError):
    """A remote API call failed.

    Attributes:
        status_code: HTTP status code, if one was received
        response_text: Raw response body, if any
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_text: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            status_code: Optional HTTP status code
            response_text: Optional response body
        """
        self.status_code = status_code
        self.response_text = response_text

        full_message = message
        if status_code:
            full_message = f"{message} (HTTP {status_code})"

        super().__init__(full_message)
        self.message = full_message
