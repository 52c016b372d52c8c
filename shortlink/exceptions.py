"""Application-level exceptions.

Every exception carries a machine-readable `error_code` and the HTTP
`status_code` the Lambda boundary responds with. The link registry raises the
`LinkError` family; configuration loading raises the `ConfigurationError` family.

Example:
    >>> from shortlink.exceptions import InvalidUrlError
    >>> err = InvalidUrlError('not a url')
    >>> err.error_code, err.status_code
    ('InvalidUrl', 400)
"""


class ShortlinkError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'ShortlinkError'
    status_code = 500


class LinkError(ShortlinkError):
    """Base exception for errors raised by the link registry."""

    error_code = 'LinkError'


class InvalidUrlError(LinkError):
    """Raised when a target URL is not a well-formed absolute http(s) URL."""

    error_code = 'InvalidUrl'
    status_code = 400


class InvalidCodeError(LinkError):
    """Raised when a shortcode has characters outside the alphabet or a bad length."""

    error_code = 'InvalidCode'
    status_code = 400


class LinkNotFoundError(LinkError):
    """Raised when a syntactically valid shortcode is not mapped to any link."""

    error_code = 'NotFound'
    status_code = 404


class GenerationExhaustedError(LinkError):
    """Raised when no unused shortcode was found within the allowed attempts."""

    error_code = 'GenerationExhausted'
    status_code = 500


class StoreUnavailableError(LinkError):
    """Raised when the data store keeps failing after bounded retries."""

    error_code = 'StoreUnavailable'
    status_code = 503

    def __init__(self, operation: str, message: str | None = None):
        self.operation = operation
        super().__init__(message or f"Data store unavailable during '{operation}'.")


class ConfigurationError(ShortlinkError):
    """Base exception for all configuration errors."""

    error_code = 'ConfigurationError'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'MissingEnvironmentVariable'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'BadConfiguration'
