"""Error types raised by the RGB light adapter.

Every error is scoped to the single operation that raised it:
- ConfigurationError: unusable configuration (fatal at construction)
- TransportError: the device could not be reached at all
- HttpStatusError: the device answered with a non-2xx status
- InvalidColorFormat: the device (or caller) supplied a malformed colour
"""


class RgbPushError(Exception):
    """Base class for all adapter errors."""


class ConfigurationError(RgbPushError):
    """Raised when a required endpoint cannot be resolved from the config."""

    def __init__(self, field: str, reason: str = 'is missing'):
        self.field = field
        super().__init__(f"Configuration field '{field}' {reason}")


class TransportError(RgbPushError):
    """Raised on DNS, connection or timeout failures."""

    def __init__(self, url: str, error: Exception):
        self.url = url
        self.error = error
        super().__init__(f"Request to {url} failed: {error}")


def format_http_error(status_code: int, body: str) -> str:
    """Format the message used for non-2xx device responses."""
    return f'Received HTTP error code {status_code}: "{body}"'


class HttpStatusError(RgbPushError):
    """Raised when the device answers with a status outside 200-299."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(format_http_error(status_code, body))


class InvalidColorFormat(RgbPushError, ValueError):
    """Raised for malformed hex colours or out-of-range channels."""
