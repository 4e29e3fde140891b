class GuardError(Exception):
    """Base exception for requests rejected before any side effect."""


class ValidationError(GuardError):
    """Raised when a request is malformed or misses required input."""


class RateLimitedError(GuardError):
    """Raised when a caller exceeded the request ceiling of the current window."""


class RequestTooLargeError(GuardError):
    """Raised when the declared request body exceeds its ceiling."""
