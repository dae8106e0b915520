"""
Exceptions raised by the AccessWatch audit engine.
"""


class AccessWatchError(Exception):
    """Base class for all AccessWatch errors."""


class NotFoundError(AccessWatchError):
    """Resource not found exception."""

    def __init__(self, resource: str = "Resource"):
        self.resource = resource
        super().__init__(f"{resource} not found")


class InvalidScoreError(AccessWatchError, ValueError):
    """Accessibility score outside the 0-100 range."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Score must be between 0 and 100, got {value!r}")


class ScoringApiError(AccessWatchError):
    """The scoring API could not produce a result."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class RateLimitedError(ScoringApiError):
    """The scoring API answered HTTP 429."""

    def __init__(self, message: str = "Rate limit exceeded", status_code: int | None = 429):
        super().__init__(message, status_code)
