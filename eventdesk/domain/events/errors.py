"""
Domain-specific errors for the events bounded context.

All errors raised from the domain layer must be defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""


class EventsDomainError(Exception):
    """Base error for all events domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class InvalidStatusFilterError(EventsDomainError):
    """Raised when a listing is requested with an unsupported status."""

    def __init__(self, status: str) -> None:
        super().__init__("Invalid status filter.")
        self.status = status


class EventNotFoundError(EventsDomainError):
    """Raised when an event slug does not resolve to an event."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Event not found: {slug}")
        self.slug = slug


class StorageError(EventsDomainError):
    """Raised when a repository reports a failure the caller cannot degrade."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Storage failure: {reason}")
        self.reason = reason


class InvalidThemeSettingsError(EventsDomainError):
    """Raised when a theme preset or override document fails validation."""
