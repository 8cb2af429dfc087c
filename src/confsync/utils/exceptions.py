"""
confsync Custom Exceptions

Defines the error taxonomy of the configuration synchronization engine.
Only ConfigurationError is fatal; every other error is recovered locally
and surfaced through an engine notification.
"""

from typing import Any


class ConfSyncError(Exception):
    """Base exception class for confsync-specific errors."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for JSON serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


class ConfigurationError(ConfSyncError):
    """Raised for malformed engine or application configuration."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.config_key = config_key


class ParseError(ConfSyncError):
    """Raised when a configuration payload cannot be decoded."""

    def __init__(
        self,
        message: str,
        content_type: str | None = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.content_type = content_type


class SessionError(ConfSyncError):
    """Raised when the provider returns no initial token for a profile."""

    def __init__(
        self,
        message: str,
        profile_name: str | None = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.profile_name = profile_name


class ProviderError(ConfSyncError):
    """Raised when a call to the configuration provider fails."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        profile_name: str | None = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.profile_name = profile_name


class ProfileGoneError(ProviderError):
    """Raised when the provider reports that a profile no longer exists."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("error_code", "PROFILE_GONE")
        super().__init__(message, **kwargs)
