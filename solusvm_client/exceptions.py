"""Exceptions raised by the SolusVM client."""

from typing import Any


class SolusVMError(Exception):
    """Base exception for all SolusVM client errors."""


class ConfigurationError(SolusVMError):
    """Raised when the client is missing part of its connection identity."""


class InvalidArgumentError(SolusVMError, ValueError):
    """Raised before any request is sent when an argument fails validation.

    Attributes:
        field: Name of the offending field (e.g. ``serverID``)
        constraint: Human readable description of what was expected
        allowed: The allowed values, for enumerated fields
        value: The rejected value
    """

    def __init__(
        self,
        field: str,
        constraint: str,
        value: Any = None,
        allowed: tuple[str, ...] | None = None,
    ) -> None:
        self.field = field
        self.constraint = constraint
        self.value = value
        self.allowed = allowed
        message = f"Invalid {field}: {constraint}"
        if allowed:
            message += f" (allowed: {', '.join(allowed)})"
        super().__init__(message)


InvalidArgument = InvalidArgumentError


class TransportError(SolusVMError):
    """Raised when the HTTP exchange with the SolusVM API cannot complete.

    The request may or may not have reached the server.
    """

    def __init__(self, message: str, url: str | None = None) -> None:
        self.message = message
        self.url = url
        super().__init__(message)


class SolusVMTimeoutError(TransportError):
    """Raised when a request exceeds the configured timeout."""


class SolusVMConnectionError(TransportError):
    """Raised when the API endpoint cannot be reached."""
