"""Common exceptions for PropFlow.

Dispatch never raises these: misconfiguration seen while dispatching is
reported as a warning to the host node. Exceptions are reserved for the
surfaces around dispatch, configuration and file loading.
"""

from typing import Any


class PropFlowError(Exception):
    """Base exception for all PropFlow-related errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        """Initialize exception with message and optional context."""
        super().__init__(message)
        self.context = context or {}


class ConfigValidationError(PropFlowError):
    """Raised when configuration is invalid."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        context: dict[str, Any] | None = None
    ):
        """Initialize configuration error with details."""
        super().__init__(message, context)
        self.config_key = config_key


class DeclarationLoadError(PropFlowError):
    """Raised when a declarations or events file cannot be loaded."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        context: dict[str, Any] | None = None
    ):
        """Initialize load error with details."""
        super().__init__(message, context)
        self.file_path = file_path
