"""Common exceptions shared across PropFlow modules."""

from .exceptions import ConfigValidationError, DeclarationLoadError, PropFlowError

__all__ = [
    "PropFlowError",
    "ConfigValidationError",
    "DeclarationLoadError",
]
