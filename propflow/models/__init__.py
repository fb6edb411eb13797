"""Data models for PropFlow."""

from .descriptors import (
    Handler,
    HandlerSlots,
    PropertyDescriptor,
    PropertyTemplate,
    PropertyTemplateDict,
)
from .enums import STAGE_ORDER, HandlerStage, ResolutionMode, Scope, WarningType

__all__ = [
    # Enums
    "Scope",
    "HandlerStage",
    "ResolutionMode",
    "WarningType",
    "STAGE_ORDER",
    # Descriptors
    "Handler",
    "HandlerSlots",
    "PropertyDescriptor",
    "PropertyTemplate",
    "PropertyTemplateDict",
]
