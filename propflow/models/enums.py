"""
Enums for PropFlow property dispatch.

This module defines all enums used across the dispatch pipeline to avoid
magic strings throughout the codebase.

Usage:
    from propflow.models.enums import Scope, HandlerStage, WarningType
"""

from enum import StrEnum

# ============================================================================
# Storage Enums
# ============================================================================


class Scope(StrEnum):
    """Named storage domain a property value lives in."""

    NODE = "node"  # Private to one node instance
    FLOW = "flow"  # Shared by every node of the same flow
    GLOBAL = "global"  # Shared by every node

    @classmethod
    def parse(cls, value: "str | Scope") -> "Scope | None":
        """Return the matching scope, or None for an unknown identifier."""
        try:
            return cls(value)
        except ValueError:
            return None


# ============================================================================
# Dispatch Enums
# ============================================================================


class HandlerStage(StrEnum):
    """Stage of the assignment handler chain, in execution order."""

    PRE = "pre"
    DEFAULT = "default"
    POST = "post"

    @classmethod
    def coerce(cls, value: "str | HandlerStage | None") -> "HandlerStage":
        """Map anything other than ``pre``/``post`` onto the default stage."""
        if value in (cls.PRE, cls.POST):
            return cls(value)
        return cls.DEFAULT


class ResolutionMode(StrEnum):
    """How field-match and topic-match combine for one event."""

    ALL = "all"  # Field-match then topic-match, both always applied
    TOPIC_FIRST = "topic_first"  # Field-match only when topic-match found nothing


# ============================================================================
# Diagnostic Enums
# ============================================================================


class WarningType(StrEnum):
    """Non-fatal misconfiguration reported to the host node."""

    UNKNOWN_PROPERTY = "unknown_property"
    INVALID_HANDLER = "invalid_handler"
    INVALID_SCOPE = "invalid_scope"


# Execution order of the handler chain
STAGE_ORDER: tuple[HandlerStage, ...] = (
    HandlerStage.PRE,
    HandlerStage.DEFAULT,
    HandlerStage.POST,
)
