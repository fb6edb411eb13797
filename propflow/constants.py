"""Constants and default values for PropFlow configuration.

This module centralizes all configuration constants and environment variable
settings used by PropertiesConfig.
"""

import os
from typing import Final

# =============================================================================
# Environment Variable Names
# =============================================================================

ENV_VAR_PREFIX: Final[str] = "PROPFLOW_"

# Dispatch settings
ENV_DEFAULT_SCOPE: Final[str] = f"{ENV_VAR_PREFIX}DEFAULT_SCOPE"
ENV_RESOLUTION_MODE: Final[str] = f"{ENV_VAR_PREFIX}RESOLUTION_MODE"

# Diagnostic settings
ENV_RECORD_WARNINGS: Final[str] = f"{ENV_VAR_PREFIX}RECORD_WARNINGS"
ENV_MAX_WARNING_HISTORY: Final[str] = f"{ENV_VAR_PREFIX}MAX_WARNING_HISTORY"


# =============================================================================
# Default Configuration Values
# =============================================================================

DEFAULT_SCOPE: Final[str] = "node"
DEFAULT_RESOLUTION_MODE: Final[str] = "all"
DEFAULT_RECORD_WARNINGS: Final[bool] = True
DEFAULT_MAX_WARNING_HISTORY: Final[int] = 100


# =============================================================================
# Boolean String Parsing
# =============================================================================

TRUTHY_VALUES: Final[tuple[str, ...]] = ("true", "1", "yes", "on")
FALSY_VALUES: Final[tuple[str, ...]] = ("false", "0", "no", "off")


# =============================================================================
# Helper Functions
# =============================================================================


def get_env_bool(env_var: str, default: bool) -> bool:
    """
    Get boolean value from environment variable.

    Args:
        env_var: Environment variable name
        default: Default value if not set

    Returns:
        Boolean value from environment or default
    """
    value = os.getenv(env_var, str(default)).lower()
    return value in TRUTHY_VALUES


def get_env_int(env_var: str, default: int) -> int:
    """Get integer value from environment variable, or default if unset or malformed."""
    try:
        return int(os.getenv(env_var, str(default)))
    except ValueError:
        return default


def get_env_str(env_var: str, default: str) -> str:
    """Get string value from environment variable."""
    return os.getenv(env_var, default)


# =============================================================================
# Configuration Value Getters (reads from environment)
# =============================================================================


def get_default_scope() -> str:
    """Get default scope from environment or default."""
    return get_env_str(ENV_DEFAULT_SCOPE, DEFAULT_SCOPE).lower()


def get_resolution_mode() -> str:
    """Get resolution mode from environment or default."""
    return get_env_str(ENV_RESOLUTION_MODE, DEFAULT_RESOLUTION_MODE).lower()


def get_record_warnings() -> bool:
    """Get warning recording flag from environment or default."""
    return get_env_bool(ENV_RECORD_WARNINGS, DEFAULT_RECORD_WARNINGS)


def get_max_warning_history() -> int:
    """Get warning history bound from environment or default."""
    return get_env_int(ENV_MAX_WARNING_HISTORY, DEFAULT_MAX_WARNING_HISTORY)


# =============================================================================
# Documentation
# =============================================================================

ENVIRONMENT_VARIABLE_DOCS = """
Environment Variables Reference:

Dispatch Settings:
  PROPFLOW_DEFAULT_SCOPE        - Scope for properties without a binding: node|flow|global
                                  Default: node
  PROPFLOW_RESOLUTION_MODE      - How field and topic matches combine: all|topic_first
                                  Default: all

Diagnostic Settings:
  PROPFLOW_RECORD_WARNINGS      - Keep reported warnings in history: true|false
                                  Default: true
  PROPFLOW_MAX_WARNING_HISTORY  - Maximum warnings kept in history
                                  Default: 100
"""
