# propflow/config.py
from dataclasses import dataclass
from typing import TypedDict

from propflow.common.exceptions import ConfigValidationError
from propflow.constants import (
    DEFAULT_MAX_WARNING_HISTORY,
    DEFAULT_RECORD_WARNINGS,
    DEFAULT_RESOLUTION_MODE,
    DEFAULT_SCOPE,
    get_default_scope,
    get_max_warning_history,
    get_record_warnings,
    get_resolution_mode,
)
from propflow.models import ResolutionMode, Scope


class PropertiesConfigDict(TypedDict, total=False):
    """TypedDict for properties configuration dictionary"""
    default_scope: str
    resolution_mode: str
    record_warnings: bool
    max_warning_history: int


@dataclass(frozen=True)
class PropertiesConfig:
    """Configuration for a NodeProperties instance"""

    # Dispatch settings
    default_scope: Scope = Scope.NODE
    resolution_mode: ResolutionMode = ResolutionMode.ALL

    # Diagnostic settings
    record_warnings: bool = True
    max_warning_history: int = DEFAULT_MAX_WARNING_HISTORY

    def __post_init__(self):
        """Validate configuration after initialization"""
        self._validate_config()

    @classmethod
    def from_env(cls) -> 'PropertiesConfig':
        """Create configuration from environment variables, ignoring malformed values"""
        default_scope = Scope.parse(get_default_scope()) or Scope.NODE

        try:
            resolution_mode = ResolutionMode(get_resolution_mode())
        except ValueError:
            resolution_mode = ResolutionMode.ALL

        max_warning_history = get_max_warning_history()
        if max_warning_history < 0:
            max_warning_history = DEFAULT_MAX_WARNING_HISTORY

        return cls(
            default_scope=default_scope,
            resolution_mode=resolution_mode,
            record_warnings=get_record_warnings(),
            max_warning_history=max_warning_history,
        )

    @classmethod
    def from_dict(cls, config_dict: PropertiesConfigDict) -> 'PropertiesConfig':
        """Create configuration from typed dictionary"""
        scope_str = str(config_dict.get('default_scope', DEFAULT_SCOPE)).lower()
        default_scope = Scope.parse(scope_str)
        if default_scope is None:
            raise ConfigValidationError(f"Invalid default_scope: {scope_str}", config_key='default_scope')

        mode_str = str(config_dict.get('resolution_mode', DEFAULT_RESOLUTION_MODE)).lower()
        try:
            resolution_mode = ResolutionMode(mode_str)
        except ValueError as e:
            raise ConfigValidationError(
                f"Invalid resolution_mode: {mode_str}", config_key='resolution_mode'
            ) from e

        return cls(
            default_scope=default_scope,
            resolution_mode=resolution_mode,
            record_warnings=config_dict.get('record_warnings', DEFAULT_RECORD_WARNINGS),
            max_warning_history=config_dict.get('max_warning_history', DEFAULT_MAX_WARNING_HISTORY),
        )

    def _validate_config(self) -> None:
        """Validate configuration values"""
        # Accept plain strings for the enum fields
        if isinstance(self.default_scope, str) and Scope.parse(self.default_scope) is not None:
            object.__setattr__(self, 'default_scope', Scope(self.default_scope))
        if isinstance(self.resolution_mode, str) and self.resolution_mode in {m.value for m in ResolutionMode}:
            object.__setattr__(self, 'resolution_mode', ResolutionMode(self.resolution_mode))

        if not isinstance(self.default_scope, Scope):
            raise ConfigValidationError(f"Invalid default_scope: {self.default_scope}", config_key='default_scope')

        if not isinstance(self.resolution_mode, ResolutionMode):
            raise ConfigValidationError(
                f"Invalid resolution_mode: {self.resolution_mode}", config_key='resolution_mode'
            )

        if not isinstance(self.record_warnings, bool):
            raise ConfigValidationError(
                f"record_warnings must be a boolean, got {self.record_warnings!r}", config_key='record_warnings'
            )

        if not isinstance(self.max_warning_history, int) or self.max_warning_history < 0:
            raise ConfigValidationError("max_warning_history must be non-negative", config_key='max_warning_history')

    def to_dict(self) -> PropertiesConfigDict:
        """Convert configuration to typed dictionary"""
        return PropertiesConfigDict(
            default_scope=self.default_scope.value,
            resolution_mode=self.resolution_mode.value,
            record_warnings=self.record_warnings,
            max_warning_history=self.max_warning_history,
        )

    def __str__(self) -> str:
        return f"PropertiesConfig(default_scope='{self.default_scope}', mode={self.resolution_mode.value})"


# Environment variable reference:
# PROPFLOW_DEFAULT_SCOPE - Scope for properties without a binding: node|flow|global (default: node)
# PROPFLOW_RESOLUTION_MODE - How field and topic matches combine: all|topic_first (default: all)
# PROPFLOW_RECORD_WARNINGS - Keep reported warnings in history: true|false (default: true)
# PROPFLOW_MAX_WARNING_HISTORY - Maximum warnings kept in history (default: 100)
