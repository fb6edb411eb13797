"""
Diagnostic channel for PropFlow.

Every rejection in the dispatch pipeline becomes a PropertyWarning that is
forwarded to the host node's ``warn`` and kept in a bounded history. Nothing
here raises: a misconfigured property must never halt the message stream.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Protocol, TypedDict

from propflow.models.enums import WarningType

logger = logging.getLogger(__name__)


class WarningSink(Protocol):
    """Anything exposing the host node's ``warn(message)``."""

    def warn(self, message: str) -> None: ...


class PropertyWarningDict(TypedDict):
    kind: str
    subject: str | None
    message: str


@dataclass(frozen=True)
class PropertyWarning:
    """A single reported misconfiguration."""

    kind: WarningType
    subject: str | None
    message: str

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> PropertyWarningDict:
        return PropertyWarningDict(kind=self.kind.value, subject=self.subject, message=self.message)


class Diagnostics:
    """
    Reports taxonomy warnings to the host node.

    Args:
        sink: Host node (or any object with ``warn``)
        record: Keep reported warnings in ``history``
        max_history: Maximum number of warnings kept
    """

    def __init__(self, sink: WarningSink, record: bool = True, max_history: int = 100):
        self._sink = sink
        self._record = record
        self._history: deque[PropertyWarning] = deque(maxlen=max_history)

    @property
    def history(self) -> tuple[PropertyWarning, ...]:
        """Recorded warnings, oldest first."""
        return tuple(self._history)

    def report(self, kind: WarningType, subject: str | None, message: str) -> PropertyWarning:
        """Build a warning, hand it to the host and record it."""
        warning = PropertyWarning(kind=kind, subject=subject, message=message)
        logger.debug("%s: %s", kind.value, message)
        self._sink.warn(message)
        if self._record:
            self._history.append(warning)
        return warning

    def unknown_property(self, name: object) -> PropertyWarning:
        return self.report(WarningType.UNKNOWN_PROPERTY, _subject(name), f"{name} is not a property")

    def invalid_handler(self, name: object) -> PropertyWarning:
        target = "all properties" if name is None else name
        return self.report(
            WarningType.INVALID_HANDLER, _subject(name), f"handler for {target} is not a function"
        )

    def invalid_scope(self, scope: object, name: object = None) -> PropertyWarning:
        return self.report(WarningType.INVALID_SCOPE, _subject(name), f"{scope} is not an allowed scope")

    def count(self, kind: WarningType | None = None) -> int:
        """Number of recorded warnings, optionally of one kind."""
        if kind is None:
            return len(self._history)
        return sum(1 for warning in self._history if warning.kind == kind)

    def clear(self) -> None:
        self._history.clear()


def _subject(name: object) -> str | None:
    return None if name is None else str(name)
