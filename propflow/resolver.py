"""
Assignment resolution for PropFlow.

Turns an inbound event into the ordered list of property assignments it
implies. Two strategies run per event:

1. Field-match: every declared property present as a field of the event is
   assigned that field's value, in declaration order.
2. Topic-match: if the event's ``topic`` names a declared property, that
   property is assigned the event's ``payload``.

Under ResolutionMode.ALL both lists are concatenated, field-match first, so
when both target the same property the topic-match value is the one left in
the store. Under ResolutionMode.TOPIC_FIRST field-match only runs when
topic-match produced nothing.
"""

import logging
from collections.abc import Mapping
from typing import Any, NamedTuple

from propflow.models import ResolutionMode
from propflow.registry import PropertyRegistry

logger = logging.getLogger(__name__)

TOPIC_FIELD = "topic"
PAYLOAD_FIELD = "payload"


class Assignment(NamedTuple):
    """One (property, value, source event) tuple produced by resolution."""

    name: str
    value: Any
    event: Mapping[str, Any] | None


def normalize_event(event: Any) -> Mapping[str, Any]:
    """
    Coerce an event into a field mapping.

    Mappings pass through unchanged. A two-item ``(topic, payload)`` pair
    becomes ``{"topic": ..., "payload": ...}``. Anything else carries no
    recognizable fields and resolves to nothing.
    """
    if isinstance(event, Mapping):
        return event
    if isinstance(event, tuple) and len(event) == 2:
        topic, payload = event
        return {TOPIC_FIELD: topic, PAYLOAD_FIELD: payload}
    logger.debug("Ignoring event of unsupported type %s", type(event).__name__)
    return {}


class AssignmentResolver:
    """Computes assignments for an event against a property registry."""

    def __init__(self, registry: PropertyRegistry, mode: ResolutionMode = ResolutionMode.ALL):
        self._registry = registry
        self.mode = ResolutionMode(mode)

    def resolve(self, event: Any) -> list[Assignment]:
        """
        Resolve an event into ordered assignments.

        Unknown fields and topics are ignored.

        Args:
            event: Mapping of fields, or a (topic, payload) pair

        Returns:
            Assignments in dispatch order
        """
        fields = normalize_event(event)

        if self.mode == ResolutionMode.TOPIC_FIRST:
            assignments = self.topic_matches(fields)
            if not assignments:
                assignments = self.field_matches(fields)
        else:
            assignments = self.field_matches(fields) + self.topic_matches(fields)

        logger.debug("Resolved %d assignment(s)", len(assignments))
        return assignments

    def field_matches(self, fields: Mapping[str, Any]) -> list[Assignment]:
        """Assignments for declared properties present as fields, in declaration order."""
        return [Assignment(name, fields[name], fields) for name in self._registry if name in fields]

    def topic_matches(self, fields: Mapping[str, Any]) -> list[Assignment]:
        """The payload-as-value assignment addressed by the event's topic, if any."""
        topic = fields.get(TOPIC_FIELD)
        if not self._registry.is_known(topic):
            return []
        return [Assignment(topic, fields.get(PAYLOAD_FIELD), fields)]
