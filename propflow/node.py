"""Host node collaborator for PropFlow."""

import logging
import uuid
from typing import Protocol

from propflow.store import ContextRegistry, ContextStores, ScopeStoreProvider

logger = logging.getLogger(__name__)


class HostNode(Protocol):
    """What NodeProperties needs from the node that owns it."""

    def warn(self, message: str) -> None: ...

    def context(self) -> ScopeStoreProvider: ...


class Node:
    """
    Minimal processing node.

    Supplies a warning sink and the node/flow/global stores from a shared
    ContextRegistry. Nodes built from the same registry with the same
    ``flow_id`` share their flow store.

    Args:
        node_id: Unique node id, generated when omitted
        flow_id: Id of the flow the node belongs to
        name: Display name
        contexts: Shared store owner, a private one is created when omitted
    """

    def __init__(
        self,
        node_id: str | None = None,
        flow_id: str = "default",
        name: str = "",
        contexts: ContextRegistry | None = None,
    ):
        self.id = node_id or uuid.uuid4().hex[:12]
        self.flow_id = flow_id
        self.name = name
        self._contexts = contexts if contexts is not None else ContextRegistry()
        self.warnings: list[str] = []

    def warn(self, message: str) -> None:
        self.warnings.append(message)
        logger.warning("[%s] %s", self.name or self.id, message)

    def context(self) -> ContextStores:
        return self._contexts.for_node(self.id, self.flow_id)

    def __repr__(self) -> str:
        return f"Node(id={self.id!r}, flow_id={self.flow_id!r}, name={self.name!r})"
