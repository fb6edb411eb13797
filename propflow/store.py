"""
Scoped storage for PropFlow.

Property values live in one of three named scopes. The physical stores are
external collaborators exposing ``get(key)`` and ``set(key, value)``; this
module defines that protocol, an in-memory implementation, the per-node
provider handing out the three stores, and the ScopedStore that routes a
property read or write to the scope currently bound to it.
"""

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any, Protocol

from propflow.models import Scope
from propflow.registry import PropertyRegistry

logger = logging.getLogger(__name__)


class ScopeStore(Protocol):
    """Key/value store backing one scope."""

    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...


class ScopeStoreProvider(Protocol):
    """Hands out the store backing each scope for one node."""

    def store(self, scope: Scope) -> ScopeStore: ...


class MemoryStore:
    """Dictionary-backed ScopeStore. Missing keys read as None."""

    def __init__(self, name: str = ""):
        self.name = name
        self._data: dict[str, Any] = {}

    def get(self, key: str) -> Any:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def keys(self) -> list[str]:
        return list(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"MemoryStore(name={self.name!r}, keys={len(self._data)})"


@dataclass
class ContextStores:
    """The node, flow and global stores visible to one node."""

    node: ScopeStore
    flow: ScopeStore
    global_: ScopeStore

    def store(self, scope: Scope) -> ScopeStore:
        if scope == Scope.NODE:
            return self.node
        if scope == Scope.FLOW:
            return self.flow
        return self.global_


StoreFactory = Callable[[str], ScopeStore]


class ContextRegistry:
    """
    Owner of the shared stores.

    Each node gets a private node store. Nodes with the same flow id share
    one flow store, and every node shares the single global store. The
    registry outlives the nodes it serves.
    """

    def __init__(self, store_factory: StoreFactory = MemoryStore):
        self._factory = store_factory
        self._global = store_factory("global")
        self._flows: dict[str, ScopeStore] = {}
        self._nodes: dict[str, ScopeStore] = {}

    @property
    def global_store(self) -> ScopeStore:
        return self._global

    def flow_store(self, flow_id: str) -> ScopeStore:
        if flow_id not in self._flows:
            self._flows[flow_id] = self._factory(f"flow:{flow_id}")
        return self._flows[flow_id]

    def node_store(self, node_id: str) -> ScopeStore:
        if node_id not in self._nodes:
            self._nodes[node_id] = self._factory(f"node:{node_id}")
        return self._nodes[node_id]

    def for_node(self, node_id: str, flow_id: str) -> ContextStores:
        """Stores visible to the node ``node_id`` running in flow ``flow_id``."""
        return ContextStores(
            node=self.node_store(node_id),
            flow=self.flow_store(flow_id),
            global_=self._global,
        )


class ScopeBinding:
    """
    Maps each declared property to the scope its value lives in.

    Properties with an explicit binding (from their template or a rescope)
    use it; every other property follows the default scope.
    """

    def __init__(self, registry: PropertyRegistry, default: Scope = Scope.NODE):
        self._registry = registry
        self.default = Scope(default)

    def scope_of(self, name: str) -> Scope:
        descriptor = self._registry.descriptor(name)
        if descriptor is None or descriptor.scope is None:
            return self.default
        return descriptor.scope

    def bind(self, name: str, scope: Scope) -> None:
        self._registry.bind_scope(name, scope)

    def unbound(self) -> list[str]:
        """Declared properties following the default scope."""
        return [name for name in self._registry if self._registry.descriptor(name).scope is None]


class ScopedStore:
    """
    Routes property reads and writes to the scope bound to each property.

    Callers validate names and scope identifiers first; this class assumes
    both are valid.
    """

    def __init__(self, binding: ScopeBinding, provider: ScopeStoreProvider):
        self.binding = binding
        self._provider = provider

    def read(self, name: str) -> Any:
        return self._provider.store(self.binding.scope_of(name)).get(name)

    def write(self, name: str, value: Any) -> None:
        scope = self.binding.scope_of(name)
        logger.debug("Storing %s in %s scope", name, scope.value)
        self._provider.store(scope).set(name, value)

    def rebind(self, name: str | None, scope: Scope) -> None:
        """
        Move one property (or, with None, the default scope) to ``scope``.

        The current value is read through the old binding and written through
        the new one, so the logical value survives the move.
        """
        if name is not None:
            self._migrate([name], lambda: self.binding.bind(name, scope))
            return

        def rebind_default() -> None:
            self.binding.default = scope

        self._migrate(self.binding.unbound(), rebind_default)

    def _migrate(self, names: list[str], rebind: Callable[[], None]) -> None:
        values = {name: self.read(name) for name in names}
        rebind()
        for name, value in values.items():
            self.write(name, value)
        logger.debug("Migrated %d propert%s", len(values), "y" if len(values) == 1 else "ies")
