"""
NodeProperties: the property-assignment pipeline attached to one node.

Wires the registry, resolver, scoped store and handler chain together and
exposes the entry points a node's setup and message-handling code call.

Example:
    node = Node(name="thermostat")
    props = NodeProperties(node, {"target": 21}, {"target": {}, "mode": {"value": "auto"}})
    props.post_handle(lambda value, event, name: print(name, value), "mode")
    props.input({"topic": "mode", "payload": "eco"})
    props.get("mode")  # "eco"
"""

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from propflow.chain import HandlerChain
from propflow.config import PropertiesConfig
from propflow.diagnostics import Diagnostics, PropertyWarning
from propflow.models import Handler, HandlerStage, Scope
from propflow.node import HostNode
from propflow.registry import PropertyRegistry
from propflow.resolver import AssignmentResolver
from propflow.store import ScopeBinding, ScopedStore


class NodeProperties:
    """
    Named, scoped properties of a node, assignable from config and messages.

    Construction declares the property set and, unless ``initialize`` is
    False, primes each property from ``config`` or its template default
    through the full handler chain. Handlers registered afterwards do not
    see those initial assignments.

    Args:
        node: Host node supplying ``warn`` and ``context()``
        config: Construction-time configuration mapping
        properties: Mapping of property name to declaration template
        settings: Dispatch settings, read from the environment when omitted
        initialize: Prime properties during construction
    """

    def __init__(
        self,
        node: HostNode,
        config: Mapping[str, Any] | None = None,
        properties: Mapping[str, Any] | None = None,
        settings: PropertiesConfig | None = None,
        initialize: bool = True,
    ):
        self.node = node
        self.settings = settings if settings is not None else PropertiesConfig.from_env()
        self.diagnostics = Diagnostics(
            node,
            record=self.settings.record_warnings,
            max_history=self.settings.max_warning_history,
        )
        self.registry = PropertyRegistry(self.diagnostics, properties or {})
        self.store = ScopedStore(ScopeBinding(self.registry, self.settings.default_scope), node.context())
        self.chain = HandlerChain(self.registry, self.store, self.diagnostics)
        self.resolver = AssignmentResolver(self.registry, self.settings.resolution_mode)

        if initialize:
            self.initialize(config)

    @property
    def names(self) -> tuple[str, ...]:
        return self.registry.names

    @property
    def warnings(self) -> tuple[PropertyWarning, ...]:
        return self.diagnostics.history

    def initialize(self, config: Mapping[str, Any] | None = None) -> None:
        """Assign each property its config value or template default."""
        self.registry.initialize(config, self.chain.assign)

    # ------------------------------------------------------------------
    # Message input
    # ------------------------------------------------------------------

    def input(self, event: Any) -> bool:
        """
        Apply every assignment an event resolves to, in order.

        Returns:
            True if the event matched at least one property
        """
        assignments = self.resolver.resolve(event)
        for assignment in assignments:
            self.chain.assign(*assignment)
        return bool(assignments)

    async def input_async(self, event: Any) -> bool:
        """Like ``input``, awaiting asynchronous handlers stage by stage."""
        assignments = self.resolver.resolve(event)
        for assignment in assignments:
            await self.chain.assign_async(*assignment)
        return bool(assignments)

    # ------------------------------------------------------------------
    # Handler registration
    # ------------------------------------------------------------------

    def handle(
        self,
        handler: Handler,
        names: str | Iterable[str] | None = None,
        stage: HandlerStage | str | None = HandlerStage.DEFAULT,
    ) -> bool:
        """
        Register a handler for properties, or for all of them when names is None.

        A default-stage handler replaces storing: the value is only stored if
        the handler does it (for instance through ``store_raw``).
        """
        return self.registry.register_handler(handler, names, stage)

    def pre_handle(self, handler: Handler, names: str | Iterable[str] | None = None) -> bool:
        return self.handle(handler, names, HandlerStage.PRE)

    def post_handle(self, handler: Handler, names: str | Iterable[str] | None = None) -> bool:
        return self.handle(handler, names, HandlerStage.POST)

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    def set(self, name: str, value: Any, event: Mapping[str, Any] | None = None) -> bool:
        """Assign a property through the full handler chain."""
        return self.chain.assign(name, value, event)

    def store_raw(self, name: str, value: Any) -> bool:
        """Write a value into the property's scope, bypassing every handler."""
        if not self.registry.is_known(name):
            self.diagnostics.unknown_property(name)
            return False
        self.store.write(name, value)
        return True

    def get(self, name: str) -> Any:
        return self.chain.get(name)

    def set_scope(self, name: str | None, scope: Scope | str) -> bool:
        """Move a property (or the default scope, with None) to another scope, keeping its value."""
        return self.chain.set_scope(name, scope)

    def get_scope(self, name: str | None = None) -> Scope | None:
        return self.chain.get_scope(name)

    def snapshot(self) -> dict[str, Any]:
        """Current value of every property, in declaration order."""
        return {name: self.store.read(name) for name in self.registry}

    def handler(
        self,
        stage: HandlerStage | str | None = HandlerStage.DEFAULT,
        names: str | Iterable[str] | None = None,
    ) -> Callable[[Handler], Handler]:
        """
        Decorator form of ``handle``.

        Example:
            @props.handler("post", "mode")
            def on_mode(value, event, name):
                ...
        """

        def decorator(func: Handler) -> Handler:
            self.handle(func, names, stage)
            return func

        return decorator

    def __repr__(self) -> str:
        return f"NodeProperties(node={self.node!r}, properties={list(self.registry)!r})"
