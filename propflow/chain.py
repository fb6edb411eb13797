"""
Handler chain for PropFlow.

``assign`` is the sole write path into property state. Each assignment runs
three stages in fixed order: pre, default, post. At each stage the
property's own handler is invoked if set, else the global override for the
stage, else (default stage only) the value is written into the scope bound
to the property. Pre and post have no built-in action.

A handler that substitutes the default stage takes over storing entirely:
nothing is written unless the handler writes it.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Mapping
from typing import Any

from propflow.diagnostics import Diagnostics
from propflow.models import STAGE_ORDER, HandlerStage, Scope
from propflow.registry import PropertyRegistry
from propflow.store import ScopedStore

logger = logging.getLogger(__name__)


class HandlerChain:
    """Runs the pre/default/post chain for one (property, value) assignment."""

    def __init__(self, registry: PropertyRegistry, store: ScopedStore, diagnostics: Diagnostics):
        self._registry = registry
        self._store = store
        self._diagnostics = diagnostics
        self._background: set[asyncio.Future] = set()

    def assign(self, name: str, value: Any, event: Mapping[str, Any] | None = None) -> bool:
        """
        Assign a value to a property through the handler chain.

        Handlers run synchronously. When a handler returns an awaitable the
        chain does not wait for it: it is scheduled on the running event loop,
        or discarded if there is none. Use ``assign_async`` to await each stage.

        Args:
            name: Declared property name
            value: Value to assign
            event: Event the value came from, None for construction-time values

        Returns:
            True if the chain ran, False if the name was rejected
        """
        if not self._registry.is_known(name):
            self._diagnostics.unknown_property(name)
            return False

        for stage in STAGE_ORDER:
            result = self._run_stage(name, value, event, stage)
            if inspect.isawaitable(result):
                self._detach(result, name, stage)
        return True

    async def assign_async(self, name: str, value: Any, event: Mapping[str, Any] | None = None) -> bool:
        """Like ``assign``, but awaits each stage's result before the next stage."""
        if not self._registry.is_known(name):
            self._diagnostics.unknown_property(name)
            return False

        for stage in STAGE_ORDER:
            result = self._run_stage(name, value, event, stage)
            if inspect.isawaitable(result):
                await result
        return True

    def get(self, name: str) -> Any:
        """Current value of a property, read from its bound scope."""
        if not self._registry.is_known(name):
            self._diagnostics.unknown_property(name)
            return None
        return self._store.read(name)

    def set_scope(self, name: str | None, scope: Scope | str) -> bool:
        """
        Rebind a property, or with None the default scope, to another scope.

        The current value migrates to the new scope without running any
        handlers.

        Returns:
            True if rebound, False if the scope or name was rejected
        """
        target = Scope.parse(scope)
        if target is None:
            self._diagnostics.invalid_scope(scope, name)
            return False
        if name is not None and not self._registry.is_known(name):
            self._diagnostics.unknown_property(name)
            return False

        self._store.rebind(name, target)
        return True

    def get_scope(self, name: str | None = None) -> Scope | None:
        """Effective scope of a property, or the default scope when name is None."""
        if name is None:
            return self._store.binding.default
        if not self._registry.is_known(name):
            self._diagnostics.unknown_property(name)
            return None
        return self._store.binding.scope_of(name)

    def _run_stage(self, name: str, value: Any, event: Mapping[str, Any] | None, stage: HandlerStage) -> Any:
        handler = self._registry.handler_for(name, stage)
        if handler is not None:
            logger.debug("Running %s handler for %s", stage.value, name)
            return handler(value, event, name)
        if stage == HandlerStage.DEFAULT:
            self._store.write(name, value)
        return None

    def _detach(self, awaitable: Awaitable, name: str, stage: HandlerStage) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop; discarding %s result of %s handler", name, stage.value)
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            return

        future = asyncio.ensure_future(awaitable, loop=loop)
        self._background.add(future)
        future.add_done_callback(lambda done: self._settle(done, name, stage))

    def _settle(self, future: asyncio.Future, name: str, stage: HandlerStage) -> None:
        self._background.discard(future)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error("Background %s handler for %s failed", stage.value, name, exc_info=exc)
