"""Unit tests for the propflow.chain module.

Covers stage order, per-property substitution, global fallback, the
built-in store action, rejection of unknown names and scopes, and
asynchronous handlers.
"""

import asyncio
import logging

import pytest

from propflow import (
    ContextRegistry,
    Diagnostics,
    HandlerChain,
    HandlerStage,
    Node,
    PropertyRegistry,
    Scope,
    ScopeBinding,
    ScopedStore,
    WarningType,
)


@pytest.fixture
def host():
    return Node(node_id="n", flow_id="f", contexts=ContextRegistry())


@pytest.fixture
def diagnostics(host):
    return Diagnostics(host)


@pytest.fixture
def registry(diagnostics):
    return PropertyRegistry(diagnostics, {"x": {}, "y": {}})


@pytest.fixture
def stores(host):
    return host.context()


@pytest.fixture
def chain(registry, stores, diagnostics):
    return HandlerChain(registry, ScopedStore(ScopeBinding(registry), stores), diagnostics)


class TestAssign:
    """Test suite for the three-stage chain."""

    def test_default_store_without_handlers(self, chain, stores, host):
        assert chain.assign("x", 5) is True

        assert stores.node.get("x") == 5
        assert chain.get("x") == 5
        assert host.warnings == []

    def test_stage_order(self, chain, registry):
        order = []
        registry.register_handler(lambda v, e, n: order.append("post"), "x", "post")
        registry.register_handler(lambda v, e, n: order.append("pre"), "x", "pre")
        registry.register_handler(lambda v, e, n: order.append("default"), "x")

        chain.assign("x", 1)

        assert order == ["pre", "default", "post"]

    def test_handler_receives_value_event_name(self, chain, registry, recorder):
        registry.register_handler(recorder, "x", "pre")
        event = {"x": 1}

        chain.assign("x", 1, event)

        assert recorder.calls == [(1, event, "x")]

    def test_default_handler_replaces_store(self, chain, registry, stores):
        seen = []
        registry.register_handler(lambda v, e, n: seen.append(v), "x")

        chain.assign("x", 5)

        assert seen == [5]
        assert "x" not in stores.node
        assert chain.get("x") is None

    def test_default_handler_may_store_transformed_value(self, chain, registry, stores):
        registry.register_handler(lambda v, e, n: stores.node.set(n, v * 2), "x")

        chain.assign("x", 5)

        assert chain.get("x") == 10

    def test_pre_and_post_see_value_but_default_still_stores(self, chain, registry, recorder):
        registry.register_handler(recorder, "x", "pre")
        registry.register_handler(recorder, "x", "post")

        chain.assign("x", 3)

        assert recorder.values == [3, 3]
        assert chain.get("x") == 3

    def test_global_pre_runs_once_per_assignment(self, chain, registry, recorder):
        registry.register_handler(recorder, None, HandlerStage.PRE)

        chain.assign("x", 1)
        chain.assign("y", 2)
        chain.assign("x", 3)

        assert [(v, n) for v, _, n in recorder.calls] == [(1, "x"), (2, "y"), (3, "x")]

    def test_property_handler_shadows_global_for_that_property(self, chain, registry):
        calls = []
        registry.register_handler(lambda v, e, n: calls.append(("global", n)), None, "post")
        registry.register_handler(lambda v, e, n: calls.append(("own", n)), "x", "post")

        chain.assign("x", 1)
        chain.assign("y", 1)

        assert calls == [("own", "x"), ("global", "y")]

    def test_global_default_handler_replaces_store_everywhere(self, chain, registry, stores):
        registry.register_handler(lambda v, e, n: None, None)

        chain.assign("x", 1)
        chain.assign("y", 2)

        assert len(stores.node) == 0

    def test_unknown_name_is_noop_with_one_warning(self, chain, stores, host, diagnostics):
        assert chain.assign("nope", 1) is False

        assert len(stores.node) == 0
        assert host.warnings == ["nope is not a property"]
        assert diagnostics.count(WarningType.UNKNOWN_PROPERTY) == 1

    def test_handler_exception_propagates(self, chain, registry):
        def boom(value, event, name):
            raise RuntimeError("handler failed")

        registry.register_handler(boom, "x", "pre")

        with pytest.raises(RuntimeError, match="handler failed"):
            chain.assign("x", 1)


class TestAsyncHandlers:
    """Test suite for awaitable handler results."""

    def test_assign_async_awaits_each_stage(self, chain, registry):
        order = []

        async def slow_pre(value, event, name):
            await asyncio.sleep(0)
            order.append("pre")

        registry.register_handler(slow_pre, "x", "pre")
        registry.register_handler(lambda v, e, n: order.append("post"), "x", "post")

        assert asyncio.run(chain.assign_async("x", 4)) is True
        assert order == ["pre", "post"]
        assert chain.get("x") == 4

    def test_assign_async_rejects_unknown(self, chain, host):
        assert asyncio.run(chain.assign_async("nope", 1)) is False
        assert host.warnings == ["nope is not a property"]

    def test_sync_assign_without_loop_discards_coroutine(self, chain, registry):
        ran = []

        async def handler(value, event, name):
            ran.append(value)

        registry.register_handler(handler, "x", "post")

        chain.assign("x", 1)

        assert ran == []
        assert chain.get("x") == 1

    def test_sync_assign_inside_loop_schedules_handler(self, chain, registry):
        ran = []

        async def handler(value, event, name):
            ran.append(value)

        registry.register_handler(handler, "x", "post")

        async def scenario():
            chain.assign("x", 7)
            assert ran == []
            await asyncio.sleep(0)
            await asyncio.sleep(0)

        asyncio.run(scenario())
        assert ran == [7]

    def test_failed_background_handler_is_logged(self, chain, registry, caplog):
        async def handler(value, event, name):
            raise RuntimeError("sensor offline")

        registry.register_handler(handler, "x", "post")
        unhandled = []

        async def scenario():
            asyncio.get_running_loop().set_exception_handler(lambda loop, context: unhandled.append(context))
            chain.assign("x", 7)
            await asyncio.sleep(0)
            await asyncio.sleep(0)

        with caplog.at_level(logging.ERROR, logger="propflow.chain"):
            asyncio.run(scenario())

        assert chain.get("x") == 7
        assert unhandled == []
        [record] = [r for r in caplog.records if r.name == "propflow.chain"]
        assert "post handler for x failed" in record.getMessage()
        assert isinstance(record.exc_info[1], RuntimeError)


class TestScopes:
    """Test suite for get/set_scope."""

    def test_migration_keeps_value(self, chain, stores):
        chain.assign("y", 5)

        assert chain.set_scope("y", "flow") is True

        assert chain.get("y") == 5
        assert stores.flow.get("y") == 5
        chain.assign("y", 6)
        assert stores.flow.get("y") == 6
        assert stores.node.get("y") == 5

    def test_migration_bypasses_handlers(self, chain, registry, recorder):
        chain.assign("x", 1)
        registry.register_handler(recorder, "x", "pre")
        registry.register_handler(recorder, "x")
        registry.register_handler(recorder, "x", "post")

        chain.set_scope("x", Scope.GLOBAL)

        assert recorder.calls == []
        assert chain.get("x") == 1

    def test_invalid_scope_is_rejected(self, chain, host):
        chain.assign("x", 1)

        assert chain.set_scope("x", "cluster") is False

        assert chain.get_scope("x") == Scope.NODE
        assert host.warnings == ["cluster is not an allowed scope"]

    def test_non_string_scope_is_rejected(self, chain, diagnostics):
        assert chain.set_scope("x", 3) is False
        assert diagnostics.count(WarningType.INVALID_SCOPE) == 1

    def test_unknown_name_is_rejected(self, chain, host):
        assert chain.set_scope("nope", "flow") is False
        assert host.warnings == ["nope is not a property"]

    def test_default_scope_rebinding(self, chain, stores):
        chain.assign("x", 1)
        chain.set_scope("y", "global")
        chain.assign("y", 2)

        assert chain.set_scope(None, "flow") is True

        assert chain.get_scope() == Scope.FLOW
        assert chain.get_scope("x") == Scope.FLOW
        assert chain.get_scope("y") == Scope.GLOBAL
        assert stores.flow.get("x") == 1
        assert chain.get("y") == 2

    def test_get_unknown_warns_and_returns_none(self, chain, host):
        assert chain.get("nope") is None
        assert chain.get_scope("nope") is None
        assert host.warnings == ["nope is not a property", "nope is not a property"]
