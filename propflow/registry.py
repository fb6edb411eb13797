"""
Property registry for PropFlow.

Holds the fixed set of declared properties, their per-property handler slots
and scope bindings, plus the global handler override applying to every
property that lacks a more specific handler for a stage.
"""

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any

from propflow.diagnostics import Diagnostics
from propflow.models import (
    Handler,
    HandlerSlots,
    HandlerStage,
    PropertyDescriptor,
    PropertyTemplate,
    Scope,
)

logger = logging.getLogger(__name__)


class GlobalOverride(HandlerSlots):
    """Handlers applying to all properties without their own handler for a stage."""


class PropertyRegistry:
    """
    Registry of declared properties.

    The set of names is fixed once declared. Every operation naming an
    undeclared property is rejected with an ``unknown_property`` warning and
    leaves the registry untouched.

    Example:
        registry = PropertyRegistry(diagnostics, {"mode": {"value": "auto"}, "count": {}})
        registry.register_handler(on_mode, "mode", HandlerStage.POST)
    """

    def __init__(self, diagnostics: Diagnostics, properties: Mapping[str, Any] | None = None):
        self._diagnostics = diagnostics
        self._descriptors: dict[str, PropertyDescriptor] = {}
        self._global = GlobalOverride()
        if properties:
            self.declare(properties)

    def declare(self, properties: Mapping[str, Any]) -> None:
        """
        Declare the property set from a mapping of name to template.

        Templates are mappings (or PropertyTemplate instances) with an optional
        ``value`` default and ``scope`` binding. Any other template, including
        None, declares the property with no template data; such properties
        are left out of ``initialize``.

        Args:
            properties: Mapping of property name to declaration template
        """
        if self._descriptors:
            logger.warning("Property set already declared; ignoring %d new declarations", len(properties))
            return

        for name, raw in properties.items():
            template = PropertyTemplate.from_raw(raw)
            scope = None
            if template.scope is not None:
                scope = Scope.parse(template.scope)
                if scope is None:
                    self._diagnostics.invalid_scope(template.scope, name)
            self._descriptors[name] = PropertyDescriptor(
                name=name,
                initial_value=template.value,
                has_initial_value=template.has_value,
                scope=scope,
                skip_initialize=not isinstance(raw, (Mapping, PropertyTemplate)),
            )
        logger.debug("Declared properties: %s", ", ".join(self._descriptors))

    def initialize(self, config: Mapping[str, Any] | None, assign: Callable[[str, Any, None], Any]) -> None:
        """
        Prime every property from construction-time config or its default.

        A same-named field in ``config`` wins over the template default.
        Properties with neither are left unassigned. Properties declared
        without a template (None, False or any non-mapping) are skipped.
        Assignments run in declaration order through ``assign`` with no event.

        Args:
            config: Construction-time configuration mapping
            assign: Dispatch entry point receiving (name, value, event)
        """
        config = config or {}
        for name, descriptor in self._descriptors.items():
            if descriptor.skip_initialize:
                continue
            if name in config:
                assign(name, config[name], None)
            elif descriptor.has_initial_value:
                assign(name, descriptor.initial_value, None)

    @property
    def names(self) -> tuple[str, ...]:
        """Declared names in declaration order."""
        return tuple(self._descriptors)

    @property
    def global_override(self) -> GlobalOverride:
        return self._global

    def is_known(self, name: object) -> bool:
        return isinstance(name, str) and name in self._descriptors

    def descriptor(self, name: str) -> PropertyDescriptor | None:
        return self._descriptors.get(name) if self.is_known(name) else None

    def register_handler(
        self,
        handler: Handler,
        names: str | Iterable[str] | None = None,
        stage: HandlerStage | str | None = HandlerStage.DEFAULT,
    ) -> bool:
        """
        Register a handler for one stage.

        With no names the handler becomes the global override for the stage.
        With several names the same handler fills each property's slot. The
        registration is all-or-nothing: a non-callable handler or any
        undeclared name rejects the whole call.

        Args:
            handler: Callable taking (value, event, property_name)
            names: Property name, iterable of names, or None for all properties
            stage: ``pre``, ``post``; anything else means the default stage

        Returns:
            True if the handler was registered, False if rejected
        """
        stage = HandlerStage.coerce(stage)

        if not callable(handler):
            self._diagnostics.invalid_handler(names)
            return False

        if names is None:
            self._global.set(stage, handler)
            logger.debug("Registered global %s handler", stage.value)
            return True

        if isinstance(names, str) or not isinstance(names, Iterable):
            targets = [names]
        else:
            targets = list(names)
        unknown = [name for name in targets if not self.is_known(name)]
        if unknown:
            for name in unknown:
                self._diagnostics.unknown_property(name)
            return False

        for name in targets:
            self._descriptors[name].handlers.set(stage, handler)
        logger.debug("Registered %s handler for %s", stage.value, ", ".join(targets))
        return True

    def handler_for(self, name: str, stage: HandlerStage) -> Handler | None:
        """Per-property handler for the stage, falling back to the global override."""
        handler = self._descriptors[name].handlers.get(stage)
        if handler is None:
            handler = self._global.get(stage)
        return handler

    def bind_scope(self, name: str, scope: Scope | None) -> None:
        """Set (or clear, with None) the explicit scope binding of a declared property."""
        self._descriptors[name].scope = scope

    def __contains__(self, name: object) -> bool:
        return self.is_known(name)

    def __iter__(self) -> Iterator[str]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)
