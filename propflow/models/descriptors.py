"""Property descriptors and declaration templates for PropFlow."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypedDict

from pydantic import BaseModel, ConfigDict, field_validator

from propflow.models.enums import HandlerStage, Scope

# A handler receives (value, event, property_name). ``event`` is None for
# construction-time assignments.
Handler = Callable[[Any, Mapping[str, Any] | None, str], Any]


class PropertyTemplateDict(TypedDict, total=False):
    """TypedDict for a property declaration template."""

    value: Any
    scope: str


class PropertyTemplate(BaseModel):
    """
    Declaration template for a single property.

    Mirrors the ``defaults`` entries a node type registers: an optional
    initial ``value`` and an optional ``scope`` binding. Extra keys are kept
    so templates shared with other tooling load unchanged.
    """

    model_config = ConfigDict(extra="allow")

    value: Any = None
    scope: str | None = None

    @field_validator("scope", mode="before")
    @classmethod
    def _scope_as_text(cls, v: Any) -> str | None:
        return None if v is None else str(v)

    @property
    def has_value(self) -> bool:
        """True when the template explicitly declared a default value."""
        return "value" in self.model_fields_set

    @classmethod
    def from_raw(cls, raw: Any) -> "PropertyTemplate":
        """Build a template from a mapping, an existing template, or anything else."""
        if isinstance(raw, PropertyTemplate):
            return raw
        if isinstance(raw, Mapping):
            return cls.model_validate(dict(raw))
        return cls()


@dataclass
class HandlerSlots:
    """Fixed-shape handler record, one optional handler per stage."""

    pre: Handler | None = None
    default: Handler | None = None
    post: Handler | None = None

    def get(self, stage: HandlerStage) -> Handler | None:
        return getattr(self, stage.value)

    def set(self, stage: HandlerStage, handler: Handler | None) -> None:
        setattr(self, stage.value, handler)

    def is_empty(self) -> bool:
        return self.pre is None and self.default is None and self.post is None


@dataclass
class PropertyDescriptor:
    """
    Registry entry for one declared property.

    Attributes:
        name: Unique property name
        initial_value: Default declared by the template (see has_initial_value)
        has_initial_value: Whether the template declared a default at all
        handlers: Per-property handler overrides
        scope: Explicit scope binding, or None to follow the default scope
        skip_initialize: Declared without a template; construction-time config is ignored
    """

    name: str
    initial_value: Any = None
    has_initial_value: bool = False
    handlers: HandlerSlots = field(default_factory=HandlerSlots)
    scope: Scope | None = None
    skip_initialize: bool = False
