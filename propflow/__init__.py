"""
PropFlow: scoped property dispatch for message-driven nodes.

A node declares a fixed set of named properties. Each property can be set
from construction-time config, from a same-named field of an inbound
message, or from a message whose ``topic`` is the property name (its
``payload`` becomes the value). Every assignment runs through a pre, default
and post handler chain, and the default stage stores the value in the
property's scope: the node itself, its flow, or the global context.

Core Components:
    - NodeProperties: Entry point wiring the pipeline for one node
    - PropertyRegistry: Declared properties and their handlers
    - AssignmentResolver: Event to assignment resolution
    - HandlerChain: pre/default/post dispatch and scope migration
    - ScopedStore: Routing of values to node, flow or global stores

Example Usage:
    ```python
    from propflow import Node, NodeProperties

    node = Node(name="lamp")
    props = NodeProperties(node, {"level": 50}, {"level": {}, "mode": {"value": "auto"}})
    props.input({"topic": "mode", "payload": "manual"})
    print(props.get("mode"))
    ```
"""

import logging

__version__ = "0.1.0"

# Public API exports - Core functionality
from .chain import HandlerChain
from .common.exceptions import ConfigValidationError, DeclarationLoadError, PropFlowError
from .config import PropertiesConfig, PropertiesConfigDict
from .diagnostics import Diagnostics, PropertyWarning
from .loader import Declarations, load_declarations, load_events, load_settings
from .models import (
    Handler,
    HandlerSlots,
    HandlerStage,
    PropertyDescriptor,
    PropertyTemplate,
    ResolutionMode,
    Scope,
    WarningType,
)
from .node import HostNode, Node
from .properties import NodeProperties
from .registry import GlobalOverride, PropertyRegistry
from .resolver import Assignment, AssignmentResolver
from .store import ContextRegistry, ContextStores, MemoryStore, ScopeBinding, ScopedStore, ScopeStore

# Warnings reach the host node through ``warn``; log output is opt-in
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Core functionality
    "NodeProperties",
    "Node",
    "HostNode",
    "PropertyRegistry",
    "GlobalOverride",
    "AssignmentResolver",
    "Assignment",
    "HandlerChain",
    "ScopedStore",
    "ScopeBinding",
    "__version__",
    # Storage
    "ScopeStore",
    "MemoryStore",
    "ContextStores",
    "ContextRegistry",
    # Data types
    "Scope",
    "HandlerStage",
    "ResolutionMode",
    "WarningType",
    "Handler",
    "HandlerSlots",
    "PropertyDescriptor",
    "PropertyTemplate",
    "PropertyWarning",
    "Diagnostics",
    # Configuration and loading
    "PropertiesConfig",
    "PropertiesConfigDict",
    "Declarations",
    "load_declarations",
    "load_events",
    "load_settings",
    # Errors
    "PropFlowError",
    "ConfigValidationError",
    "DeclarationLoadError",
]
