"""DazzleWalk - depth-first object-graph traversal with handler dispatch.

DazzleWalk visits every reachable member of a Python value (scalars,
references, lists, tuples, mappings and records) exactly once, in a
deterministic depth-first order, and hands each one to the adapter
handler whose binding matches it.

Quick start:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from dazzlewalk import Walker

    class Collect:
        def for_kind_int(self, ctx, depth, index, name, value):
            ctx.setdefault("ints", []).append(value)

        def for_container_list(self, ctx, depth, index, size, start, name, value):
            return True

    ctx = Walker(Collect()).traverse([1, [2, 3]])
    ctx.get("ints")   # [1, 2, 3]
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

import logging

__version__ = "0.1.0"

from .errors import (
    WalkError,
    RegistryError,
    InvalidAdapterError,
    AmbiguousBindingError,
    NoBindingError,
    InvalidBindingError,
    BindingMissingError,
    HandlerResultError,
    ContainerEndError,
    PropertyOrderError,
    InvariantViolation,
    ConfigurationError,
)
from .context import TraversalContext, ContextKey
from .config import TraversalConfig
from .core import (
    Kind,
    Ref,
    kind_of,
    is_nil,
    deref,
    Property,
    PropertyResolver,
    DefaultPropertyResolver,
    TaggedPropertyResolver,
    Binding,
    BindingType,
    Capability,
    bind_type,
    bind_kind,
    bind_container,
    bind_nil_ptr,
    bind_int_family,
    bind_uint_family,
    BindingRegistry,
    Match,
    Frame,
    Walker,
)
from .api import build_registry, build_walker, traverse

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    # Errors
    "WalkError",
    "RegistryError",
    "InvalidAdapterError",
    "AmbiguousBindingError",
    "NoBindingError",
    "InvalidBindingError",
    "BindingMissingError",
    "HandlerResultError",
    "ContainerEndError",
    "PropertyOrderError",
    "InvariantViolation",
    "ConfigurationError",
    # Context and config
    "TraversalContext",
    "ContextKey",
    "TraversalConfig",
    # Core
    "Kind",
    "Ref",
    "kind_of",
    "is_nil",
    "deref",
    "Property",
    "PropertyResolver",
    "DefaultPropertyResolver",
    "TaggedPropertyResolver",
    "Binding",
    "BindingType",
    "Capability",
    "bind_type",
    "bind_kind",
    "bind_container",
    "bind_nil_ptr",
    "bind_int_family",
    "bind_uint_family",
    "BindingRegistry",
    "Match",
    "Frame",
    "Walker",
    # API
    "build_registry",
    "build_walker",
    "traverse",
]
