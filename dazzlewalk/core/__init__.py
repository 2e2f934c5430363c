"""Core components of DazzleWalk.

This package contains the value model, the binding registry and the
traversal engine.
"""

from .kinds import (
    Kind,
    Ref,
    CONTAINER_KINDS,
    INT_FAMILY,
    UINT_FAMILY,
    kind_of,
    is_nil,
    deref,
)
from .properties import (
    Property,
    PropertyResolver,
    DefaultPropertyResolver,
    TaggedPropertyResolver,
)
from .binding import (
    Binding,
    BindingType,
    Capability,
    bind_type,
    bind_kind,
    bind_container,
    bind_nil_ptr,
    bind_int_family,
    bind_uint_family,
)
from .registry import BindingRegistry, Match
from .frame import Frame
from .walker import Walker

__all__ = [
    "Kind",
    "Ref",
    "CONTAINER_KINDS",
    "INT_FAMILY",
    "UINT_FAMILY",
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
]
