"""Binding classification and handler signature checks.

An adapter exposes handler methods whose names say what they bind to:

    for_impl_<any>(ctx, depth, index, name, value: SomeProtocol)
    for_assign_<any>(ctx, depth, index, name, value: SomeClass)
    for_kind_<kind>(ctx, depth, index, name, value)
    for_container_<kind>(ctx, depth, index, size, start, name, value) -> bool
    for_nil_ptr(ctx, depth, index, name, value)
    for_int_x(ctx, depth, index, name, value)
    for_uint_x(ctx, depth, index, name, value)

Value handlers return nothing and signal failure by raising. Container
handlers return True to descend into the children. The same shapes apply
to bindings registered explicitly through ``Binding``.
"""

import abc
import inspect
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

from ..context import TraversalContext
from .kinds import INT_FAMILY, UINT_FAMILY, Kind, kind_from_name


IMPL_PREFIX = "for_impl"
ASSIGN_PREFIX = "for_assign"
KIND_PREFIX = "for_kind_"
CONTAINER_PREFIX = "for_container_"
NIL_PTR_NAME = "for_nil_ptr"
INT_X_NAME = "for_int_x"
UINT_X_NAME = "for_uint_x"


class BindingType(Enum):
    """What a handler binds to."""
    FOR_IMPL = "for_impl"            # interface / protocol
    FOR_ASSIGN = "for_assign"        # concrete class
    FOR_KIND = "for_kind"            # scalar kind
    FOR_CONTAINER = "for_container"  # container kind
    FOR_NIL_PTR = "for_nil_ptr"
    FOR_INT_X = "for_int_x"          # int/int8/int16/int32/int64
    FOR_UINT_X = "for_uint_x"        # uint/uint8/uint16/uint32/uint64

    @property
    def param_count(self) -> int:
        return 7 if self is BindingType.FOR_CONTAINER else 5

    @property
    def is_type_bound(self) -> bool:
        return self in (BindingType.FOR_IMPL, BindingType.FOR_ASSIGN)

    def __str__(self) -> str:
        return self.value


def classify(name: str) -> Optional[Tuple[BindingType, Optional[Kind]]]:
    """Classify a handler name.

    Returns:
        (binding_type, kind) or None when the name is not a handler name.
        ``kind`` is only set for FOR_KIND and FOR_CONTAINER.
    """
    if name == NIL_PTR_NAME:
        return BindingType.FOR_NIL_PTR, None
    if name == INT_X_NAME:
        return BindingType.FOR_INT_X, None
    if name == UINT_X_NAME:
        return BindingType.FOR_UINT_X, None
    if name == IMPL_PREFIX or name.startswith(IMPL_PREFIX + "_"):
        return BindingType.FOR_IMPL, None
    if name == ASSIGN_PREFIX or name.startswith(ASSIGN_PREFIX + "_"):
        return BindingType.FOR_ASSIGN, None
    if name.startswith(KIND_PREFIX):
        kind = kind_from_name(name[len(KIND_PREFIX):])
        if kind is None or kind.is_container:
            return None
        return BindingType.FOR_KIND, kind
    if name.startswith(CONTAINER_PREFIX):
        kind = kind_from_name(name[len(CONTAINER_PREFIX):])
        if kind is None or not kind.is_container:
            return None
        return BindingType.FOR_CONTAINER, kind
    return None


def is_interface(cls: Any) -> bool:
    """True for protocols and abstract base classes."""
    if not inspect.isclass(cls):
        return False
    if getattr(cls, "_is_protocol", False):
        return True
    return inspect.isabstract(cls) or abc.ABC in cls.__bases__


_VALUE_PARAMS = (TraversalContext, int, int, str)
_CONTAINER_PARAMS = (TraversalContext, int, int, int, bool, str)
_EMPTY = inspect.Parameter.empty
_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def _resolved_hints(handler: Callable) -> dict:
    target = getattr(handler, "__func__", handler)
    try:
        return typing.get_type_hints(target)
    except (NameError, TypeError):
        return {}


def _annotation(param: inspect.Parameter, hints: dict) -> Any:
    if param.name in hints:
        return hints[param.name]
    if isinstance(param.annotation, str):
        # unresolvable forward reference, treat as unannotated
        return _EMPTY
    return param.annotation


def _annotation_agrees(annotation: Any, expected: type) -> bool:
    if annotation is _EMPTY or annotation is Any:
        return True
    if expected is TraversalContext:
        return inspect.isclass(annotation) and issubclass(annotation, TraversalContext)
    return annotation is expected


def handler_parameters(handler: Callable) -> Tuple[List[inspect.Parameter], dict]:
    signature = inspect.signature(handler)
    return list(signature.parameters.values()), _resolved_hints(handler)


def check_handler(binding_type: BindingType,
                  handler: Callable,
                  bound_type: Optional[type] = None) -> Tuple[Optional[type], Optional[str]]:
    """Validate ``handler`` against the shape ``binding_type`` requires.

    Args:
        binding_type: Classification of the handler
        handler: The callable to check
        bound_type: Explicit bound class; when omitted, FOR_IMPL and
            FOR_ASSIGN take it from the value parameter's annotation

    Returns:
        (bound_type, problem). ``bound_type`` is the annotated value type
        for FOR_IMPL / FOR_ASSIGN bindings. ``problem`` describes why the
        handler does not conform, or is None when it does.
    """
    if not callable(handler):
        return None, "not callable"
    try:
        params, hints = handler_parameters(handler)
    except (TypeError, ValueError) as exc:
        return None, f"signature unavailable: {exc}"

    if len(params) != binding_type.param_count:
        return None, f"expecting {binding_type.param_count} parameters, found {len(params)}"
    for param in params:
        if param.kind not in _POSITIONAL:
            return None, f"parameter {param.name} must be positional"

    expected = _CONTAINER_PARAMS if binding_type is BindingType.FOR_CONTAINER else _VALUE_PARAMS
    for param, want in zip(params, expected):
        if not _annotation_agrees(_annotation(param, hints), want):
            return None, f"parameter {param.name} should be {want.__name__}"

    returns = hints.get("return", _EMPTY)
    if binding_type is BindingType.FOR_CONTAINER:
        if returns not in (_EMPTY, Any, bool):
            return None, "expecting returns (goin: bool)"
    elif returns not in (_EMPTY, Any, None, type(None)):
        return None, "expecting no return value"

    value_annotation = _annotation(params[-1], hints)
    if binding_type is BindingType.FOR_NIL_PTR:
        if value_annotation not in (_EMPTY, Any, object):
            return None, "nil pointer handler must accept Any"
        return None, None
    if not binding_type.is_type_bound:
        return None, None

    if bound_type is None:
        if value_annotation is _EMPTY or not inspect.isclass(value_annotation):
            return None, "value parameter must be annotated with a class"
        bound_type = value_annotation
    elif not inspect.isclass(bound_type):
        return None, f"{bound_type!r} is not a class"
    elif value_annotation not in (_EMPTY, Any) and not (
            inspect.isclass(value_annotation) and issubclass(bound_type, value_annotation)):
        return None, f"value parameter does not accept {bound_type.__qualname__}"

    interface = is_interface(bound_type)
    if binding_type is BindingType.FOR_IMPL:
        if not interface:
            return None, f"{bound_type.__qualname__} is not an interface"
        if getattr(bound_type, "_is_protocol", False) and \
                not getattr(bound_type, "_is_runtime_protocol", False):
            return None, f"{bound_type.__qualname__} is not runtime checkable"
    elif interface:
        return None, f"{bound_type.__qualname__} is an interface, use {IMPL_PREFIX}"
    return bound_type, None


@dataclass(frozen=True)
class Capability:
    """One accepted binding.

    Attributes:
        index: Declaration index, the precedence order for matching
        name: Handler name
        binding_type: What the handler binds to
        handler: The callable
        bound_type: Bound class for FOR_IMPL / FOR_ASSIGN
        kind: Bound kind for FOR_KIND / FOR_CONTAINER
    """
    index: int
    name: str
    binding_type: BindingType
    handler: Callable
    bound_type: Optional[type] = None
    kind: Optional[Kind] = None

    @property
    def container(self) -> bool:
        return self.binding_type is BindingType.FOR_CONTAINER

    def matches(self, value: Any, kind: Kind) -> bool:
        bt = self.binding_type
        if bt.is_type_bound:
            return isinstance(value, self.bound_type)
        if bt is BindingType.FOR_INT_X:
            return kind in INT_FAMILY
        if bt is BindingType.FOR_UINT_X:
            return kind in UINT_FAMILY
        if bt is BindingType.FOR_NIL_PTR:
            return False  # dispatched before the ordered table
        return kind is self.kind

    def __str__(self) -> str:
        head = f"Idx:{self.index} Name:{self.name}"
        tail = " Container" if self.container else ""
        if self.binding_type is BindingType.FOR_IMPL:
            return f"Item{{{head} Impl:{self.bound_type.__qualname__}{tail}}}"
        if self.binding_type is BindingType.FOR_ASSIGN:
            return f"Item{{{head} Assign:{self.bound_type.__qualname__}{tail}}}"
        if self.kind is not None:
            return f"Item{{{head} Kind:{self.kind.value}{tail}}}"
        return f"Item{{{head} {self.binding_type}{tail}}}"


@dataclass(frozen=True)
class Binding:
    """An explicitly registered rule, see the ``bind_*`` helpers."""
    binding_type: BindingType
    handler: Callable
    target: Any = None

    @property
    def name(self) -> str:
        return getattr(self.handler, "__name__", repr(self.handler))


def bind_type(cls: type, handler: Callable) -> Binding:
    """Bind ``handler`` to a class, or to a protocol / ABC."""
    binding_type = BindingType.FOR_IMPL if is_interface(cls) else BindingType.FOR_ASSIGN
    return Binding(binding_type, handler, cls)


def bind_kind(kind: Kind, handler: Callable) -> Binding:
    return Binding(BindingType.FOR_KIND, handler, kind)


def bind_container(kind: Kind, handler: Callable) -> Binding:
    return Binding(BindingType.FOR_CONTAINER, handler, kind)


def bind_nil_ptr(handler: Callable) -> Binding:
    return Binding(BindingType.FOR_NIL_PTR, handler)


def bind_int_family(handler: Callable) -> Binding:
    return Binding(BindingType.FOR_INT_X, handler)


def bind_uint_family(handler: Callable) -> Binding:
    return Binding(BindingType.FOR_UINT_X, handler)
