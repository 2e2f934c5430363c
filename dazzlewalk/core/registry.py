"""Binding registry and matcher for DazzleWalk.

The registry is built once from an adapter (or an explicit binding
table) and is read-only afterwards, so a single registry can serve any
number of walks, including concurrent ones.
"""

import inspect
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ..errors import (
    AmbiguousBindingError,
    InvalidAdapterError,
    InvalidBindingError,
    InvariantViolation,
    NoBindingError,
)
from .binding import Binding, BindingType, Capability, check_handler, classify
from .kinds import Kind, is_nil, kind_of
from .properties import DefaultPropertyResolver

logger = logging.getLogger(__name__)

_FAMILIES = (BindingType.FOR_INT_X, BindingType.FOR_UINT_X)


@dataclass(frozen=True)
class Match:
    """Result of matching a value against the registry.

    Attributes:
        capability: The winning binding
        bound_type: Bound class when a type rule matched
        kind: Kind of the matched value
    """
    capability: Capability
    bound_type: Optional[type]
    kind: Kind

    @property
    def container(self) -> bool:
        return self.capability.container


def declared_methods(adapter: Any) -> List[str]:
    """Public method names of ``adapter`` in declaration order.

    Base classes come first; an override keeps the position of the
    method it overrides.
    """
    names: Dict[str, None] = {}
    for klass in reversed(type(adapter).__mro__):
        for name, attr in vars(klass).items():
            if name.startswith("_") or name in names:
                continue
            if inspect.isfunction(attr) or isinstance(attr, (staticmethod, classmethod)):
                names[name] = None
    return list(names)


class BindingRegistry:
    """Ordered table of matching rules plus handler lookup maps.

    Rules are kept in declaration order, which is also the precedence
    order: the first rule matching a value wins. A nil-pointer binding,
    when present, is consulted before the table.
    """

    def __init__(self, capabilities: Iterable[Capability], source: str = "bindings"):
        """Validate and index ``capabilities``.

        Args:
            capabilities: Accepted bindings, in any order
            source: Label used in logs and ``repr``

        Raises:
            AmbiguousBindingError: If two bindings share a type, kind,
                family, or the nil-pointer slot
            NoBindingError: If no rule is left for the ordered table
        """
        self.source = source
        type_handlers: Dict[type, Callable] = {}
        kind_handlers: Dict[Kind, Callable] = {}
        family_handlers: Dict[BindingType, Callable] = {}
        nil_ptr: Optional[Capability] = None
        table: List[Capability] = []

        for cap in sorted(capabilities, key=lambda c: c.index):
            bt = cap.binding_type
            if bt is BindingType.FOR_NIL_PTR:
                if nil_ptr is not None:
                    raise AmbiguousBindingError(
                        f"duplicated binding function {cap.name} found for Nil Ptr"
                    )
                nil_ptr = cap
                continue
            if bt.is_type_bound:
                if cap.bound_type in type_handlers:
                    raise AmbiguousBindingError(
                        f"duplicated binding function {cap.name} found for "
                        f"Type:{cap.bound_type.__qualname__}"
                    )
                type_handlers[cap.bound_type] = cap.handler
            elif bt in _FAMILIES:
                if bt in family_handlers:
                    raise AmbiguousBindingError(
                        f"duplicated binding function {cap.name} found for {bt}"
                    )
                family_handlers[bt] = cap.handler
            else:
                if cap.kind in kind_handlers:
                    raise AmbiguousBindingError(
                        f"duplicated binding function {cap.name} found for "
                        f"Kind:{cap.kind.value}"
                    )
                kind_handlers[cap.kind] = cap.handler
            table.append(cap)

        if not table:
            raise NoBindingError(f"no available binding function found in {source}")

        self._table: Tuple[Capability, ...] = tuple(table)
        self._nil_ptr = nil_ptr
        self._type_handlers = MappingProxyType(type_handlers)
        self._kind_handlers = MappingProxyType(kind_handlers)
        self._family_handlers = MappingProxyType(family_handlers)
        self.default_resolver = DefaultPropertyResolver()
        logger.debug("built %r", self)

    @classmethod
    def from_adapter(cls, adapter: Any) -> 'BindingRegistry':
        """Build a registry from an adapter's ``for_*`` methods.

        Methods whose names are not handler names, or whose signatures
        do not fit their classification, are ignored.

        Args:
            adapter: Object exposing handler methods

        Returns:
            BindingRegistry

        Raises:
            InvalidAdapterError: If ``adapter`` is None or a class
            AmbiguousBindingError: See ``BindingRegistry``
            NoBindingError: If no method was accepted
        """
        if adapter is None:
            raise InvalidAdapterError("invalid adapter: None")
        if inspect.isclass(adapter):
            raise InvalidAdapterError(
                f"invalid adapter: expected an instance of {adapter.__qualname__}, got the class"
            )

        adapter_name = type(adapter).__qualname__
        capabilities = []
        for index, name in enumerate(declared_methods(adapter)):
            classified = classify(name)
            if classified is None:
                continue
            binding_type, kind = classified
            handler = getattr(adapter, name)
            bound_type, problem = check_handler(binding_type, handler)
            if problem is not None:
                logger.debug("ignoring %s.%s: %s", adapter_name, name, problem)
                continue
            capabilities.append(Capability(
                index=index,
                name=name,
                binding_type=binding_type,
                handler=handler,
                bound_type=bound_type,
                kind=kind,
            ))
        return cls(capabilities, source=adapter_name)

    @classmethod
    def from_bindings(cls, bindings: Sequence[Binding]) -> 'BindingRegistry':
        """Build a registry from an explicit binding table.

        The position of a binding in ``bindings`` is its declaration
        index. Unlike ``from_adapter``, a handler that does not fit its
        binding is an error here.

        Raises:
            InvalidBindingError: If a binding target or handler is wrong
        """
        capabilities = []
        for index, binding in enumerate(bindings):
            bt = binding.binding_type
            kind = None
            if bt in (BindingType.FOR_KIND, BindingType.FOR_CONTAINER):
                kind = binding.target
                if not isinstance(kind, Kind):
                    raise InvalidBindingError(f"binding {index} ({binding.name}): {kind!r} is not a Kind")
                if kind.is_container != (bt is BindingType.FOR_CONTAINER):
                    helper = "bind_kind" if bt is BindingType.FOR_CONTAINER else "bind_container"
                    raise InvalidBindingError(
                        f"binding {index} ({binding.name}): use {helper} for kind {kind.value}"
                    )
            bound_type, problem = check_handler(
                bt, binding.handler, binding.target if bt.is_type_bound else None
            )
            if problem is not None:
                raise InvalidBindingError(f"binding {index} ({binding.name}): {problem}")
            capabilities.append(Capability(
                index=index,
                name=binding.name,
                binding_type=bt,
                handler=binding.handler,
                bound_type=bound_type,
                kind=kind,
            ))
        return cls(capabilities)

    @property
    def capabilities(self) -> Tuple[Capability, ...]:
        return self._table

    @property
    def nil_ptr(self) -> Optional[Capability]:
        return self._nil_ptr

    def match(self, value: Any, kind: Optional[Kind] = None) -> Optional[Match]:
        """Find the binding for ``value``.

        A nil reference goes to the nil-pointer binding when there is
        one. Otherwise the first rule in declaration order that matches
        wins.

        Args:
            value: Value to match
            kind: Precomputed ``kind_of(value)``

        Returns:
            Match, or None when no rule matches
        """
        if kind is None:
            kind = kind_of(value)
        if self._nil_ptr is not None and kind is Kind.POINTER and is_nil(value):
            return Match(self._nil_ptr, None, kind)
        for cap in self._table:
            if cap.matches(value, kind):
                return Match(cap, cap.bound_type, kind)
        return None

    def handler_for(self, match: Match) -> Callable:
        """Look up the callable of a match.

        Raises:
            InvariantViolation: If the lookup maps disagree with the table
        """
        cap = match.capability
        bt = cap.binding_type
        if bt is BindingType.FOR_NIL_PTR:
            handler = self._nil_ptr.handler if self._nil_ptr is not None else None
        elif bt.is_type_bound:
            handler = self._type_handlers.get(cap.bound_type)
        elif bt in _FAMILIES:
            handler = self._family_handlers.get(bt)
        else:
            handler = self._kind_handlers.get(cap.kind)
        if handler is None:
            raise InvariantViolation(f"matching item {cap}, but no handler is registered for it")
        return handler

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        nil_ptr = " NilPtr" if self._nil_ptr is not None else ""
        items = ", ".join(str(cap) for cap in self._table)
        return (
            f"BindingRegistry{{adapter:{self.source}{nil_ptr} "
            f"Types:{len(self._type_handlers)} Kinds:{len(self._kind_handlers)} "
            f"Items:[{items}]}}"
        )
