"""Depth-first traversal engine for DazzleWalk.

The walker visits a value, asks the registry which handler it belongs
to, calls it, and descends into containers whose start handler returns
True. Every handler receives the shared ``TraversalContext`` plus the
value's position: depth, index in the parent, and member name.

Positions:
    - the root is reported with depth 0, index -1 and an empty name
    - a container opened at depth d reports its children at depth d + 1
    - record members report their dispatch index and name; list, tuple,
      mapping and reference children report their offset and no name
    - a container that is a record member reports the same dispatch
      index as a scalar member would, so hidden members leave gaps there
      too: R(a, _h, c=[5]) reports c at index 2
    - mapping children alternate key (even offset) and value (odd offset)
"""

import logging
from typing import Any, Callable, Optional, Tuple, Union

from ..config import TraversalConfig
from ..context import TraversalContext
from ..errors import (
    BindingMissingError,
    ConfigurationError,
    ContainerEndError,
    HandlerResultError,
    InvariantViolation,
)
from .frame import Frame
from .kinds import Kind, container_size, deref, is_nil, kind_of
from .properties import member_value
from .registry import BindingRegistry, Match

logger = logging.getLogger(__name__)


class Walker:
    """Walks values with the handlers of one binding registry.

    Example:
        class Printer:
            def for_kind_int(self, ctx, depth, index, name, value):
                print("  " * depth, name or index, value)

            def for_container_record(self, ctx, depth, index, size, start, name, value):
                return True

        Walker(Printer()).traverse(Point(x=1, y=2))
    """

    def __init__(self,
                 adapter: Union[Any, BindingRegistry],
                 config: Optional[TraversalConfig] = None):
        """Create a walker.

        Args:
            adapter: Adapter object, or an already built BindingRegistry
            config: Traversal options; copied, so later changes to it
                have no effect on this walker

        Raises:
            RegistryError: If a registry cannot be built from ``adapter``
            ConfigurationError: If ``config`` is invalid
        """
        if isinstance(adapter, BindingRegistry):
            self.registry = adapter
        else:
            self.registry = BindingRegistry.from_adapter(adapter)

        self.config = (config if config is not None else TraversalConfig()).clone()
        problems = self.config.validate()
        if problems:
            raise ConfigurationError(f"Invalid configuration: {'; '.join(problems)}")
        self._resolver = self.config.property_resolver or self.registry.default_resolver

    def traverse(self, value: Any, context: Optional[TraversalContext] = None) -> TraversalContext:
        """Walk ``value`` depth-first.

        Nesting is walked recursively, two interpreter frames per
        container level, so values nested deeper than a few hundred
        containers hit the recursion limit. Chains of unbound references
        under ``auto_dereference_pointers`` are unwrapped in a loop and
        cost no depth.

        Args:
            value: Root value. ``None`` is not walked at all; use
                ``Ref(None)`` to walk a nil reference.
            context: Context shared by all handler calls of this walk.
                A fresh one is created when omitted.

        Returns:
            The context used for the walk

        Raises:
            BindingMissingError: If a value has no binding and missing
                bindings are not tolerated
            HandlerResultError: If a container handler returns a non-bool
            ContainerEndError: If a container end handler raised
            InvariantViolation: On internal inconsistencies
            Exception: Anything a handler raises, unchanged
        """
        ctx = context if context is not None else TraversalContext()
        if value is None:
            return ctx
        self._walk(ctx, None, value)
        return ctx

    def _resolve(self, value: Any) -> Tuple[Optional[Match], Any, Kind]:
        # Unwrapping references loops here instead of recursing, so a
        # long chain of references costs no stack.
        while True:
            kind = kind_of(value)
            match = self.registry.match(value, kind)
            if match is not None:
                return match, value, kind
            if self.config.auto_dereference_pointers and kind is Kind.POINTER:
                if is_nil(value):
                    return None, value, kind
                value = deref(value)
                continue
            if not self.config.tolerate_missing_binding:
                raise BindingMissingError(type(value), kind)
            logger.debug("no binding for %s (%s), skipped", type(value).__qualname__, kind.value)
            return None, value, kind

    @staticmethod
    def _position(parent: Optional[Frame]) -> Tuple[int, int, str]:
        if parent is None:
            return 0, -1, ""
        return parent.depth, parent.child_index(), parent.child_name()

    def _walk(self, ctx: TraversalContext, parent: Optional[Frame], value: Any) -> None:
        match, value, kind = self._resolve(value)
        if match is None:
            return

        handler = self.registry.handler_for(match)
        depth, index, name = self._position(parent)
        if not match.container:
            handler(ctx, depth, index, name, value)
            return

        frame = self._open(parent, value, kind, match)
        goin = handler(ctx, depth, index, frame.size, True, name, value)
        if not isinstance(goin, bool):
            raise HandlerResultError(
                f"{match.capability.name} must return bool, got {type(goin).__qualname__}"
            )
        if not goin:
            return

        self._walk_children(ctx, frame)

        if self.config.bracket_containers:
            self._close(ctx, handler, frame, depth, index, name)

    def _open(self, parent: Optional[Frame], value: Any, kind: Kind, match: Match) -> Frame:
        if not kind.is_container:
            raise InvariantViolation(
                f"container binding {match.capability} matched non-container kind {kind.value}"
            )
        members = None
        if kind is Kind.RECORD:
            size, members = self._resolver.properties(value)
        else:
            size = container_size(value, kind)
        return Frame(
            depth=parent.depth + 1 if parent is not None else 1,
            value=value,
            kind=kind,
            size=size,
            capability=match.capability,
            members=members,
        )

    def _walk_children(self, ctx: TraversalContext, frame: Frame) -> None:
        value = frame.value
        kind = frame.kind
        if kind in (Kind.LIST, Kind.TUPLE):
            for i in range(frame.size):
                frame.offset = i
                self._walk(ctx, frame, value[i])
        elif kind is Kind.MAPPING:
            if frame.size == 0:
                return
            keys = list(value.keys())
            if len(keys) * 2 != frame.size:
                raise InvariantViolation(f"frame:{frame} but len(keys)=={len(keys)}")
            for i, key in enumerate(keys):
                frame.offset = i * 2
                self._walk(ctx, frame, key)
                frame.offset = i * 2 + 1
                self._walk(ctx, frame, value[key])
        elif kind is Kind.RECORD:
            for i, member in enumerate(frame.members or ()):
                if member.is_placeholder:
                    continue
                frame.offset = i
                self._walk(ctx, frame, member_value(value, member))
        elif kind is Kind.POINTER:
            if frame.size > 0:
                frame.offset = 0
                self._walk(ctx, frame, deref(value))
        else:
            raise InvariantViolation(f"unknown container kind {kind.value} in frame {frame}")

    @staticmethod
    def _close(ctx: TraversalContext, handler: Callable, frame: Frame,
               depth: int, index: int, name: str) -> None:
        try:
            handler(ctx, depth, index, frame.size, False, name, frame.value)
        except Exception as exc:
            raise ContainerEndError(f"call container end failed: {exc}") from exc

    def __repr__(self) -> str:
        return f"Walker({self.registry!r}, {self.config})"
