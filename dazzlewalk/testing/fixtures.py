"""Test fixtures for DazzleWalk consumers.

``Recorder`` binds a handler to every kind and records each call, which
makes walk order easy to assert on in tests.
"""

from typing import Any, Iterable, List, NamedTuple, Optional

from ..core.binding import (
    Binding,
    bind_container,
    bind_kind,
    bind_nil_ptr,
)
from ..core.kinds import Kind
from ..core.registry import BindingRegistry


class Visit(NamedTuple):
    """One recorded handler call.

    ``event`` is "value", "start", "end" or "nil"; ``size`` is -1 for
    non-container events.
    """
    event: str
    depth: int
    index: int
    name: str
    value: Any
    size: int = -1


class Recorder:
    """Records every handler call of a walk.

    Example:
        recorder = Recorder()
        Walker(recorder.registry()).traverse({"a": 1})
        assert recorder.events() == [
            ("start", 0, -1, ""),
            ("value", 1, 0, ""),
            ("value", 1, 1, ""),
        ]
    """

    def __init__(self,
                 descend: bool = True,
                 nil_ptr: bool = False,
                 kinds: Optional[Iterable[Kind]] = None):
        """Initialize the recorder.

        Args:
            descend: Value returned by container start handlers
            nil_ptr: Also register a nil-pointer handler
            kinds: Kinds to bind (default: all of them)
        """
        self.descend = descend
        self.nil_ptr = nil_ptr
        self.kinds = list(kinds) if kinds is not None else list(Kind)
        self.visits: List[Visit] = []

    def on_value(self, ctx, depth, index, name, value):
        self.visits.append(Visit("value", depth, index, name, value))

    def on_container(self, ctx, depth, index, size, start, name, value):
        self.visits.append(Visit("start" if start else "end", depth, index, name, value, size))
        return self.descend

    def on_nil(self, ctx, depth, index, name, value):
        self.visits.append(Visit("nil", depth, index, name, value))

    def bindings(self) -> List[Binding]:
        bindings = []
        if self.nil_ptr:
            bindings.append(bind_nil_ptr(self.on_nil))
        for kind in self.kinds:
            if kind.is_container:
                bindings.append(bind_container(kind, self.on_container))
            else:
                bindings.append(bind_kind(kind, self.on_value))
        return bindings

    def registry(self) -> BindingRegistry:
        return BindingRegistry.from_bindings(self.bindings())

    def events(self) -> List[tuple]:
        """(event, depth, index, name) of every visit, without values."""
        return [(v.event, v.depth, v.index, v.name) for v in self.visits]

    def values(self, event: str = "value") -> List[Any]:
        return [v.value for v in self.visits if v.event == event]

    def clear(self) -> None:
        self.visits.clear()
