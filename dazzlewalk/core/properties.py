"""Record member resolution for DazzleWalk.

A property resolver turns a record value into the ordered list of
members the walker visits. The default resolver lists public members in
declaration order; ``TaggedPropertyResolver`` lets dataclass field
metadata reorder them.
"""

import dataclasses
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..errors import PropertyOrderError
from .kinds import is_namedtuple


@dataclass(frozen=True)
class Property:
    """One visitable slot of a record.

    Attributes:
        index: Position in the record's native member list. -1 marks a
            placeholder with no backing member.
        name: Member name
        order: Effective order used for dispatch. -1 means "use index".
    """
    index: int
    name: str
    order: int = -1

    @property
    def is_placeholder(self) -> bool:
        return self.index < 0

    @property
    def dispatch_index(self) -> int:
        """Index reported to handlers as the position in the parent."""
        return self.order if self.order >= 0 else self.index

    def __str__(self) -> str:
        if self.order >= 0:
            return f"{{{self.index}({self.order}).{self.name}}}"
        return f"{{{self.index}.{self.name}}}"


class PropertyResolver(ABC):
    """Produces the ordered, visible members of a record."""

    @abstractmethod
    def properties(self, record: Any) -> Tuple[int, List[Property]]:
        """Resolve the members of ``record``.

        Args:
            record: A value of kind RECORD

        Returns:
            Tuple of (size, members). ``size`` is the number of dispatch
            slots and may exceed ``len(members)`` when placeholder slots
            are wanted. Members are sorted by (dispatch order, index).
        """
        pass


def native_members(record: Any) -> Sequence[str]:
    """Member names of ``record`` in declaration order, hidden ones included."""
    cls = type(record)
    if dataclasses.is_dataclass(record):
        return [f.name for f in dataclasses.fields(record)]
    if is_namedtuple(record):
        return list(cls._fields)
    declared = getattr(cls, "__walk_fields__", None)
    if declared is not None:
        return list(declared)
    return list(vars(record))


def _is_type_stable(record: Any) -> bool:
    # __dict__-driven records can differ per instance
    return (dataclasses.is_dataclass(record)
            or is_namedtuple(record)
            or hasattr(type(record), "__walk_fields__"))


def is_visible(name: str) -> bool:
    return not name.startswith("_")


class DefaultPropertyResolver(PropertyResolver):
    """Public members in declaration order, no effective order.

    Schemas of dataclasses, namedtuples and ``__walk_fields__`` classes
    are cached per type. The cache belongs to the resolver instance, and
    each ``BindingRegistry`` owns its own resolver.
    """

    def __init__(self):
        self._schemas: Dict[type, Tuple[int, Tuple[Property, ...]]] = {}
        self._lock = threading.Lock()

    def properties(self, record: Any) -> Tuple[int, List[Property]]:
        if not _is_type_stable(record):
            size, members = self._build(record)
            return size, list(members)

        cls = type(record)
        with self._lock:
            cached = self._schemas.get(cls)
        if cached is None:
            cached = self._build(record)
            with self._lock:
                self._schemas.setdefault(cls, cached)
        size, members = cached
        return size, list(members)

    def cached_types(self) -> List[type]:
        with self._lock:
            return list(self._schemas)

    @staticmethod
    def _build(record: Any) -> Tuple[int, Tuple[Property, ...]]:
        members = tuple(
            Property(index=i, name=name)
            for i, name in enumerate(native_members(record))
            if is_visible(name)
        )
        return len(members), members


class TaggedPropertyResolver(PropertyResolver):
    """Orders dataclass members by field metadata.

    Example:
        @dataclass
        class Header:
            magic: int = field(metadata={"walk_order": 0})
            flags: int = field(metadata={"walk_order": 2})
            note: str = field(default="", metadata={"walk_skip": True})

    Members without an explicit order keep their declaration position.
    An explicit order may leave gaps (the gaps become placeholder slots)
    but may never be smaller than the member's sorted position, nor
    repeat an earlier order. Violations raise ``PropertyOrderError``.
    """

    def __init__(self, order_key: str = "walk_order", skip_key: str = "walk_skip"):
        self.order_key = order_key
        self.skip_key = skip_key

    def properties(self, record: Any) -> Tuple[int, List[Property]]:
        type_name = type(record).__qualname__
        members = [
            Property(index=i, name=name, order=self._explicit_order(type_name, name, meta))
            for i, name, meta in self._candidates(record)
        ]
        members.sort(key=lambda p: (p.order if p.order >= 0 else p.index, p.index))

        resolved: List[Property] = []
        previous = -1
        for position, member in enumerate(members):
            order = member.order
            if order < 0:
                order = position
            elif order < position:
                raise PropertyOrderError(
                    f"illegal order ({order}) for member {member.name} "
                    f"of type {type_name}, should be >= {position}"
                )
            if order <= previous:
                raise PropertyOrderError(
                    f"duplicate order ({order}) for member {member.name} "
                    f"of type {type_name}"
                )
            previous = order
            resolved.append(dataclasses.replace(member, order=order))

        size = resolved[-1].order + 1 if resolved else 0
        return size, resolved

    def _candidates(self, record: Any):
        if dataclasses.is_dataclass(record):
            fields = {f.name: f.metadata for f in dataclasses.fields(record)}
        else:
            fields = {}
        for i, name in enumerate(native_members(record)):
            if not is_visible(name):
                continue
            meta = fields.get(name, {})
            if meta.get(self.skip_key):
                continue
            yield i, name, meta

    def _explicit_order(self, type_name: str, name: str, meta: Any) -> int:
        raw: Optional[Any] = meta.get(self.order_key)
        if raw is None:
            return -1
        if isinstance(raw, str):
            raw = raw.strip()
            if not raw.isdigit():
                raise PropertyOrderError(
                    f"illegal {self.order_key} ({raw!r}) for member {name} of type {type_name}"
                )
            raw = int(raw)
        if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
            raise PropertyOrderError(
                f"illegal {self.order_key} ({raw!r}) for member {name} of type {type_name}"
            )
        return raw


def member_value(record: Any, member: Property) -> Any:
    """Read the value behind ``member``; placeholders have none."""
    if member.is_placeholder:
        return None
    return getattr(record, member.name)
