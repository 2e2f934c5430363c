"""Value kinds and references.

Every value DazzleWalk visits is classified into a coarse ``Kind``.
Bindings can target a kind instead of a concrete type, and container
kinds are the ones the walker descends into.

Python has no pointers, so references are modelled explicitly with
``Ref``. ``None`` is treated as a nil reference wherever it appears
below the root, which is what an unset optional member usually means.
"""

import ctypes
import dataclasses
import inspect
import types
from collections.abc import Mapping, MutableSequence, Sequence, Set
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional


class Kind(Enum):
    """Coarse runtime category of a value."""
    BOOL = "bool"
    INT = "int"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT = "uint"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    UINTPTR = "uintptr"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    COMPLEX = "complex"
    STRING = "string"
    BYTES = "bytes"
    SET = "set"
    FUNC = "func"
    OBJECT = "object"
    # Containers
    LIST = "list"
    TUPLE = "tuple"
    MAPPING = "mapping"
    RECORD = "record"
    POINTER = "pointer"

    @property
    def is_container(self) -> bool:
        return self in CONTAINER_KINDS


CONTAINER_KINDS: FrozenSet[Kind] = frozenset({
    Kind.LIST,
    Kind.TUPLE,
    Kind.MAPPING,
    Kind.RECORD,
    Kind.POINTER,
})

INT_FAMILY: FrozenSet[Kind] = frozenset({
    Kind.INT, Kind.INT8, Kind.INT16, Kind.INT32, Kind.INT64,
})

UINT_FAMILY: FrozenSet[Kind] = frozenset({
    Kind.UINT, Kind.UINT8, Kind.UINT16, Kind.UINT32, Kind.UINT64,
})

# Suffix vocabulary for for_kind_<x> / for_container_<x> handler names.
KIND_NAMES: Dict[str, Kind] = {kind.value: kind for kind in Kind}
KIND_NAMES.update({
    "str": Kind.STRING,
    "float": Kind.FLOAT64,
    "complex128": Kind.COMPLEX,
    "array": Kind.TUPLE,
    "slice": Kind.LIST,
    "seq": Kind.LIST,
    "map": Kind.MAPPING,
    "dict": Kind.MAPPING,
    "struct": Kind.RECORD,
    "ptr": Kind.POINTER,
    "ref": Kind.POINTER,
})


def kind_from_name(name: str) -> Optional[Kind]:
    """Look up a kind by its handler-name suffix (case-insensitive)."""
    return KIND_NAMES.get(name.lower())


class Ref:
    """A reference to another value.

    ``Ref(None)`` is a nil reference. The walker treats a reference as a
    container with one child (the target), or zero children when nil.
    """

    __slots__ = ("target",)

    def __init__(self, target: Any = None):
        self.target = target

    def is_nil(self) -> bool:
        return self.target is None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ref):
            return NotImplemented
        return self.target == other.target

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"Ref({self.target!r})"


def is_nil(value: Any) -> bool:
    """True for ``None`` and for a ``Ref`` without a target."""
    return value is None or (isinstance(value, Ref) and value.target is None)


def deref(value: Any) -> Any:
    """Return the target of a reference (``None`` when nil)."""
    if isinstance(value, Ref):
        return value.target
    if value is None:
        return None
    raise TypeError(f"{type(value).__qualname__} is not a reference")


_SIGNED_BY_SIZE = {1: Kind.INT8, 2: Kind.INT16, 4: Kind.INT32, 8: Kind.INT64}
_UNSIGNED_BY_SIZE = {1: Kind.UINT8, 2: Kind.UINT16, 4: Kind.UINT32, 8: Kind.UINT64}
_CTYPES_CODES = {
    "?": Kind.BOOL,
    "f": Kind.FLOAT32,
    "d": Kind.FLOAT64,
    "g": Kind.FLOAT64,
    "c": Kind.BYTES,
    "z": Kind.BYTES,
    "u": Kind.STRING,
    "Z": Kind.STRING,
    "P": Kind.UINTPTR,
    "O": Kind.OBJECT,
}


def _ctypes_kind(value: ctypes._SimpleCData) -> Kind:
    cls = type(value)
    code = getattr(cls, "_type_", "")
    if not isinstance(code, str) or len(code) != 1:
        return Kind.OBJECT
    if code in _CTYPES_CODES:
        return _CTYPES_CODES[code]
    size = ctypes.sizeof(cls)
    if code in "bhilqn":
        return _SIGNED_BY_SIZE.get(size, Kind.INT)
    if code in "BHILQN":
        return _UNSIGNED_BY_SIZE.get(size, Kind.UINT)
    return Kind.OBJECT


def is_namedtuple(value: Any) -> bool:
    return isinstance(value, tuple) and hasattr(type(value), "_fields")


def is_record(value: Any) -> bool:
    """True when ``value`` is walked member by member."""
    return kind_of(value) is Kind.RECORD


def kind_of(value: Any) -> Kind:
    """Classify ``value`` into a ``Kind``.

    Order matters: ``bool`` before ``int``, namedtuples before tuples,
    mappings before sequences, routines and classes before plain
    instances.
    """
    if value is None or isinstance(value, Ref):
        return Kind.POINTER
    if isinstance(value, bool):
        return Kind.BOOL
    if isinstance(value, ctypes._SimpleCData):
        return _ctypes_kind(value)
    if isinstance(value, int):
        return Kind.INT
    if isinstance(value, float):
        return Kind.FLOAT64
    if isinstance(value, complex):
        return Kind.COMPLEX
    if isinstance(value, str):
        return Kind.STRING
    if isinstance(value, (bytes, bytearray, memoryview)):
        return Kind.BYTES
    if is_namedtuple(value):
        return Kind.RECORD
    if isinstance(value, tuple):
        return Kind.TUPLE
    if isinstance(value, Mapping):
        return Kind.MAPPING
    if isinstance(value, MutableSequence):
        return Kind.LIST
    if isinstance(value, Sequence):
        return Kind.TUPLE
    if isinstance(value, Set):
        return Kind.SET
    if inspect.isroutine(value) or inspect.isclass(value):
        return Kind.FUNC
    if isinstance(value, (types.ModuleType, Enum, BaseException)):
        return Kind.OBJECT
    if dataclasses.is_dataclass(value) or hasattr(type(value), "__walk_fields__"):
        return Kind.RECORD
    if hasattr(value, "__dict__"):
        return Kind.RECORD
    return Kind.OBJECT


def container_size(value: Any, kind: Kind) -> int:
    """Child slot count of a non-record container.

    Mappings count keys and values as separate slots.
    """
    if kind is Kind.POINTER:
        return 0 if is_nil(value) else 1
    if kind is Kind.MAPPING:
        return len(value) * 2
    if kind in (Kind.LIST, Kind.TUPLE):
        return len(value)
    raise ValueError(f"no generic size for kind {kind.value}")
