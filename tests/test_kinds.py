"""Unit tests for value classification and references."""

import ctypes
import datetime
import sys
from collections import OrderedDict, deque, namedtuple
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from dazzlewalk import Kind, Ref, deref, is_nil, kind_of
from dazzlewalk.core.kinds import (
    CONTAINER_KINDS,
    INT_FAMILY,
    UINT_FAMILY,
    container_size,
    kind_from_name,
)


@dataclass
class Point:
    x: int
    y: int


Pair = namedtuple("Pair", "left right")


class Color(Enum):
    RED = 1


class Plain:
    def __init__(self):
        self.a = 1
        self.b = 2


class Declared:
    __slots__ = ("a", "b")
    __walk_fields__ = ("a", "b")

    def __init__(self):
        self.a = 1
        self.b = 2


@pytest.mark.parametrize("value, kind", [
    (True, Kind.BOOL),
    (7, Kind.INT),
    (1.5, Kind.FLOAT64),
    (2j, Kind.COMPLEX),
    ("text", Kind.STRING),
    (b"raw", Kind.BYTES),
    (bytearray(b"raw"), Kind.BYTES),
    ({1, 2}, Kind.SET),
    (frozenset(), Kind.SET),
    ([1], Kind.LIST),
    (deque([1]), Kind.LIST),
    ((1, 2), Kind.TUPLE),
    (range(3), Kind.TUPLE),
    ({"a": 1}, Kind.MAPPING),
    (OrderedDict(), Kind.MAPPING),
    (None, Kind.POINTER),
    (Ref(1), Kind.POINTER),
    (Ref(), Kind.POINTER),
    (Point(1, 2), Kind.RECORD),
    (Pair(1, 2), Kind.RECORD),
    (Plain(), Kind.RECORD),
    (Declared(), Kind.RECORD),
    (len, Kind.FUNC),
    (Point, Kind.FUNC),
    (lambda: None, Kind.FUNC),
    (object(), Kind.OBJECT),
    (datetime.date(2024, 1, 1), Kind.OBJECT),
    (sys, Kind.OBJECT),
    (Color.RED, Kind.OBJECT),
    (ValueError("bad"), Kind.OBJECT),
])
def test_kind_of_builtin_values(value, kind):
    assert kind_of(value) is kind


@pytest.mark.parametrize("value, kind", [
    (ctypes.c_int8(1), Kind.INT8),
    (ctypes.c_int16(1), Kind.INT16),
    (ctypes.c_int32(1), Kind.INT32),
    (ctypes.c_int64(1), Kind.INT64),
    (ctypes.c_uint8(1), Kind.UINT8),
    (ctypes.c_uint16(1), Kind.UINT16),
    (ctypes.c_uint32(1), Kind.UINT32),
    (ctypes.c_uint64(1), Kind.UINT64),
    (ctypes.c_float(1.0), Kind.FLOAT32),
    (ctypes.c_double(1.0), Kind.FLOAT64),
    (ctypes.c_bool(True), Kind.BOOL),
    (ctypes.c_void_p(0), Kind.UINTPTR),
])
def test_kind_of_fixed_width_values(value, kind):
    assert kind_of(value) is kind


def test_families_are_disjoint_scalars():
    assert not INT_FAMILY & UINT_FAMILY
    assert not INT_FAMILY & CONTAINER_KINDS
    assert Kind.INT in INT_FAMILY
    assert Kind.UINT64 in UINT_FAMILY
    assert Kind.UINTPTR not in UINT_FAMILY


def test_is_container():
    assert Kind.RECORD.is_container
    assert Kind.POINTER.is_container
    assert not Kind.STRING.is_container
    assert not Kind.SET.is_container


def test_kind_from_name_aliases():
    assert kind_from_name("Ptr") is Kind.POINTER
    assert kind_from_name("ref") is Kind.POINTER
    assert kind_from_name("struct") is Kind.RECORD
    assert kind_from_name("dict") is Kind.MAPPING
    assert kind_from_name("str") is Kind.STRING
    assert kind_from_name("int32") is Kind.INT32
    assert kind_from_name("nope") is None


class TestReferences:
    """Nil detection and dereferencing."""

    def test_nil(self):
        assert is_nil(None)
        assert is_nil(Ref())
        assert is_nil(Ref(None))
        assert not is_nil(Ref(0))
        assert not is_nil(0)

    def test_deref(self):
        inner = Ref(3)
        assert deref(Ref(inner)) is inner
        assert deref(inner) == 3
        assert deref(None) is None

    def test_deref_non_reference(self):
        with pytest.raises(TypeError):
            deref(5)

    def test_equality(self):
        assert Ref(1) == Ref(1)
        assert Ref(1) != Ref(2)
        assert repr(Ref("a")) == "Ref('a')"


class TestContainerSize:

    def test_mapping_counts_keys_and_values(self):
        assert container_size({"a": 1, "b": 2}, Kind.MAPPING) == 4

    def test_sequences(self):
        assert container_size([1, 2, 3], Kind.LIST) == 3
        assert container_size((), Kind.TUPLE) == 0

    def test_pointer(self):
        assert container_size(Ref(1), Kind.POINTER) == 1
        assert container_size(Ref(), Kind.POINTER) == 0
        assert container_size(None, Kind.POINTER) == 0

    def test_record_has_no_generic_size(self):
        with pytest.raises(ValueError):
            container_size(Point(1, 2), Kind.RECORD)
