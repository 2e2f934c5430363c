#!/usr/bin/env python3
"""Demo script for DazzleWalk.

Builds a small JSON-like encoder and a tree printer out of handler
methods, then walks the same value with both.
"""

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from dazzlewalk import (
    ContextKey,
    Ref,
    TaggedPropertyResolver,
    TraversalConfig,
    Walker,
    traverse,
)

OUT = ContextKey("encoder", "out")
FIRST = ContextKey("encoder", "first")


@dataclass
class Address:
    city: str = field(metadata={"walk_order": 1})
    street: str = field(metadata={"walk_order": 0})


@dataclass
class Person:
    name: str
    age: int
    tags: list = field(default_factory=list)
    address: Optional[Address] = None
    manager: Optional[Ref] = None


class Encoder:
    """Writes values as JSON text into the context."""

    def _emit(self, ctx, index, name, text):
        out = ctx.setdefault(OUT, [])
        first = ctx.setdefault(FIRST, [True])
        if index >= 0:
            if not first[-1]:
                out.append(", ")
            first[-1] = False
        if name:
            out.append(f'"{name}": ')
        out.append(text)

    def for_nil_ptr(self, ctx, depth, index, name, value):
        self._emit(ctx, index, name, "null")

    def for_kind_bool(self, ctx, depth, index, name, value):
        self._emit(ctx, index, name, "true" if value else "false")

    def for_kind_int(self, ctx, depth, index, name, value):
        self._emit(ctx, index, name, str(value))

    def for_kind_string(self, ctx, depth, index, name, value):
        self._emit(ctx, index, name, f'"{value}"')

    def for_container_list(self, ctx, depth, index, size, start, name, value):
        return self._bracket(ctx, index, name, start, "[", "]")

    def for_container_record(self, ctx, depth, index, size, start, name, value):
        return self._bracket(ctx, index, name, start, "{", "}")

    def _bracket(self, ctx, index, name, start, opening, closing):
        first = ctx.setdefault(FIRST, [True])
        if start:
            self._emit(ctx, index, name, opening)
            first.append(True)
        else:
            first.pop()
            ctx.get(OUT).append(closing)
        return True


class Printer:
    """Prints one indented line per visited value."""

    def for_kind_int(self, ctx, depth, index, name, value):
        print(f"{'  ' * depth}{name or index}: {value}")

    def for_kind_string(self, ctx, depth, index, name, value):
        print(f"{'  ' * depth}{name or index}: {value!r}")

    def for_container_list(self, ctx, depth, index, size, start, name, value):
        print(f"{'  ' * depth}{name or index}: list[{size}]")
        return True

    def for_container_record(self, ctx, depth, index, size, start, name, value):
        print(f"{'  ' * depth}{name or index}: {type(value).__name__}")
        return True


def main():
    boss = Person("Ada", 52, ["lead"], Address("London", "1 Main St"))
    person = Person("Bob", 31, ["dev", "ops"], Address("Paris", "2 Rue"), Ref(boss))

    print("=== Encoder ===")
    config = TraversalConfig(
        bracket_containers=True,
        property_resolver=TaggedPropertyResolver(),
        auto_dereference_pointers=True,
    )
    ctx = Walker(Encoder(), config).traverse(person)
    print("".join(ctx.get(OUT)))

    print("\n=== Printer (missing bindings tolerated) ===")
    traverse(person, Printer(), TraversalConfig.lenient())


if __name__ == "__main__":
    main()
