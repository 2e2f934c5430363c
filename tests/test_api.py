"""Tests for the functional API."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from dazzlewalk import (
    BindingRegistry,
    Kind,
    TraversalConfig,
    TraversalContext,
    Walker,
    bind_container,
    bind_kind,
    build_registry,
    build_walker,
    traverse,
)
from dazzlewalk.testing import Recorder


class Collector:
    def for_kind_int(self, ctx, depth, index, name, value):
        ctx.setdefault("ints", []).append(value)

    def for_container_list(self, ctx, depth, index, size, start, name, value):
        if not start:
            ctx.update("closed", lambda n: n + 1, 0)
        return True


class TestBuildRegistry:

    def test_from_adapter(self):
        registry = build_registry(Collector())
        assert registry.source == "Collector"
        assert len(registry) == 2

    def test_from_binding_list(self):
        recorder = Recorder(kinds=[Kind.INT, Kind.LIST])
        registry = build_registry(recorder.bindings())
        assert registry.source == "bindings"
        assert len(registry) == 2

    def test_from_binding_tuple(self):
        registry = build_registry((
            bind_kind(Kind.INT, Recorder().on_value),
            bind_container(Kind.LIST, Recorder().on_container),
        ))
        assert len(registry) == 2


class TestBuildWalker:

    def test_reuses_registry(self):
        registry = build_registry(Collector())
        walker = build_walker(registry)
        assert isinstance(walker, Walker)
        assert walker.registry is registry

    def test_kwargs_override_config(self):
        base = TraversalConfig(tolerate_missing_binding=True)
        walker = build_walker(Collector(), base, bracket_containers=True)
        assert walker.config.tolerate_missing_binding
        assert walker.config.bracket_containers
        assert base.bracket_containers is False

    def test_unknown_option(self):
        with pytest.raises(TypeError, match="unknown traversal option"):
            build_walker(Collector(), bracket=True)

    @pytest.mark.parametrize("option", ["clone", "validate", "strict", "lenient"])
    def test_method_names_are_not_options(self, option):
        with pytest.raises(TypeError, match="unknown traversal option"):
            traverse([1], Recorder().registry(), **{option: True})


class TestTraverse:

    def test_one_shot(self):
        ctx = traverse([1, [2, 3]], Collector(), bracket_containers=True)
        assert ctx.get("ints") == [1, 2, 3]
        assert ctx.get("closed") == 2

    def test_with_context(self):
        ctx = TraversalContext({"ints": [0]})
        assert traverse([1], Collector(), context=ctx) is ctx
        assert ctx.get("ints") == [0, 1]

    def test_with_binding_list(self):
        recorder = Recorder(kinds=[Kind.INT, Kind.LIST])
        traverse([1, 2], recorder.bindings())
        assert recorder.values() == [1, 2]

    def test_with_registry(self):
        recorder = Recorder()
        registry = recorder.registry()
        assert isinstance(registry, BindingRegistry)
        traverse({"k": "v"}, registry)
        assert recorder.values() == ["k", "v"]
