"""Unit tests for TraversalContext and ContextKey."""

import sys
import threading
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from dazzlewalk import ContextKey, TraversalContext


class TestTraversalContext:

    def test_get_and_put(self):
        ctx = TraversalContext()
        assert ctx.get("missing") is None
        assert ctx.get("missing", 5) == 5
        assert ctx.put("a", 1) is ctx
        assert ctx.get("a") == 1
        assert "a" in ctx
        assert len(ctx) == 1

    def test_initial_values_are_copied(self):
        initial = {"a": 1}
        ctx = TraversalContext(initial)
        ctx.put("b", 2)
        assert initial == {"a": 1}
        assert len(ctx) == 2

    def test_setdefault(self):
        ctx = TraversalContext()
        items = ctx.setdefault("items", [])
        items.append(1)
        assert ctx.setdefault("items", []) == [1]

    def test_update(self):
        ctx = TraversalContext()
        assert ctx.update("n", lambda n: n + 1, 0) == 1
        assert ctx.update("n", lambda n: n * 10) == 10

    def test_pop(self):
        ctx = TraversalContext({"a": 1})
        assert ctx.pop("a") == 1
        assert ctx.pop("a", None) is None
        with pytest.raises(KeyError):
            ctx.pop("a")

    def test_repr(self):
        assert repr(TraversalContext({"a": 1})) == "TraversalContext(keys=1)"

    def test_concurrent_updates(self):
        ctx = TraversalContext()

        def work():
            for _ in range(1000):
                ctx.update("count", lambda n: n + 1, 0)

        threads = [threading.Thread(target=work) for _ in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert ctx.get("count") == 10000


class TestContextKey:

    def test_namespaced_keys_do_not_collide(self):
        ctx = TraversalContext()
        ctx.put(ContextKey("encoder", "count"), 1)
        ctx.put(ContextKey("printer", "count"), 2)
        assert ctx.get(ContextKey("encoder", "count")) == 1
        assert ctx.get(ContextKey("printer", "count")) == 2
        assert ctx.get("count") is None

    def test_str(self):
        assert str(ContextKey("encoder", "seen")) == "encoder.seen"
