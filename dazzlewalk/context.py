"""Traversal context shared by all handlers of one walk."""

import threading
from dataclasses import dataclass
from typing import Any, Dict, Hashable, Optional

_MISSING = object()


@dataclass(frozen=True)
class ContextKey:
    """A namespaced context key.

    Plain hashable keys work too, but two independent handler sets that
    both use ``"count"`` will clobber each other. Namespaced keys avoid
    that:

        SEEN = ContextKey("myencoder", "seen")
        ctx.put(SEEN, set())
    """
    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}.{self.name}"


class TraversalContext:
    """Thread-safe key/value store threaded through every handler call.

    One context normally belongs to one top-level walk. Reusing it for
    another walk is allowed; nothing is reset automatically.
    """

    def __init__(self, initial: Optional[Dict[Hashable, Any]] = None):
        self._locals: Dict[Hashable, Any] = dict(initial or {})
        self._lock = threading.RLock()

    def get(self, key: Hashable, default: Any = None) -> Any:
        with self._lock:
            return self._locals.get(key, default)

    def put(self, key: Hashable, value: Any) -> "TraversalContext":
        """Store ``value`` under ``key`` and return the context for chaining."""
        with self._lock:
            self._locals[key] = value
        return self

    def setdefault(self, key: Hashable, default: Any = None) -> Any:
        with self._lock:
            return self._locals.setdefault(key, default)

    def update(self, key: Hashable, func, default: Any = None) -> Any:
        """Atomically replace the value under ``key`` with ``func(old)``.

        Args:
            key: Context key
            func: Called with the current value (or ``default``)
            default: Value used when ``key`` is absent

        Returns:
            The new value
        """
        with self._lock:
            value = func(self._locals.get(key, default))
            self._locals[key] = value
            return value

    def pop(self, key: Hashable, default: Any = _MISSING) -> Any:
        with self._lock:
            if default is _MISSING:
                return self._locals.pop(key)
            return self._locals.pop(key, default)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._locals

    def __len__(self) -> int:
        with self._lock:
            return len(self._locals)

    def __repr__(self) -> str:
        return f"TraversalContext(keys={len(self)})"
