"""Exceptions raised by DazzleWalk.

Registry construction errors are fatal to the registry being built.
Walk errors abort the walk in flight; nothing performed by handlers
before the failure is rolled back.
"""

from typing import Any, Optional


class WalkError(Exception):
    """Base class for all DazzleWalk errors."""
    pass


class RegistryError(WalkError):
    """Raised when a binding registry cannot be built."""
    pass


class InvalidAdapterError(RegistryError):
    """Raised when the adapter itself is unusable (e.g. None)."""
    pass


class AmbiguousBindingError(RegistryError):
    """Raised when two bindings claim the same type, kind or family."""
    pass


class NoBindingError(RegistryError):
    """Raised when an adapter exposes no usable binding at all."""
    pass


class InvalidBindingError(RegistryError):
    """Raised when an explicitly registered handler has the wrong shape."""
    pass


class BindingMissingError(WalkError):
    """Raised when no binding matches a visited value.

    Attributes:
        value_type: Runtime type of the unmatched value
        kind: Kind of the unmatched value
    """

    def __init__(self, value_type: type, kind: Any, message: Optional[str] = None):
        self.value_type = value_type
        self.kind = kind
        if message is None:
            message = (
                f"type:{value_type.__qualname__} kind:{getattr(kind, 'value', kind)} "
                f"binding is missing"
            )
        super().__init__(message)


class HandlerResultError(WalkError):
    """Raised when a container handler does not return a bool."""
    pass


class ContainerEndError(WalkError):
    """Raised when a container end handler fails; wraps the handler's error."""
    pass


class PropertyOrderError(WalkError, ValueError):
    """Raised when record member ordering is invalid.

    This indicates a broken record declaration, not bad data.
    """
    pass


class InvariantViolation(WalkError, RuntimeError):
    """Raised on internal inconsistencies discovered mid-walk.

    Either the registry is inconsistent or the traversed value was
    mutated concurrently. Never raised for ordinary bad input.
    """
    pass


class ConfigurationError(WalkError, ValueError):
    """Raised when a TraversalConfig fails validation."""
    pass
