"""High-level API for DazzleWalk.

Functional wrappers around ``BindingRegistry`` and ``Walker`` for the
common one-shot cases. Build a ``Walker`` yourself when the same
handlers walk many values; registry construction is the costly part.
"""

import dataclasses
from typing import Any, Optional, Sequence, Union

from .config import TraversalConfig
from .context import TraversalContext
from .core.binding import Binding
from .core.registry import BindingRegistry
from .core.walker import Walker


def build_registry(source: Union[Any, Sequence[Binding]]) -> BindingRegistry:
    """Build a binding registry.

    Args:
        source: An adapter object exposing ``for_*`` methods, or a list
            of ``Binding`` rules

    Returns:
        BindingRegistry

    Example:
        >>> registry = build_registry([
        ...     bind_kind(Kind.INT, on_int),
        ...     bind_container(Kind.LIST, on_list),
        ... ])
    """
    if isinstance(source, (list, tuple)) and all(isinstance(b, Binding) for b in source):
        return BindingRegistry.from_bindings(source)
    return BindingRegistry.from_adapter(source)


def build_walker(source: Union[Any, Sequence[Binding], BindingRegistry],
                 config: Optional[TraversalConfig] = None,
                 **kwargs) -> Walker:
    """Create a walker from an adapter, a binding list or a registry.

    Args:
        source: Adapter, list of ``Binding`` rules, or BindingRegistry
        config: Base configuration
        **kwargs: TraversalConfig fields overriding ``config``

    Returns:
        Walker
    """
    if not isinstance(source, BindingRegistry):
        source = build_registry(source)
    return Walker(source, _build_config(config, **kwargs))


def traverse(value: Any,
             adapter: Union[Any, Sequence[Binding], BindingRegistry],
             config: Optional[TraversalConfig] = None,
             context: Optional[TraversalContext] = None,
             **kwargs) -> TraversalContext:
    """Walk ``value`` once with ``adapter``'s handlers.

    Args:
        value: Root value
        adapter: Adapter, list of ``Binding`` rules, or BindingRegistry
        config: Base configuration
        context: Context to share with the handlers
        **kwargs: TraversalConfig fields, e.g. ``bracket_containers=True``

    Returns:
        The context used for the walk

    Example:
        >>> ctx = traverse(payload, Encoder(), bracket_containers=True)
        >>> ctx.get("output")
    """
    walker = build_walker(adapter, config, **kwargs)
    return walker.traverse(value, context)


def _build_config(config: Optional[TraversalConfig] = None, **kwargs) -> TraversalConfig:
    config = config.clone() if config is not None else TraversalConfig()
    fields = {f.name for f in dataclasses.fields(config)}
    for key, value in kwargs.items():
        if key not in fields:
            raise TypeError(f"unknown traversal option: {key}")
        setattr(config, key, value)
    return config
