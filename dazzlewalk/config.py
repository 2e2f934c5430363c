"""Configuration system for DazzleWalk.

A ``TraversalConfig`` is resolved once when a ``Walker`` is created and
copied, so later changes to the caller's instance never affect a walker
already built from it.
"""

import dataclasses
from dataclasses import dataclass
from typing import Any, List, Optional


@dataclass
class TraversalConfig:
    """Options controlling a walk.

    Attributes:
        tolerate_missing_binding: Skip values no binding matches instead
            of raising ``BindingMissingError``.
        property_resolver: Custom record member resolver. None uses the
            registry's default resolver.
        bracket_containers: Call container handlers a second time, with
            ``start=False``, after the children were visited.
        auto_dereference_pointers: Walk through references that have no
            binding of their own. Nil references are skipped.
    """

    tolerate_missing_binding: bool = False
    property_resolver: Optional[Any] = None  # PropertyResolver instance
    bracket_containers: bool = False
    auto_dereference_pointers: bool = False

    @classmethod
    def strict(cls) -> 'TraversalConfig':
        """Every value must be bound; references are not unwrapped."""
        return cls()

    @classmethod
    def lenient(cls, bracket_containers: bool = False) -> 'TraversalConfig':
        """Skip unbound values and walk through unbound references.

        Args:
            bracket_containers: Whether to call container end handlers

        Returns:
            TraversalConfig for best-effort walks
        """
        return cls(
            tolerate_missing_binding=True,
            auto_dereference_pointers=True,
            bracket_containers=bracket_containers,
        )

    def clone(self) -> 'TraversalConfig':
        # the resolver is shared, it is stateless or owns its own locking
        return dataclasses.replace(self)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        if self.property_resolver is not None and not callable(
                getattr(self.property_resolver, "properties", None)):
            errors.append("property_resolver must provide properties(record)")
        for name in ("tolerate_missing_binding", "bracket_containers", "auto_dereference_pointers"):
            if not isinstance(getattr(self, name), bool):
                errors.append(f"{name} must be a bool")
        return errors

    def __str__(self) -> str:
        resolver = " hasPropertyResolver" if self.property_resolver is not None else ""
        return (
            f"Conf{{TolerateMissingBinding:{self.tolerate_missing_binding}"
            f" BracketContainers:{self.bracket_containers}"
            f" AutoDereference:{self.auto_dereference_pointers}{resolver}}}"
        )
