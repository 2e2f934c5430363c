"""Per-container traversal state."""

from dataclasses import dataclass
from typing import Any, List, Optional

from .binding import Capability
from .kinds import Kind
from .properties import Property


@dataclass
class Frame:
    """State of one container level being walked.

    A frame is created by the walk call that entered the container and
    is never shared with sibling branches. ``offset`` is -1 until the
    first child is visited.
    """
    depth: int
    value: Any
    kind: Kind
    size: int
    capability: Capability
    members: Optional[List[Property]] = None
    offset: int = -1

    def current_member(self) -> Optional[Property]:
        if self.members and 0 <= self.offset < len(self.members):
            return self.members[self.offset]
        return None

    def child_index(self) -> int:
        """Position of the current child in this container.

        Record members report their dispatch index, everything else
        the plain offset.
        """
        member = self.current_member()
        if member is not None:
            return member.dispatch_index
        return self.offset

    def child_name(self) -> str:
        member = self.current_member()
        return member.name if member is not None else ""

    def __str__(self) -> str:
        name = type(self.value).__qualname__
        if self.kind is Kind.RECORD:
            fields = "[" + " ".join(str(m) for m in self.members or ()) + "]"
            return f"{{{name} size:{self.size} offset:{self.offset} fields:{fields}}}"
        return f"{{{name} size:{self.size} offset:{self.offset}}}"
