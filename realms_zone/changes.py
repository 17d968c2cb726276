"""
Change Notification Types
=========================

Small, immutable descriptors emitted by RegionStore after each mutation.

Design:
- Value objects, no behavior
- Observers are plain callables; the store calls them synchronously
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional


class ChangeKind(str, Enum):
    """What happened to the store."""
    CREATED = "created"
    INSERTED = "inserted"
    UPDATED = "updated"
    DELETED = "deleted"
    CLEARED = "cleared"


@dataclass(frozen=True)
class ChangeEvent:
    """
    One store mutation.

    Attributes:
        kind: Mutation type
        scope_id: Store scope that changed
        region_id: Affected region (None for CLEARED)
        count: Regions affected (1, or the cleared count)
    """
    kind: ChangeKind
    scope_id: str
    region_id: Optional[str] = None
    count: int = 1


ChangeListener = Callable[[ChangeEvent], None]
