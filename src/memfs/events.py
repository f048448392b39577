"""Change records shared by the store, the notifier and listeners."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ChangeType(str, Enum):
    """Kinds of change recorded by the entry store."""

    CREATED = "created"
    CHANGED = "changed"
    DELETED = "deleted"
    RENAMED = "renamed"


@dataclass(frozen=True)
class ChangeEvent:
    """A single structural or content change to the in-memory tree."""

    change_type: ChangeType
    path: str
    previous_path: Optional[str] = None
    entry_id: Optional[int] = None

    def describe(self) -> str:
        details = [f"type={self.change_type.value}", f"path={self.path}"]
        if self.previous_path is not None:
            details.append(f"previous={self.previous_path}")
        if self.entry_id is not None:
            details.append(f"id={self.entry_id}")
        return ", ".join(details)
