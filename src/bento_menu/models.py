# =============================================================================
# Roster Item Model
# =============================================================================

from dataclasses import dataclass, replace
from typing import Hashable


@dataclass(frozen=True)
class Item:
    """
    One open document as seen by the engine.

    Snapshots are immutable: the roster produces a new Item whenever a flag
    or a history changes. Timestamps are integer milliseconds since the epoch,
    oldest first.
    """

    id: Hashable
    path: str
    access_history: tuple[int, ...] = ()
    edit_history: tuple[int, ...] = ()
    visible: bool = False
    modified: bool = False
    locked: bool = False

    @property
    def last_access(self) -> int | None:
        return max(self.access_history) if self.access_history else None

    @property
    def last_edit(self) -> int | None:
        return max(self.edit_history) if self.edit_history else None

    def with_changes(self, **changes) -> "Item":
        return replace(self, **changes)


@dataclass
class HistorySnapshot:
    """Lossy persisted summary of an item's histories (most recent only)."""

    access: int | None = None
    edit: int | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "HistorySnapshot":
        return cls(access=_as_timestamp(data.get("access")),
                   edit=_as_timestamp(data.get("edit")))

    @classmethod
    def from_item(cls, item: Item) -> "HistorySnapshot":
        return cls(access=item.last_access, edit=item.last_edit)

    def to_dict(self) -> dict:
        return {"access": self.access, "edit": self.edit}

    def histories(self) -> tuple[tuple[int, ...], tuple[int, ...]]:
        access = (self.access,) if self.access is not None else ()
        edit = (self.edit,) if self.edit is not None else ()
        return access, edit


def _as_timestamp(value) -> int | None:
    # Restored session files may hold floats, strings or garbage.
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None

