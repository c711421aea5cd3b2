# =============================================================================
# Roster State
# =============================================================================
# The integration layer owns one Roster and mutates it from its single event
# thread (item opened / closed / entered, resize, navigation key). Every
# engine call receives roster.snapshot(), never the roster itself.

from typing import Hashable, Iterable

from loguru import logger

from bento_menu.capacity import EvictionPlan, EvictionProtection, enforce_capacity, select_close_all
from bento_menu.config import BentoConfig
from bento_menu.errors import ErrorReport
from bento_menu.models import HistorySnapshot, Item
from bento_menu.scoring import now_ms
from bento_menu.viewport import StripFrame


class Roster:
    """Ordered list of open items plus the paging cursor."""

    def __init__(self, history_limit: int = 50):
        self.history_limit = max(history_limit, 1)
        self.current_id: Hashable | None = None
        self.page = 1
        self.strip_start = 1
        self._items: list[Item] = []

    @classmethod
    def from_config(cls, config: BentoConfig) -> "Roster":
        return cls(history_limit=config.history_limit)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def __contains__(self, item_id: Hashable) -> bool:
        return self.index_of(item_id) is not None

    def snapshot(self) -> tuple[Item, ...]:
        return tuple(self._items)

    def index_of(self, item_id: Hashable) -> int | None:
        """1-based position of an item, or None."""
        for index, item in enumerate(self._items, start=1):
            if item.id == item_id:
                return index
        return None

    def get(self, item_id: Hashable) -> Item | None:
        index = self.index_of(item_id)
        return self._items[index - 1] if index else None

    def _update(self, item_id: Hashable, **changes) -> Item | None:
        index = self.index_of(item_id)
        if index is None:
            logger.debug(
                "Ignoring update for unknown item",
                operation="roster_update",
                item_id=str(item_id)
            )
            return None
        item = self._items[index - 1].with_changes(**changes)
        self._items[index - 1] = item
        return item

    # -------------------------------------------------------------------------
    # Membership
    # -------------------------------------------------------------------------

    def add(self, item_id: Hashable, path: str, **flags) -> Item:
        """Append an item; an id already present is returned unchanged."""
        existing = self.get(item_id)
        if existing is not None:
            return existing

        item = Item(id=item_id, path=path, **flags)
        self._items.append(item)
        self.reset_cursor()
        logger.debug(
            "Item added",
            operation="roster_add",
            item_id=str(item_id),
            path=path,
            metrics={"count": len(self._items)}
        )
        return item

    def remove(self, item_id: Hashable) -> Item | None:
        """Remove an item; its histories go with it."""
        index = self.index_of(item_id)
        if index is None:
            return None

        item = self._items.pop(index - 1)
        if self.current_id == item_id:
            self.current_id = None
        self.reset_cursor()
        logger.debug(
            "Item removed",
            operation="roster_remove",
            item_id=str(item_id),
            metrics={"count": len(self._items)}
        )
        return item

    def replace(self, items: Iterable[Item]) -> None:
        """Replace the whole item list (e.g. after a session restore)."""
        self._items = list(dict((item.id, item) for item in items).values())
        if self.current_id is not None and self.current_id not in self:
            self.current_id = None
        self.reset_cursor()

    # -------------------------------------------------------------------------
    # Item state
    # -------------------------------------------------------------------------

    def _append_timestamp(self, history: tuple[int, ...], timestamp: int) -> tuple[int, ...]:
        return (history + (timestamp,))[-self.history_limit:]

    def record_access(self, item_id: Hashable, now: int | None = None) -> Item | None:
        item = self.get(item_id)
        if item is None:
            return None
        timestamp = now if now is not None else now_ms()
        return self._update(item_id, access_history=self._append_timestamp(item.access_history, timestamp))

    def record_edit(self, item_id: Hashable, now: int | None = None) -> Item | None:
        item = self.get(item_id)
        if item is None:
            return None
        timestamp = now if now is not None else now_ms()
        return self._update(item_id, edit_history=self._append_timestamp(item.edit_history, timestamp))

    def set_current(self, item_id: Hashable, now: int | None = None) -> None:
        """Mark the item shown in the editor's current window and record the access."""
        if item_id not in self:
            return
        self.current_id = item_id
        self.record_access(item_id, now)

    def set_visible(self, visible_ids: Iterable[Hashable]) -> None:
        """Set the visible flag for exactly the given ids."""
        visible = set(visible_ids)
        self._items = [
            item if item.visible == (item.id in visible) else item.with_changes(visible=item.id in visible)
            for item in self._items
        ]

    def set_modified(self, item_id: Hashable, modified: bool) -> None:
        self._update(item_id, modified=modified)

    def is_locked(self, item_id: Hashable | None = None) -> bool:
        item = self.get(self.current_id if item_id is None else item_id)
        return bool(item and item.locked)

    def toggle_lock(self, item_id: Hashable | None = None) -> bool:
        """
        Toggle the lock flag; locked items are protected from eviction.

        Args:
            item_id: Item to toggle (defaults to the current item)

        Returns:
            Whether the item is now locked (False for unknown items).
        """
        target = self.current_id if item_id is None else item_id
        item = self.get(target)
        if item is None:
            return False
        updated = self._update(target, locked=not item.locked)
        logger.debug(
            "Lock toggled",
            operation="toggle_lock",
            item_id=str(target),
            locked=updated.locked
        )
        return updated.locked

    # -------------------------------------------------------------------------
    # History persistence
    # -------------------------------------------------------------------------

    def history_snapshots(self) -> dict[str, dict]:
        """Lossy {path: {access, edit}} summary for the session file."""
        return {item.path: HistorySnapshot.from_item(item).to_dict() for item in self._items}

    def restore_histories(self, snapshots: dict) -> int:
        """
        Seed histories from a {path: {access, edit}} summary.

        Only items with an empty history are seeded; malformed entries are
        skipped.

        Returns:
            Number of items restored.
        """
        restored = 0
        for item in list(self._items):
            raw = snapshots.get(item.path)
            if not isinstance(raw, (dict, HistorySnapshot)):
                continue
            snapshot = raw if isinstance(raw, HistorySnapshot) else HistorySnapshot.from_dict(raw)
            access, edit = snapshot.histories()
            changes = {}
            if access and not item.access_history:
                changes["access_history"] = access
            if edit and not item.edit_history:
                changes["edit_history"] = edit
            if changes:
                self._update(item.id, **changes)
                restored += 1

        logger.debug(
            "Histories restored",
            operation="restore_histories",
            metrics={"restored": restored, "snapshots": len(snapshots)}
        )
        return restored

    # -------------------------------------------------------------------------
    # Paging cursor
    # -------------------------------------------------------------------------

    def reset_cursor(self) -> None:
        self.page = 1
        self.strip_start = 1

    def select(self, index: int) -> Item | None:
        """Return the item at a 1-based index and reset the cursor."""
        if not 1 <= index <= len(self._items):
            return None
        self.reset_cursor()
        return self._items[index - 1]

    def next_page(self, total_pages: int) -> int:
        """Advance the floating panel page, wrapping to the first page."""
        self.page = self.page + 1 if self.page < total_pages else 1
        return self.page

    def prev_page(self, total_pages: int) -> int:
        """Go back one floating panel page, wrapping to the last page."""
        self.page = self.page - 1 if self.page > 1 else max(total_pages, 1)
        return self.page

    def next_strip_page(self, widths: list[int], frame: StripFrame) -> int:
        page = frame.forward(widths, self.strip_start)
        if page.more_after:
            self.strip_start = page.end_index + 1
        return self.strip_start

    def prev_strip_page(self, widths: list[int], frame: StripFrame) -> int:
        self.strip_start = frame.backward(widths, self.strip_start)
        return self.strip_start

    # -------------------------------------------------------------------------
    # Removal policies
    # -------------------------------------------------------------------------

    def enforce_capacity(
        self,
        config: BentoConfig,
        now: int | None = None,
        report: ErrorReport | None = None,
    ) -> EvictionPlan:
        """Remove items until the configured maximum is respected."""
        capacity = config.capacity
        plan = enforce_capacity(
            self.snapshot(),
            capacity.max_open_items,
            current_id=self.current_id,
            protection=EvictionProtection(
                current=capacity.protect_current,
                visible=capacity.protect_visible,
                locked=capacity.protect_locked,
            ),
            metric=capacity.metric,
            now=now,
            report=report,
        )
        for item in plan.evicted:
            self.remove(item.id)
        return plan

    def close_all(self, visible: bool = True, locked: bool = True, current: bool = True) -> list[Item]:
        """Remove every item except the classes flagged False; return the removed items."""
        closing = select_close_all(
            self.snapshot(),
            current_id=self.current_id,
            visible=visible,
            locked=locked,
            current=current,
        )
        for item in closing:
            self.remove(item.id)
        return closing
