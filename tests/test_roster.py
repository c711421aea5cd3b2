from __future__ import annotations

from bento_menu.config import config_from_overrides
from bento_menu.roster import Roster
from bento_menu.viewport import StripFrame


def _roster(*paths: str, history_limit: int = 50) -> Roster:
    roster = Roster(history_limit=history_limit)
    for number, path in enumerate(paths, start=1):
        roster.add(number, path)
    return roster


def test_add_ignores_duplicate_ids() -> None:
    roster = _roster("a.txt", "b.txt")

    again = roster.add(1, "other.txt")

    assert again.path == "a.txt"
    assert len(roster) == 2
    assert roster.index_of(2) == 2
    assert 3 not in roster


def test_set_current_records_access_and_history_is_bounded() -> None:
    roster = _roster("a.txt", history_limit=3)

    for now in (10, 20, 30, 40):
        roster.set_current(1, now=now)

    assert roster.current_id == 1
    assert roster.get(1).access_history == (20, 30, 40)


def test_record_edit_keeps_order() -> None:
    roster = _roster("a.txt")

    roster.record_edit(1, now=5)
    roster.record_edit(1, now=9)

    assert roster.get(1).edit_history == (5, 9)
    assert roster.record_edit(99, now=1) is None


def test_remove_clears_current_and_resets_cursor() -> None:
    roster = _roster("a.txt", "b.txt")
    roster.set_current(2, now=1)
    roster.page = 3
    roster.strip_start = 2

    removed = roster.remove(2)

    assert removed.path == "b.txt"
    assert roster.current_id is None
    assert (roster.page, roster.strip_start) == (1, 1)
    assert roster.remove(2) is None


def test_toggle_lock_defaults_to_current_item() -> None:
    roster = _roster("a.txt", "b.txt")
    roster.set_current(2, now=1)

    assert roster.toggle_lock() is True
    assert roster.is_locked(2)
    assert roster.toggle_lock(2) is False
    assert roster.toggle_lock(42) is False


def test_flags_are_replaced_on_snapshots() -> None:
    roster = _roster("a.txt", "b.txt", "c.txt")
    before = roster.snapshot()

    roster.set_visible([1, 3])
    roster.set_modified(2, True)

    assert [item.visible for item in roster] == [True, False, True]
    assert roster.get(2).modified
    assert not any(item.visible for item in before)


def test_history_snapshots_round_trip_through_restore() -> None:
    first = _roster("a.txt", "b.txt")
    first.record_access(1, now=100)
    first.record_access(1, now=200)
    first.record_edit(2, now=150)

    second = _roster("a.txt", "b.txt", "c.txt")
    second.record_access(2, now=999)
    restored = second.restore_histories(first.history_snapshots())

    assert restored == 2
    assert second.get(1).access_history == (200,)
    assert second.get(2).access_history == (999,)
    assert second.get(2).edit_history == (150,)
    assert second.get(3).access_history == ()


def test_restore_skips_malformed_entries() -> None:
    roster = _roster("a.txt", "b.txt")

    restored = roster.restore_histories({"a.txt": "yesterday", "b.txt": {"access": "soon"}})

    assert restored == 0


def test_floating_pages_wrap() -> None:
    roster = _roster("a.txt")

    assert [roster.next_page(3) for _ in range(3)] == [2, 3, 1]
    assert roster.prev_page(3) == 3


def test_strip_paging_moves_both_ways() -> None:
    roster = _roster(*[f"{n}.txt" for n in range(7)])
    widths = [10, 1, 1, 1, 5, 3, 20]
    frame = StripFrame(frame_width=13, right_reserve=1, left_reserve=1)

    assert roster.next_strip_page(widths, frame) == 4
    assert roster.next_strip_page(widths, frame) == 7
    assert roster.next_strip_page(widths, frame) == 7
    assert roster.prev_strip_page(widths, frame) == 2
    assert roster.prev_strip_page(widths, frame) == 1


def test_enforce_capacity_removes_lowest_scores() -> None:
    config = config_from_overrides({"capacity": {"max_open_items": 2}}).value
    roster = _roster("a.txt", "b.txt", "c.txt", "d.txt")
    roster.record_access(2, now=100)
    roster.record_access(3, now=300)
    roster.record_access(4, now=200)
    roster.set_current(1, now=50)

    plan = roster.enforce_capacity(config)

    assert plan.evicted_ids == [2, 4]
    assert [item.id for item in roster] == [1, 3]


def test_close_all_keeps_flagged_classes() -> None:
    roster = _roster("a.txt", "b.txt", "c.txt")
    roster.set_visible([2])
    roster.toggle_lock(3)

    closed = roster.close_all(visible=False, locked=False)

    assert [item.id for item in closed] == [1]
    assert [item.id for item in roster] == [2, 3]
