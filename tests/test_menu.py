from __future__ import annotations

from bento_menu.config import config_from_overrides
from bento_menu.errors import ErrorType
from bento_menu.menu import (
    Frame,
    ItemRole,
    build_menu,
    collapsed_line,
    render_panel,
    render_strip,
)
from bento_menu.models import Item
from conftest import items_from_paths


def _config(**overrides):
    return config_from_overrides(overrides).value


def test_empty_roster_builds_empty_model() -> None:
    model = build_menu([], _config(), Frame(80, 24))

    assert model.is_empty
    assert model.visible.is_empty
    assert render_panel(model, _config()) == []


def test_floating_panel_paginates_with_indicator_row() -> None:
    config = _config()
    items = items_from_paths(*[f"doc{n}.txt" for n in range(1, 13)])

    first = build_menu(items, config, Frame(80, 8))
    second = build_menu(items, config, Frame(80, 8), page=2)

    assert (first.visible.start_index, first.visible.end_index) == (1, 7)
    assert first.page_indicator == "1/2"
    assert (second.visible.start_index, second.visible.end_index) == (8, 12)
    assert second.page_indicator == "2/2"

    rows = render_panel(first, config)
    assert len(rows) == 8
    assert rows[-1].endswith("1/2")
    assert first.panel_size == (len(rows[0]), 8)
    assert first.panel_origin == (0, 80 - len(rows[0]))


def test_floating_panel_without_pagination_has_no_indicator() -> None:
    config = _config(layout={"position": "top-left"})
    model = build_menu(items_from_paths("a.txt", "long_name.txt"), config, Frame(80, 24))

    rows = render_panel(model, config)

    assert model.page_indicator is None
    assert model.panel_origin == (0, 0)
    assert rows == [" " * 9 + "a.txt  a ", " long_name.txt  l "]


def test_tabline_fits_segments_and_marks_overflow() -> None:
    config = _config(layout={"mode": "tabline"})
    items = items_from_paths("a.txt", "b.txt", "c.txt")

    wide = build_menu(items, config, Frame(80, 24))
    narrow = build_menu(items, config, Frame(20, 24))

    assert render_strip(wide, config) == " a a.txt   b b.txt   c c.txt "
    assert (narrow.visible.start_index, narrow.visible.end_index) == (1, 1)
    assert render_strip(narrow, config) == " a a.txt  >"


def test_last_accessed_hidden_item_gets_reserved_key() -> None:
    items = [
        Item(id=1, path="one.py", access_history=(10,), visible=True),
        Item(id=2, path="two.py", access_history=(5,)),
        Item(id=3, path="three.py"),
    ]

    model = build_menu(items, _config(), Frame(80, 24), current_id=1)

    assert model.labels.labels == {1: "o", 2: ";", 3: "t"}
    previous = model.entry_for_label(";")
    assert previous.index == 2
    assert previous.is_previous
    assert not model.entries[0].is_previous


def test_roles_follow_precedence() -> None:
    items = [
        Item(id=1, path="a", modified=True, locked=True),
        Item(id=2, path="b", locked=True, visible=True),
        Item(id=3, path="c", visible=True),
        Item(id=4, path="d", visible=True),
        Item(id=5, path="e"),
    ]

    model = build_menu(items, _config(), Frame(80, 24), current_id=3)

    assert [entry.role for entry in model.entries] == [
        ItemRole.MODIFIED,
        ItemRole.LOCKED,
        ItemRole.CURRENT,
        ItemRole.ACTIVE,
        ItemRole.INACTIVE,
    ]
    assert [entry.is_current for entry in model.entries] == [False, False, True, False, False]


def test_locked_item_gets_locked_role_even_when_current() -> None:
    model = build_menu([Item(id=1, path="a.txt", locked=True)], _config(), Frame(80, 24), current_id=1)

    entry = model.entries[0]
    assert entry.role is ItemRole.LOCKED
    assert entry.locked and entry.is_current


def test_exhausted_alphabet_is_reported() -> None:
    config = _config(label_keys=["a"])

    model = build_menu(items_from_paths("x1", "x2", "x3"), config, Frame(80, 24))

    assert model.labels.labels == {1: "a", 2: "aa"}
    assert model.entries[2].label is None
    assert model.report.warnings[0].error_type is ErrorType.LABELS_EXHAUSTED


def test_collapsed_rows_mark_current_item() -> None:
    assert collapsed_line(True) == " ── "
    assert collapsed_line(False) == "  ─ "
    assert collapsed_line(False, dash_char="-", padding=0) == " -"


def test_one_row_frame_drops_page_indicator() -> None:
    config = _config()

    model = build_menu(items_from_paths("a.txt", "b.txt", "c.txt"), config, Frame(80, 1))

    assert model.page_indicator is None
    assert model.total_pages == 3
    assert (model.visible.start_index, model.visible.end_index) == (1, 1)
    assert model.panel_size[1] == 1
    assert len(render_panel(model, config)) == 1


def test_collapsed_panel_marks_current_row() -> None:
    config = _config()
    items = [
        Item(id=1, path="a.txt"),
        Item(id=2, path="b.txt", locked=True),
        Item(id=3, path="c.txt"),
    ]

    model = build_menu(items, config, Frame(80, 24), current_id=2)

    assert render_panel(model, config, expanded=False) == ["  ─ ", " ── ", "  ─ "]
