# =============================================================================
# Menu Model
# =============================================================================
# Composes names, labels, roles and the visible slice into one model the
# integration layer can draw. Drawing itself (highlight groups, windows)
# stays on the editor side.

from dataclasses import dataclass, field
from enum import Enum
from typing import Hashable

from loguru import logger

from bento_menu.config import BentoConfig, LayoutMode, label_alphabet
from bento_menu.errors import Error, ErrorReport, ErrorType
from bento_menu.labels import LabelAssignment, assign_labels
from bento_menu.logging_config import new_trace_id
from bento_menu.models import Item
from bento_menu.paths import get_file_name, resolve_display_names
from bento_menu.scoring import find_last_accessed
from bento_menu.viewport import (
    StripFrame,
    ViewportSlice,
    fit_rows,
    panel_position,
    row_slice,
    text_width,
)


class ItemRole(Enum):
    MODIFIED = "modified"
    LOCKED = "locked"
    CURRENT = "current"
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass(frozen=True)
class Frame:
    """Cells available to the menu (the editor's UI size)."""

    width: int
    height: int


@dataclass
class MenuEntry:
    index: int
    item: Item
    label: str | None
    display_name: str
    role: ItemRole
    is_previous: bool = False
    is_current: bool = False

    @property
    def locked(self) -> bool:
        return self.item.locked


@dataclass
class MenuModel:
    entries: list[MenuEntry]
    labels: LabelAssignment
    mode: LayoutMode
    visible: ViewportSlice
    page: int = 1
    total_pages: int = 1
    page_indicator: str | None = None
    panel_size: tuple[int, int] = (0, 0)
    panel_origin: tuple[int, int] = (0, 0)
    report: ErrorReport = field(default_factory=ErrorReport)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def visible_entries(self) -> list[MenuEntry]:
        return [entry for entry in self.entries if entry.index in self.visible]

    def entry_for_label(self, label: str) -> MenuEntry | None:
        index = self.labels.index_for(label)
        return self.entries[index - 1] if index else None


def item_role(item: Item, current_id: Hashable | None) -> ItemRole:
    """Highlight role: modified > locked > current > active > inactive."""
    if item.modified:
        return ItemRole.MODIFIED
    if item.locked:
        return ItemRole.LOCKED
    if current_id is not None and item.id == current_id:
        return ItemRole.CURRENT
    if item.visible:
        return ItemRole.ACTIVE
    return ItemRole.INACTIVE


def build_entries(
    items,
    config: BentoConfig,
    current_id: Hashable | None = None,
) -> tuple[list[MenuEntry], LabelAssignment]:
    """Resolve names and labels for every item, in roster order."""
    names = resolve_display_names(item.path for item in items)
    reserved_key = config.reserved_label_key
    reserved_index = find_last_accessed(items) if reserved_key else None
    labels = assign_labels(items, label_alphabet(config), reserved_index, reserved_key)

    entries = []
    for index, item in enumerate(items, start=1):
        label = labels.label_for(index)
        entries.append(MenuEntry(
            index=index,
            item=item,
            label=label,
            display_name=names.get(item.path) or get_file_name(item.path),
            role=item_role(item, current_id),
            is_previous=label is not None and index == reserved_index,
            is_current=current_id is not None and item.id == current_id,
        ))
    return entries, labels


# =============================================================================
# Text rendering helpers
# =============================================================================


def _row_content_width(entry: MenuEntry, padding: int) -> int:
    # [display_name] [space] [padding][label][padding]
    return text_width(entry.display_name) + 1 + padding + text_width(entry.label or " ") + padding


def expanded_lines(entries: list[MenuEntry], padding: int = 1) -> list[str]:
    """Rows with right-aligned names followed by the padded label."""
    if not entries:
        return []
    pad = " " * padding
    widest = max(_row_content_width(entry, padding) for entry in entries)
    lines = []
    for entry in entries:
        left_space = widest - _row_content_width(entry, padding)
        lines.append(
            pad + " " * left_space + entry.display_name + " " + pad + (entry.label or " ") + pad
        )
    return lines


def collapsed_line(is_current: bool, dash_char: str = "─", padding: int = 1) -> str:
    """One dash row of the minimal menu; the current item gets a longer dash."""
    pad = " " * padding
    dash = dash_char * 2 if is_current else " " + dash_char
    return pad + dash + pad


def collapsed_lines(entries: list[MenuEntry], dash_char: str = "─", padding: int = 1) -> list[str]:
    return [collapsed_line(entry.is_current, dash_char, padding) for entry in entries]


def strip_segment(entry: MenuEntry, padding: int = 1) -> str:
    pad = " " * padding
    if entry.label:
        return f"{pad}{entry.label} {entry.display_name}{pad}"
    return f"{pad}{entry.display_name}{pad}"


def strip_frame(config: BentoConfig, width: int) -> StripFrame:
    tabline = config.tabline
    return StripFrame(
        frame_width=width,
        separator_width=text_width(tabline.separator),
        right_reserve=text_width(tabline.right_indicator),
        left_reserve=text_width(tabline.left_indicator),
    )


def strip_widths(entries: list[MenuEntry], padding: int = 1) -> list[int]:
    return [text_width(strip_segment(entry, padding)) for entry in entries]


def render_strip(model: MenuModel, config: BentoConfig) -> str:
    """Join the visible strip segments with separators and edge indicators."""
    padding = config.layout.label_padding
    tabline = config.tabline
    text = tabline.separator.join(strip_segment(entry, padding) for entry in model.visible_entries())
    if model.visible.more_before:
        text = tabline.left_indicator + text
    if model.visible.more_after:
        text = text + tabline.right_indicator
    return text


def render_panel(model: MenuModel, config: BentoConfig, expanded: bool = True) -> list[str]:
    """Rows of the floating panel for the visible page, indicator last."""
    padding = config.layout.label_padding
    visible = model.visible_entries()
    if expanded:
        lines = expanded_lines(visible, padding)
    else:
        lines = collapsed_lines(visible, config.layout.dash_char, padding)
    if model.page_indicator:
        width = max((text_width(line) for line in lines), default=0)
        lines.append(model.page_indicator.rjust(width))
    return lines


# =============================================================================
# Model assembly
# =============================================================================


def build_menu(
    items,
    config: BentoConfig,
    frame: Frame,
    current_id: Hashable | None = None,
    page: int = 1,
    strip_start: int = 1,
) -> MenuModel:
    """
    Build everything needed to draw the menu for one redraw.

    Args:
        items: Ordered item snapshot (Roster.snapshot()).
        config: Resolved configuration.
        frame: Editor UI size in cells.
        current_id: Id of the item in the editor's current window.
        page: Floating panel page cursor (clamped).
        strip_start: Tabline start cursor (clamped).

    Returns:
        MenuModel; labels exhaustion is reported in model.report.
    """
    op_trace_id = new_trace_id()
    report = ErrorReport()
    items = tuple(items)
    mode = config.layout.mode

    if not items:
        logger.debug(
            "Empty roster - nothing to render",
            operation="build_menu",
            status="empty",
            trace_id=op_trace_id
        )
        return MenuModel(
            entries=[],
            labels=LabelAssignment(),
            mode=mode,
            visible=ViewportSlice.empty(),
            report=report,
        )

    entries, labels = build_entries(items, config, current_id)
    if labels.unlabeled:
        report.add_warning(Error(
            error_type=ErrorType.LABELS_EXHAUSTED,
            message="Some items have no selectable label",
            context={"unlabeled": labels.unlabeled}
        ))

    padding = config.layout.label_padding
    model = MenuModel(entries=entries, labels=labels, mode=mode,
                      visible=ViewportSlice.empty(), report=report)

    if mode is LayoutMode.TABLINE:
        widths = strip_widths(entries, padding)
        model.visible = strip_frame(config, frame.width).forward(widths, strip_start)
        model.panel_size = (frame.width, 1)
    else:
        total = len(entries)
        fit = fit_rows(total, config.layout.max_rendered_items, frame.height)
        # The page indicator takes one row of the frame; a one-row frame has no room for it
        show_indicator = fit.needs_pagination and frame.height >= 2
        if show_indicator:
            fit = fit_rows(total, config.layout.max_rendered_items, frame.height - 1)
        model.visible = row_slice(total, fit.per_page, page)
        model.total_pages = fit.total_pages
        model.page = min(max(page, 1), fit.total_pages)
        if show_indicator:
            model.page_indicator = config.layout.page_indicator.format(
                page=model.page, total=fit.total_pages
            )

        rows = render_panel(model, config)
        width = max((text_width(row) for row in rows), default=0)
        model.panel_size = (width, len(rows))
        model.panel_origin = panel_position(
            config.layout.position, frame.width, frame.height, width, len(rows),
            config.layout.offset_x, config.layout.offset_y,
        )

    logger.debug(
        "Menu built",
        operation="build_menu",
        status="success",
        trace_id=op_trace_id,
        mode=mode.value,
        metrics={
            "items": len(entries),
            "visible_start": model.visible.start_index,
            "visible_end": model.visible.end_index,
            "total_pages": model.total_pages,
        }
    )
    report.log_summary(op_trace_id)

    return model
