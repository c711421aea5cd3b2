# =============================================================================
# Viewport Fitting (floating panel pages + horizontal strip)
# =============================================================================
# All indices are 1-based and inclusive, matching the label map. Frame space
# spent on page / edge indicators is always reserved before items are placed.

import math
import unicodedata
from dataclasses import dataclass

from loguru import logger

POSITIONS = (
    "top-left", "top-right",
    "middle-left", "middle-right",
    "bottom-left", "bottom-right",
)


def cell_width(ch: str) -> int:
    """Return terminal cell width for a single character."""
    if not ch:
        return 0
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in ('W', 'F'):
        return 2
    return 1


def text_width(text: str) -> int:
    """Return the number of terminal cells a string occupies."""
    return sum(cell_width(ch) for ch in text)


@dataclass(frozen=True)
class ViewportSlice:
    start_index: int
    end_index: int
    more_before: bool = False
    more_after: bool = False

    @classmethod
    def empty(cls) -> "ViewportSlice":
        return cls(start_index=1, end_index=0)

    @property
    def is_empty(self) -> bool:
        return self.end_index < self.start_index

    @property
    def count(self) -> int:
        return max(self.end_index - self.start_index + 1, 0)

    def indices(self) -> range:
        return range(self.start_index, self.end_index + 1)

    def __contains__(self, index: int) -> bool:
        return self.start_index <= index <= self.end_index


@dataclass(frozen=True)
class RowFit:
    per_page: int
    total_pages: int
    needs_pagination: bool


# =============================================================================
# Vertical (row-count) mode
# =============================================================================


def fit_rows(total: int, configured_max: int | None, available_height: int) -> RowFit:
    """
    Decide how many rows fit on one page of the floating panel.

    Args:
        total: Number of items.
        configured_max: User cap on rendered rows (None or <= 0 for no cap).
        available_height: Rows the frame can show.

    Returns:
        RowFit with per_page (>= 1), total_pages and needs_pagination.
    """
    if configured_max is not None and configured_max > 0:
        per_page = min(configured_max, available_height)
    else:
        per_page = available_height
    per_page = max(per_page, 1)

    if total <= per_page:
        return RowFit(per_page=per_page, total_pages=1, needs_pagination=False)

    return RowFit(
        per_page=per_page,
        total_pages=math.ceil(total / per_page),
        needs_pagination=True,
    )


def clamp_page(page: int, total_pages: int) -> int:
    return min(max(page, 1), max(total_pages, 1))


def row_slice(total: int, per_page: int, current_page: int) -> ViewportSlice:
    """Return the visible slice for a page, clamping the page into range."""
    if total <= 0:
        return ViewportSlice.empty()

    per_page = max(per_page, 1)
    total_pages = math.ceil(total / per_page)
    page = clamp_page(current_page, total_pages)
    start = (page - 1) * per_page + 1
    end = min(page * per_page, total)
    return ViewportSlice(
        start_index=start,
        end_index=end,
        more_before=page > 1,
        more_after=page < total_pages,
    )


# =============================================================================
# Horizontal (width-flowing) mode
# =============================================================================


def _forward_end(
    widths: list[int],
    start: int,
    frame_width: int,
    separator_width: int,
    right_reserve: int,
    left_reserve: int,
) -> int:
    total = len(widths)
    lead = left_reserve if start > 1 else 0
    running = 0
    end = start
    for index in range(start, total + 1):
        needed = running + widths[index - 1] + (separator_width if index > start else 0)
        reserve = lead + (right_reserve if index < total else 0)
        # The first item of a page is always shown, however wide it is
        if index > start and needed + reserve > frame_width:
            break
        running = needed
        end = index
    return end


def fit_strip_forward(
    widths: list[int],
    start_index: int,
    frame_width: int,
    separator_width: int = 0,
    right_reserve: int = 0,
    left_reserve: int = 0,
) -> ViewportSlice:
    """
    Fit as many items as possible into the strip starting at start_index.

    An item is accepted while the running width, plus a separator before it,
    plus the right indicator (if items remain after it), plus the left
    indicator (if the page does not start at 1) stays within frame_width.

    Args:
        widths: Rendered cell width of each item, in roster order.
        start_index: First index of the page (clamped into range).
        frame_width: Available cells.
        separator_width: Cells between adjacent items.
        right_reserve: Cells of the "more after" indicator.
        left_reserve: Cells of the "more before" indicator.

    Returns:
        ViewportSlice for the page.
    """
    total = len(widths)
    if total == 0:
        return ViewportSlice.empty()

    start = min(max(start_index, 1), total)
    end = _forward_end(widths, start, frame_width, separator_width, right_reserve, left_reserve)
    return ViewportSlice(
        start_index=start,
        end_index=end,
        more_before=start > 1,
        more_after=end < total,
    )


def fit_strip_backward(
    widths: list[int],
    current_start: int,
    frame_width: int,
    separator_width: int = 0,
    right_reserve: int = 0,
    left_reserve: int = 0,
) -> int:
    """
    Compute the start index of the page preceding ``current_start``.

    Walks down from current_start - 1, always reserving the right indicator
    (the page we came from follows) and reserving the left indicator while
    the candidate is not the first item. The result is then checked against
    a forward fit and moved up until a forward page from it no longer runs
    past current_start - 1, so paging back then forward returns to
    current_start.

    Returns:
        1-based start index of the previous page (1 when already at the start).
    """
    total = len(widths)
    if total == 0:
        return 1

    current_start = min(max(current_start, 1), total)
    if current_start == 1:
        return 1

    target = current_start - 1
    running = 0
    start = target
    for index in range(target, 0, -1):
        needed = running + widths[index - 1] + (separator_width if index < target else 0)
        reserve = right_reserve + (left_reserve if index > 1 else 0)
        if index < target and needed + reserve > frame_width:
            # Reaching the first item frees the left indicator's cells
            rest = sum(widths[:index]) + separator_width * index
            if running + rest + right_reserve <= frame_width:
                start = 1
            break
        running = needed
        start = index

    while start < target and _forward_end(
        widths, start, frame_width, separator_width, right_reserve, left_reserve
    ) > target:
        start += 1

    logger.debug(
        "Previous strip page computed",
        operation="fit_strip_backward",
        current_start=current_start,
        previous_start=start
    )

    return start


def strip_start_for(
    widths: list[int],
    index: int,
    frame_width: int,
    separator_width: int = 0,
    right_reserve: int = 0,
    left_reserve: int = 0,
) -> int:
    """Return the start of the forward-paged strip page that shows ``index``."""
    total = len(widths)
    if total == 0:
        return 1

    index = min(max(index, 1), total)
    start = 1
    while True:
        end = _forward_end(widths, start, frame_width, separator_width, right_reserve, left_reserve)
        if index <= end or end >= total:
            return start
        start = end + 1


# =============================================================================
# Floating panel placement
# =============================================================================


def panel_position(
    position: str,
    ui_width: int,
    ui_height: int,
    width: int,
    height: int,
    offset_x: int = 0,
    offset_y: int = 0,
) -> tuple[int, int]:
    """
    Compute the (row, col) of the floating panel's top-left cell.

    Args:
        position: One of POSITIONS; unknown values fall back to middle-right.
        ui_width: Editor width in cells.
        ui_height: Editor height in cells.
        width: Panel width.
        height: Panel height.
        offset_x: Column offset added after placement.
        offset_y: Row offset added after placement.

    Returns:
        Zero-based (row, col).
    """
    if position not in POSITIONS:
        logger.debug(
            "Unknown panel position - using middle-right",
            operation="panel_position",
            position=position
        )
        position = "middle-right"

    if position.startswith("top"):
        row = 0
    elif position.startswith("bottom"):
        row = ui_height - height
    else:
        row = (ui_height - height) // 2

    if position.endswith("left"):
        col = 0
    else:
        col = ui_width - width

    return max(row + offset_y, 0), max(col + offset_x, 0)


@dataclass(frozen=True)
class StripFrame:
    """Strip geometry: frame width plus separator and indicator widths."""

    frame_width: int
    separator_width: int = 0
    right_reserve: int = 0
    left_reserve: int = 0

    def _args(self) -> tuple[int, int, int, int]:
        return (self.frame_width, self.separator_width,
                self.right_reserve, self.left_reserve)

    def forward(self, widths: list[int], start_index: int) -> ViewportSlice:
        return fit_strip_forward(widths, start_index, *self._args())

    def backward(self, widths: list[int], current_start: int) -> int:
        return fit_strip_backward(widths, current_start, *self._args())

    def start_for(self, widths: list[int], index: int) -> int:
        return strip_start_for(widths, index, *self._args())
