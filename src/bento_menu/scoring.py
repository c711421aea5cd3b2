# =============================================================================
# Recency / Frecency Scoring
# =============================================================================

import time
from enum import Enum
from typing import Callable

from bento_menu.models import Item

MS_PER_HOUR = 3_600_000


class ScoreMode(Enum):
    LAST = "last"
    DECAY = "decay"


class Metric(Enum):
    RECENCY_ACCESS = "recency_access"
    RECENCY_EDIT = "recency_edit"
    FRECENCY_ACCESS = "frecency_access"
    FRECENCY_EDIT = "frecency_edit"

    @property
    def mode(self) -> ScoreMode:
        return ScoreMode.LAST if self.value.startswith("recency") else ScoreMode.DECAY

    @property
    def history_name(self) -> str:
        return "access_history" if self.value.endswith("access") else "edit_history"


def now_ms() -> int:
    return int(time.time() * 1000)


def score(history, mode: ScoreMode, now: int | None = None) -> float:
    """
    Score a timestamp history.

    LAST returns the most recent timestamp (0 when empty). DECAY sums
    1 / (1 + age in hours) over every timestamp; ages are clamped at zero so
    timestamps from the future count as "just now".

    Args:
        history: Iterable of millisecond timestamps.
        mode: ScoreMode.LAST or ScoreMode.DECAY.
        now: Reference time in ms (defaults to the wall clock).

    Returns:
        Non-negative score.
    """
    history = list(history)
    if not history:
        return 0

    if mode is ScoreMode.LAST:
        return max(history)

    if now is None:
        now = now_ms()
    total = 0.0
    for timestamp in history:
        age_hours = max(now - timestamp, 0) / MS_PER_HOUR
        total += 1.0 / (1.0 + age_hours)
    return total


def item_score(item: Item, metric: Metric, now: int | None = None) -> float:
    return score(getattr(item, metric.history_name), metric.mode, now)


def metric_function(metric: Metric | str, now: int | None = None) -> Callable[[Item], float]:
    """Bind a metric (and a fixed reference time) into item -> score."""
    metric = Metric(metric)
    if now is None and metric.mode is ScoreMode.DECAY:
        # One reference time for the whole evaluation keeps scores comparable
        now = now_ms()
    return lambda item: item_score(item, metric, now)


def find_last_accessed(items) -> int | None:
    """
    Return the 1-based index of the most recently accessed hidden item.

    Visible items are skipped (they are already on screen), as are items
    that were never accessed. Ties go to the earlier item.
    """
    best_index = None
    best_time = None
    for index, item in enumerate(items, start=1):
        if item.visible or item.last_access is None:
            continue
        if best_time is None or item.last_access > best_time:
            best_index = index
            best_time = item.last_access
    return best_index
