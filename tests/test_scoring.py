from __future__ import annotations

import pytest

from bento_menu.models import HistorySnapshot, Item
from bento_menu.scoring import (
    Metric,
    ScoreMode,
    find_last_accessed,
    item_score,
    metric_function,
    score,
)
from conftest import HOUR_MS, NOW_MS


def test_decay_score_sums_inverse_ages() -> None:
    history = [NOW_MS - HOUR_MS, NOW_MS - 100 * HOUR_MS]

    assert score(history, ScoreMode.DECAY, NOW_MS) == pytest.approx(0.5099, abs=1e-4)


def test_empty_history_scores_zero() -> None:
    assert score([], ScoreMode.DECAY, NOW_MS) == 0
    assert score([], ScoreMode.LAST, NOW_MS) == 0


def test_last_mode_returns_most_recent_timestamp() -> None:
    assert score([10, 30, 20], ScoreMode.LAST) == 30


def test_future_timestamps_count_as_now() -> None:
    assert score([NOW_MS + 5 * HOUR_MS], ScoreMode.DECAY, NOW_MS) == pytest.approx(1.0)


def test_newer_timestamp_never_lowers_decay_score() -> None:
    history = [NOW_MS - 50 * HOUR_MS, NOW_MS - 3 * HOUR_MS]
    before = score(history, ScoreMode.DECAY, NOW_MS)

    for age in (0, 1, 10, 1000):
        after = score(history + [NOW_MS - age * HOUR_MS], ScoreMode.DECAY, NOW_MS)
        assert after >= before
        assert score([], ScoreMode.DECAY, NOW_MS) <= after


def test_metric_selects_history_and_mode() -> None:
    item = Item(id=1, path="a.txt", access_history=(100, 200), edit_history=(NOW_MS,))

    assert item_score(item, Metric.RECENCY_ACCESS, NOW_MS) == 200
    assert item_score(item, Metric.RECENCY_EDIT, NOW_MS) == NOW_MS
    assert item_score(item, Metric.FRECENCY_EDIT, NOW_MS) == pytest.approx(1.0)
    assert Metric("frecency_access").mode is ScoreMode.DECAY


def test_metric_function_accepts_config_strings() -> None:
    item = Item(id=1, path="a.txt", access_history=(NOW_MS - HOUR_MS,))

    fn = metric_function("frecency_access", now=NOW_MS)

    assert fn(item) == pytest.approx(0.5)
    with pytest.raises(ValueError):
        metric_function("popularity")


def test_find_last_accessed_skips_visible_and_unvisited() -> None:
    items = [
        Item(id=1, path="a", access_history=(500,), visible=True),
        Item(id=2, path="b", access_history=(300,)),
        Item(id=3, path="c"),
        Item(id=4, path="d", access_history=(400,)),
    ]

    assert find_last_accessed(items) == 4
    assert find_last_accessed(items[:1]) is None


def test_find_last_accessed_prefers_earlier_on_tie() -> None:
    items = [Item(id=1, path="a", access_history=(7,)), Item(id=2, path="b", access_history=(7,))]

    assert find_last_accessed(items) == 1


def test_history_snapshot_keeps_latest_and_tolerates_garbage() -> None:
    item = Item(id=1, path="a", access_history=(1, 9, 4))

    snapshot = HistorySnapshot.from_item(item)

    assert snapshot.to_dict() == {"access": 9, "edit": None}
    assert snapshot.histories() == ((9,), ())
    assert HistorySnapshot.from_dict({"access": "12", "edit": "never"}).to_dict() == {
        "access": 12,
        "edit": None,
    }
