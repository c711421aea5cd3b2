from __future__ import annotations

import pytest

from bento_menu.models import Item

HOUR_MS = 3_600_000
NOW_MS = 1_700_000_000_000


def items_from_paths(*paths: str, **flags) -> list[Item]:
    return [Item(id=index, path=path, **flags) for index, path in enumerate(paths, start=1)]


@pytest.fixture
def make_items():
    return items_from_paths


@pytest.fixture
def now_ms() -> int:
    return NOW_MS
