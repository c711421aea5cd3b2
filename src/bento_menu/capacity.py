# =============================================================================
# Capacity Enforcement
# =============================================================================
# Picks the least valuable item to close when more items are open than the
# configured maximum. The caller removes one item per decision.

from dataclasses import dataclass, field
from typing import Callable, Hashable

from loguru import logger

from bento_menu.errors import Error, ErrorReport, ErrorType
from bento_menu.models import Item
from bento_menu.scoring import Metric, metric_function


@dataclass(frozen=True)
class EvictionProtection:
    """Which classes of items automatic eviction must leave alone."""

    current: bool = True
    visible: bool = True
    locked: bool = True


@dataclass
class EvictionPlan:
    """Items to remove, in removal order, and whether the limit was reachable."""

    evicted: list[Item] = field(default_factory=list)
    remaining: int = 0
    blocked: bool = False

    @property
    def evicted_ids(self) -> list[Hashable]:
        return [item.id for item in self.evicted]


def build_exclusion(
    current_id: Hashable | None = None,
    protection: EvictionProtection = EvictionProtection(),
) -> Callable[[Item], bool]:
    """Build the predicate that marks an item as protected from eviction."""

    def is_protected(item: Item) -> bool:
        if protection.current and current_id is not None and item.id == current_id:
            return True
        if protection.visible and item.visible:
            return True
        if protection.locked and item.locked:
            return True
        return False

    return is_protected


def select_eviction_candidate(
    items,
    exclude: Callable[[Item], bool],
    metric: Callable[[Item], float],
) -> Item | None:
    """
    Return the eligible item with the lowest score.

    Ties go to the item encountered first.

    Args:
        items: Ordered item snapshot.
        exclude: Predicate for protected items.
        metric: Item -> score; lower means less valuable.

    Returns:
        The eviction candidate, or None when every item is protected.
    """
    candidate = None
    candidate_score = None
    for item in items:
        if exclude(item):
            continue
        item_score = metric(item)
        if candidate is None or item_score < candidate_score:
            candidate = item
            candidate_score = item_score
    return candidate


def enforce_capacity(
    items,
    capacity: int,
    current_id: Hashable | None = None,
    protection: EvictionProtection = EvictionProtection(),
    metric: Metric | str = Metric.RECENCY_ACCESS,
    now: int | None = None,
    report: ErrorReport | None = None,
) -> EvictionPlan:
    """
    Plan evictions until at most ``capacity`` items remain.

    A capacity of zero or less disables the limit. When every remaining item
    is protected the plan stops early with ``blocked`` set and, if a report
    is given, a CAPACITY_BLOCKED warning.

    Args:
        items: Ordered item snapshot (not modified).
        capacity: Maximum number of open items.
        current_id: Id of the item shown in the editor's current window.
        protection: Which items are never evicted.
        metric: Scoring metric.
        now: Reference time in ms for decay metrics.
        report: Optional ErrorReport receiving the blocked condition.

    Returns:
        EvictionPlan listing evicted items in order.
    """
    remaining = list(items)
    plan = EvictionPlan(remaining=len(remaining))
    if capacity <= 0 or len(remaining) <= capacity:
        return plan

    exclude = build_exclusion(current_id, protection)
    score_of = metric_function(metric, now)

    while len(remaining) > capacity:
        victim = select_eviction_candidate(remaining, exclude, score_of)
        if victim is None:
            plan.blocked = True
            break
        plan.evicted.append(victim)
        remaining = [item for item in remaining if item.id != victim.id]

    plan.remaining = len(remaining)

    if plan.blocked:
        message = "Could not reduce below capacity: all remaining items are protected"
        if report is not None:
            report.add_warning(Error(
                error_type=ErrorType.CAPACITY_BLOCKED,
                message=message,
                context={"capacity": capacity, "remaining": plan.remaining}
            ))
        else:
            logger.warning(
                message,
                operation="enforce_capacity",
                status="blocked",
                capacity=capacity,
                remaining=plan.remaining
            )

    logger.debug(
        "Capacity enforced",
        operation="enforce_capacity",
        status="blocked" if plan.blocked else "success",
        evicted=plan.evicted_ids,
        metrics={"capacity": capacity, "remaining": plan.remaining}
    )

    return plan


def select_close_all(
    items,
    current_id: Hashable | None = None,
    visible: bool = True,
    locked: bool = True,
    current: bool = True,
) -> list[Item]:
    """
    Select the items a "close all" command removes.

    Every flag defaults to True (close those too); pass False to keep that
    class of item open.

    Returns:
        Items to close, in roster order.
    """
    to_close: list[Item] = []
    kept: list[str] = []

    for item in items:
        if not visible and item.visible:
            kept.append(item.path)
        elif not locked and item.locked:
            kept.append(item.path)
        elif not current and current_id is not None and item.id == current_id:
            kept.append(item.path)
        else:
            to_close.append(item)

    logger.debug(
        "Close-all selection",
        operation="select_close_all",
        kept=kept,
        metrics={"closing": len(to_close), "kept": len(kept)}
    )

    return to_close
