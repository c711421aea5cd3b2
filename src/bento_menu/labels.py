# =============================================================================
# Smart Label Assignment
# =============================================================================
# Labels are recomputed from scratch on every redraw. Character groups are
# kept in first-seen order so that identical inputs always produce identical
# assignments.

from dataclasses import dataclass, field

from loguru import logger

from bento_menu.paths import first_alnum, get_file_name


@dataclass
class LabelAssignment:
    """Result of one labeling pass.

    ``labels`` maps 1-based item index -> label. ``unlabeled`` lists the
    indices left without a label because every one- and two-key label was
    already taken.
    """

    labels: dict[int, str] = field(default_factory=dict)
    unlabeled: list[int] = field(default_factory=list)

    def label_for(self, index: int) -> str | None:
        return self.labels.get(index)

    def index_for(self, label: str) -> int | None:
        for index, assigned in self.labels.items():
            if assigned == label:
                return index
        return None

    @property
    def complete(self) -> bool:
        return not self.unlabeled


def _claim_case_key(char: str, available: set[str], used: set[str]) -> str | None:
    """Return the lowercase or uppercase key for char if free, lowercase first."""
    for key in (char.lower(), char.upper()):
        if key in available and key not in used:
            return key
    return None


def assign_labels(
    items,
    available_keys: list[str],
    reserved_index: int | None = None,
    reserved_key: str | None = None,
) -> LabelAssignment:
    """
    Assign short unique keyboard labels to an ordered list of items.

    Order of preference:
    1. reserved_key for reserved_index (e.g. "previous file" key)
    2. the item's first alphanumeric file name character, lower then upper
       case (when several items share a character only the first can win)
    3. the next unused key of the alphabet, in alphabet order
    4. two-key labels built row-major from the alphabet

    Args:
        items: Ordered Items (anything with a ``path`` attribute).
        available_keys: Label alphabet, single characters, in priority order.
        reserved_index: 1-based index that must receive reserved_key.
        reserved_key: Key reserved for reserved_index only.

    Returns:
        LabelAssignment with labels and the indices that could not be labeled.
    """
    count = len(items)
    keys = list(dict.fromkeys(available_keys))
    available = set(keys)
    assignment: dict[int, str] = {}
    used: set[str] = set()

    if reserved_key:
        # The reserved key never goes to any other index, even when the
        # reserved index is absent from this list.
        used.add(reserved_key)
        if reserved_index is not None and 1 <= reserved_index <= count:
            assignment[reserved_index] = reserved_key

    # Group by first alphanumeric character, in first-seen order
    char_groups: dict[str, list[int]] = {}
    for index, item in enumerate(items, start=1):
        if index in assignment:
            continue
        char = first_alnum(get_file_name(item.path))
        if char is not None:
            char_groups.setdefault(char.lower(), []).append(index)

    # Files uniquely identified by their first character
    for char, indices in char_groups.items():
        if len(indices) == 1:
            key = _claim_case_key(char, available, used)
            if key is not None:
                assignment[indices[0]] = key
                used.add(key)

    # Files sharing a first character: the first member takes the lowercase key
    # and the next one the uppercase key when the alphabet has it
    for char, indices in char_groups.items():
        if len(indices) > 1:
            for index in indices:
                key = _claim_case_key(char, available, used)
                if key is None:
                    break
                assignment[index] = key
                used.add(key)

    # Remaining items take single keys in alphabet order
    pending = [index for index in range(1, count + 1) if index not in assignment]
    free_keys = iter(key for key in keys if key not in used)
    still_pending = []
    for index in pending:
        key = next(free_keys, None)
        if key is None:
            still_pending.append(index)
            continue
        assignment[index] = key
        used.add(key)

    # Out of single keys: two-key labels, row-major over the alphabet
    unlabeled = []
    width = len(keys)
    candidate_no = 0
    for index in still_pending:
        label = None
        while candidate_no < width * width:
            first, second = divmod(candidate_no, width)
            candidate_no += 1
            candidate = keys[first] + keys[second]
            if candidate not in used:
                label = candidate
                break
        if label is None:
            unlabeled.append(index)
            continue
        assignment[index] = label
        used.add(label)

    if unlabeled:
        logger.warning(
            "Label alphabet exhausted",
            operation="assign_labels",
            status="exhausted",
            unlabeled=unlabeled,
            metrics={"items": count, "alphabet_size": width}
        )
    else:
        logger.debug(
            "Labels assigned",
            operation="assign_labels",
            status="success",
            metrics={
                "items": count,
                "multi_char": sum(1 for label in assignment.values() if len(label) > 1),
            }
        )

    return LabelAssignment(labels=dict(sorted(assignment.items())), unlabeled=unlabeled)
