# =============================================================================
# Path Utilities and Display Names
# =============================================================================
# Centralized helpers for file name handling so that the label assigner and
# the menu renderer never compute names differently.

import os
import re

from loguru import logger

_SEPARATORS = re.compile(r"[/\\]")
_FIRST_ALNUM = re.compile(r"[A-Za-z0-9]")


def get_file_name(path: str) -> str:
    """Get the trailing component of a path.

    Both "/" and "\\" separate components. Paths that end in a separator
    (or are empty) degrade to the full raw string.

    Args:
        path: File path as reported by the editor.

    Returns:
        File name without directory.
    """
    name = _SEPARATORS.split(path)[-1]
    return name or path


def split_path(path: str) -> list[str]:
    """Split a path into its non-empty components (directories + file name)."""
    return [part for part in _SEPARATORS.split(path) if part]


def first_alnum(name: str) -> str | None:
    """Return the first ASCII alphanumeric character of a name, if any."""
    match = _FIRST_ALNUM.search(name)
    return match.group(0) if match else None


def shorten_home(path: str, home: str | None = None) -> str:
    """Replace a leading home directory with ~.

    Only whole components match: "/home/al" does not contract "/home/alice".
    """
    home = (home if home is not None else os.path.expanduser("~")).rstrip("/\\")
    if not home or not path.startswith(home):
        return path
    rest = path[len(home):]
    if rest and rest[0] not in "/\\":
        return path
    return "~" + rest


def _suffix(components: list[str], depth: int) -> str:
    return "/".join(components[-depth:])


def resolve_display_names(paths, home: str | None = None) -> dict[str, str]:
    """
    Compute minimal distinguishing display names for a set of paths.

    Paths whose file names are unique display as the bare file name. Paths
    sharing a file name display as the shortest trailing run of components
    that no other member of the group shares at the same depth. Two paths
    with identical components (e.g. "a/b/x" and "a\\b\\x") fall back to the
    full original string. Home contraction is applied after uniqueness is
    decided.

    Args:
        paths: Ordered iterable of paths; duplicates are ignored.
        home: Home directory for ~ contraction (defaults to the user's).

    Returns:
        Mapping path -> display name, in first-seen path order.
    """
    unique_paths = list(dict.fromkeys(paths))

    by_filename: dict[str, list[str]] = {}
    for path in unique_paths:
        by_filename.setdefault(get_file_name(path), []).append(path)

    resolved: dict[str, str] = {}
    collisions = 0
    for filename, group in by_filename.items():
        if len(group) == 1:
            resolved[group[0]] = filename
            continue

        collisions += 1
        components = {path: split_path(path) for path in group}
        for path in group:
            own = components[path]
            display = None
            for depth in range(1, len(own) + 1):
                candidate = _suffix(own, depth)
                clash = any(
                    len(components[other]) >= depth
                    and _suffix(components[other], depth) == candidate
                    for other in group
                    if other != path
                )
                if not clash:
                    display = candidate
                    break
            resolved[path] = shorten_home(display if display is not None else path, home)

    logger.debug(
        "Display names resolved",
        operation="resolve_display_names",
        status="success",
        metrics={"paths": len(unique_paths), "colliding_groups": collisions}
    )

    return {path: resolved[path] for path in unique_paths}
