"""
Bento Menu - Label & Layout Engine for an editor buffer picker

Keeps the picker's roster of open documents labeled, named and laid out:

Features:
- Mnemonic single-key labels with two-key fallback (first letter wins)
- Minimal unique display names for colliding file names
- Paginated floating panel and bidirectionally paged horizontal strip
- Recency / frecency scoring and capacity-driven eviction
- TOML configuration resolved once into frozen dataclasses
- Structured JSONL logging (machine-readable)

The engine is pure: it reads item snapshots and returns label maps, name
maps and visible slices. Windows, highlights and keymaps belong to the
editor integration.
"""

from bento_menu.capacity import (
    EvictionPlan,
    EvictionProtection,
    build_exclusion,
    enforce_capacity,
    select_close_all,
    select_eviction_candidate,
)
from bento_menu.config import (
    ActionKind,
    BentoConfig,
    LayoutMode,
    config_from_overrides,
    label_alphabet,
    load_config,
    load_config_from_path,
)
from bento_menu.errors import Error, ErrorReport, ErrorType, Result
from bento_menu.labels import LabelAssignment, assign_labels
from bento_menu.menu import Frame, MenuModel, build_menu, render_panel, render_strip
from bento_menu.models import HistorySnapshot, Item
from bento_menu.paths import get_file_name, resolve_display_names
from bento_menu.roster import Roster
from bento_menu.scoring import Metric, ScoreMode, find_last_accessed, metric_function, score
from bento_menu.viewport import (
    RowFit,
    StripFrame,
    ViewportSlice,
    fit_rows,
    fit_strip_backward,
    fit_strip_forward,
    panel_position,
    row_slice,
)

__version__ = "0.3.0"

__all__ = [
    "ActionKind",
    "BentoConfig",
    "Error",
    "ErrorReport",
    "ErrorType",
    "EvictionPlan",
    "EvictionProtection",
    "Frame",
    "HistorySnapshot",
    "Item",
    "LabelAssignment",
    "LayoutMode",
    "MenuModel",
    "Metric",
    "Result",
    "Roster",
    "RowFit",
    "ScoreMode",
    "StripFrame",
    "ViewportSlice",
    "assign_labels",
    "build_exclusion",
    "build_menu",
    "config_from_overrides",
    "enforce_capacity",
    "find_last_accessed",
    "fit_rows",
    "fit_strip_backward",
    "fit_strip_forward",
    "get_file_name",
    "label_alphabet",
    "load_config",
    "load_config_from_path",
    "metric_function",
    "panel_position",
    "render_panel",
    "render_strip",
    "resolve_display_names",
    "row_slice",
    "score",
    "select_close_all",
    "select_eviction_candidate",
]
