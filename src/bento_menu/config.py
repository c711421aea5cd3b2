# =============================================================================
# Configuration Loading
# =============================================================================
# Defaults are merged with the user's TOML file once, at startup, and turned
# into frozen dataclasses. Nothing downstream merges tables per call.

import re
import string
import time
import tomllib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from loguru import logger

from bento_menu.errors import Error, ErrorType, Result
from bento_menu.scoring import Metric
from bento_menu.viewport import POSITIONS

CONFIG_DIR = Path("~/.config/bento-menu").expanduser()
CONFIG_PATH = CONFIG_DIR / "config.toml"

ESCAPE_KEY = "<Esc>"

# Lowercase a-z, then uppercase A-Z, then digits 0-9
DEFAULT_LABEL_KEYS = list(string.ascii_lowercase + string.ascii_uppercase + string.digits)


class ActionKind(Enum):
    OPEN = "open"
    DELETE = "delete"
    VSPLIT = "vsplit"
    SPLIT = "split"
    LOCK = "lock"


class LayoutMode(Enum):
    FLOATING = "floating"
    TABLINE = "tabline"


# Default configuration - TOML has no null, so "" / 0 mean "unset"
DEFAULT_CONFIG = {
    "main_keymap": ";",
    "last_buffer_key": "",     # Falls back to main_keymap
    "collapse_key": ESCAPE_KEY,
    "next_page_key": "]",
    "prev_page_key": "[",
    "default_action": "open",
    "label_keys": DEFAULT_LABEL_KEYS,
    "history_limit": 50,
    "actions": {
        "open": "<CR>",
        "delete": "<BS>",
        "vsplit": "|",
        "split": "_",
        "lock": "*",
    },
    "layout": {
        "mode": "floating",
        "position": "middle-right",
        "offset_x": 0,
        "offset_y": 0,
        "max_rendered_items": 0,   # 0 = as many as fit
        "label_padding": 1,
        "dash_char": "─",
        "page_indicator": "{page}/{total}",
    },
    "tabline": {
        "separator": " ",
        "left_indicator": "< ",
        "right_indicator": " >",
    },
    "capacity": {
        "max_open_items": -1,      # <= 0 disables eviction
        "metric": "recency_access",
        "protect_current": True,
        "protect_visible": True,
        "protect_locked": True,
    },
}


@dataclass(frozen=True)
class LayoutConfig:
    mode: LayoutMode = LayoutMode.FLOATING
    position: str = "middle-right"
    offset_x: int = 0
    offset_y: int = 0
    max_rendered_items: int | None = None
    label_padding: int = 1
    dash_char: str = "─"
    page_indicator: str = "{page}/{total}"


@dataclass(frozen=True)
class TablineConfig:
    separator: str = " "
    left_indicator: str = "< "
    right_indicator: str = " >"


@dataclass(frozen=True)
class CapacityConfig:
    max_open_items: int = -1
    metric: Metric = Metric.RECENCY_ACCESS
    protect_current: bool = True
    protect_visible: bool = True
    protect_locked: bool = True


@dataclass(frozen=True)
class BentoConfig:
    main_keymap: str = ";"
    last_buffer_key: str | None = None
    collapse_key: str = ESCAPE_KEY
    next_page_key: str = "]"
    prev_page_key: str = "["
    default_action: ActionKind = ActionKind.OPEN
    label_keys: tuple[str, ...] = tuple(DEFAULT_LABEL_KEYS)
    history_limit: int = 50
    actions: dict[ActionKind, str] = field(default_factory=lambda: {
        ActionKind(name): key for name, key in DEFAULT_CONFIG["actions"].items()
    })
    layout: LayoutConfig = LayoutConfig()
    tabline: TablineConfig = TablineConfig()
    capacity: CapacityConfig = CapacityConfig()

    @property
    def reserved_label_key(self) -> str | None:
        """Key that labels the last-accessed item."""
        return self.last_buffer_key or self.main_keymap or None


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base dictionary."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def extract_toml_error_context(error: tomllib.TOMLDecodeError, file_path: Path) -> dict:
    """
    Extract line context from TOML parse error.

    Args:
        error: The TOMLDecodeError exception
        file_path: Path to the TOML file

    Returns:
        Dict with line_number, line_content, and formatted_message
    """
    error_str = str(error)
    line_number = None
    line_content = None

    # Common formats: "line 15", "at line 15", "(line 15)"
    line_match = re.search(r'line\s+(\d+)', error_str, re.IGNORECASE)
    if line_match:
        line_number = int(line_match.group(1))

    if line_number and file_path.exists():
        try:
            with open(file_path, "r") as f:
                lines = f.readlines()
                if 0 < line_number <= len(lines):
                    line_content = lines[line_number - 1].rstrip()
        except OSError:
            pass

    if line_number:
        formatted = f"Error on line {line_number}"
        if line_content:
            display_line = line_content[:50] + "..." if len(line_content) > 50 else line_content
            formatted += f": {display_line}"
        formatted += f"\n\nDetails: {error_str}"
    else:
        formatted = f"TOML parse error: {error_str}"

    return {
        "line_number": line_number,
        "line_content": line_content,
        "formatted_message": formatted,
        "raw_error": error_str
    }


def _validation_error(message: str, **context) -> Result:
    return Result.err(Error(
        error_type=ErrorType.VALIDATION_ERROR,
        message=message,
        context=context
    ))


def _enum_value(enum_cls, value, option: str):
    try:
        return enum_cls(value), None
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        return None, _validation_error(
            f"Invalid value for {option}: {value!r} (expected one of: {allowed})",
            option=option
        )


def build_config(data: dict) -> Result[BentoConfig]:
    """
    Turn a merged configuration dict into a validated BentoConfig.

    Args:
        data: DEFAULT_CONFIG merged with user overrides

    Returns:
        Result[BentoConfig]: Ok with config, or Err with a validation error
    """
    for section in ("actions", "layout", "tabline", "capacity"):
        if not isinstance(data.get(section), dict):
            return _validation_error(f"[{section}] must be a table", option=section)

    layout = data["layout"]
    tabline = data["tabline"]
    capacity = data["capacity"]

    mode, err = _enum_value(LayoutMode, layout["mode"], "layout.mode")
    if err:
        return err
    default_action, err = _enum_value(ActionKind, data["default_action"], "default_action")
    if err:
        return err
    metric, err = _enum_value(Metric, capacity["metric"], "capacity.metric")
    if err:
        return err

    actions = {}
    for name, key in data["actions"].items():
        kind, err = _enum_value(ActionKind, name, f"actions.{name}")
        if err:
            return err
        if not isinstance(key, str):
            return _validation_error(f"Action key for {name} must be a string", option=f"actions.{name}")
        actions[kind] = key

    if layout["position"] not in POSITIONS:
        return _validation_error(
            f"Invalid value for layout.position: {layout['position']!r}",
            option="layout.position"
        )

    label_keys = data["label_keys"]
    if not isinstance(label_keys, list) or not all(
        isinstance(key, str) and len(key) == 1 for key in label_keys
    ):
        return _validation_error(
            "label_keys must be a list of single characters",
            option="label_keys"
        )

    if not isinstance(data["history_limit"], int) or data["history_limit"] < 1:
        return _validation_error(
            "history_limit must be a positive integer",
            option="history_limit"
        )
    if not isinstance(layout["label_padding"], int) or layout["label_padding"] < 0:
        return _validation_error(
            "layout.label_padding must be a non-negative integer",
            option="layout.label_padding"
        )

    max_rendered = layout["max_rendered_items"]
    if not isinstance(max_rendered, int):
        return _validation_error(
            "layout.max_rendered_items must be an integer",
            option="layout.max_rendered_items"
        )

    config = BentoConfig(
        main_keymap=data["main_keymap"],
        last_buffer_key=data["last_buffer_key"] or None,
        collapse_key=data["collapse_key"],
        next_page_key=data["next_page_key"],
        prev_page_key=data["prev_page_key"],
        default_action=default_action,
        label_keys=tuple(label_keys),
        history_limit=data["history_limit"],
        actions=actions,
        layout=LayoutConfig(
            mode=mode,
            position=layout["position"],
            offset_x=int(layout["offset_x"]),
            offset_y=int(layout["offset_y"]),
            max_rendered_items=max_rendered if max_rendered > 0 else None,
            label_padding=layout["label_padding"],
            dash_char=layout["dash_char"],
            page_indicator=layout["page_indicator"],
        ),
        tabline=TablineConfig(
            separator=tabline["separator"],
            left_indicator=tabline["left_indicator"],
            right_indicator=tabline["right_indicator"],
        ),
        capacity=CapacityConfig(
            max_open_items=int(capacity["max_open_items"]),
            metric=metric,
            protect_current=bool(capacity["protect_current"]),
            protect_visible=bool(capacity["protect_visible"]),
            protect_locked=bool(capacity["protect_locked"]),
        ),
    )
    return Result.ok(config)


def config_from_overrides(overrides: dict | None = None) -> Result[BentoConfig]:
    """Build a config from in-memory overrides (no file involved)."""
    return build_config(deep_merge(DEFAULT_CONFIG, overrides or {}))


def load_config_from_path(config_path: Path) -> Result[BentoConfig]:
    """
    Load configuration from specified TOML file with defaults fallback.

    Args:
        config_path: Path to the TOML file

    Returns:
        Result[BentoConfig]: Ok with merged config, or Err with error details
    """
    start_time = time.perf_counter()
    logger.debug(
        "Loading config from path",
        operation="load_config_from_path",
        status="started",
        config_path=str(config_path)
    )

    if not config_path.exists():
        logger.error(
            "Config file not found",
            operation="load_config_from_path",
            status="failed",
            config_path=str(config_path)
        )
        return Result.err(Error(
            error_type=ErrorType.FILE_NOT_FOUND,
            message=f"Config file not found: {config_path}",
            context={"config_path": str(config_path)}
        ))

    try:
        with open(config_path, "rb") as f:
            user_config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        error_context = extract_toml_error_context(e, config_path)
        logger.error(
            "Invalid TOML syntax in configuration file",
            operation="load_config_from_path",
            status="failed",
            file=str(config_path),
            line_number=error_context["line_number"],
            line_content=error_context["line_content"],
            error=error_context["formatted_message"]
        )
        return Result.err(Error(
            error_type=ErrorType.PARSE_ERROR,
            message=error_context["formatted_message"],
            context={"config_path": str(config_path), "line_number": error_context["line_number"]},
            original_exception=e
        ))

    result = build_config(deep_merge(DEFAULT_CONFIG, user_config))
    duration_ms = int((time.perf_counter() - start_time) * 1000)

    if result.is_err():
        logger.error(
            "Invalid configuration value",
            operation="load_config_from_path",
            status="failed",
            config_path=str(config_path),
            error=result.error.message
        )
        return result

    logger.debug(
        "Config loaded successfully",
        operation="load_config_from_path",
        status="success",
        config_path=str(config_path),
        metrics={"duration_ms": duration_ms}
    )
    return result


def load_config(config_path: Path | None = None) -> Result[BentoConfig]:
    """
    Load the user's configuration, using defaults when no file exists.

    An explicit path that does not exist is an error; a missing default
    file is not.
    """
    if config_path is None:
        if not CONFIG_PATH.exists():
            logger.debug(
                "Config file does not exist, using defaults",
                operation="load_config",
                status="default",
                file=str(CONFIG_PATH)
            )
            return config_from_overrides()
        config_path = CONFIG_PATH
    return load_config_from_path(config_path)


def reserved_keys(config: BentoConfig) -> set[str]:
    """Keys that must never be handed out as item labels."""
    keys = {ESCAPE_KEY, config.main_keymap, config.collapse_key,
            config.next_page_key, config.prev_page_key}
    if config.last_buffer_key:
        keys.add(config.last_buffer_key)
    keys.update(config.actions.values())
    keys.discard("")
    return keys


def label_alphabet(config: BentoConfig) -> list[str]:
    """Return the label keys with every reserved key filtered out."""
    reserved = reserved_keys(config)
    return [key for key in config.label_keys if key not in reserved]
