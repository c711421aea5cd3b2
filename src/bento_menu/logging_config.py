# =============================================================================
# Structured Logging Setup (JSONL format)
# =============================================================================

import json
import sys
import traceback
from contextvars import ContextVar
from pathlib import Path
from uuid import uuid4

import platformdirs
from loguru import logger

APP_NAME = "bento-menu"

# Correlation ID for one menu build / roster event
trace_id_var: ContextVar[str] = ContextVar('trace_id', default=None)


def new_trace_id() -> str:
    """Start a new correlation scope and return its id."""
    op_trace_id = str(uuid4())
    trace_id_var.set(op_trace_id)
    return op_trace_id


def json_sink(message):
    """JSONL sink for machine-readable diagnostics - writes to stderr."""
    record = message.record
    log_entry = {
        "timestamp": record["time"].strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
        "level": record["level"].name.lower(),
        "component": record["function"],
        "operation": record["extra"].get("operation", "unknown"),
        "operation_status": record["extra"].get("status", None),
        "trace_id": record["extra"].get("trace_id") or trace_id_var.get(),
        "message": record["message"],
        "context": {k: v for k, v in record["extra"].items()
                   if k not in ("operation", "status", "trace_id", "metrics")},
        "metrics": record["extra"].get("metrics", {}),
        "error": None
    }

    if record["exception"]:
        exc_type, exc_value, exc_tb = record["exception"]
        tb_lines = []
        if exc_tb:
            tb_lines = traceback.format_tb(exc_tb)

        log_entry["error"] = {
            "type": exc_type.__name__ if exc_type else "Unknown",
            "message": str(exc_value) if exc_value else "Unknown error",
            "traceback_lines": tb_lines
        }

    sys.stderr.write(json.dumps(log_entry, default=str) + "\n")


def setup_logger(console_level: str = "INFO", log_to_file: bool = True):
    """
    Configure Loguru for machine-readable JSONL output.

    The library itself never calls this; the integration layer (or the
    preview CLI) does, once, at startup.

    Args:
        console_level: Minimum level written to stderr
        log_to_file: Also write a rotating DEBUG log under the user log dir

    Returns:
        The configured loguru logger
    """
    logger.remove()

    # Console output (JSONL to stderr via custom sink)
    logger.add(
        json_sink,
        level=console_level
    )

    if log_to_file:
        # Linux: ~/.local/state/bento-menu/log/
        # macOS: ~/Library/Logs/bento-menu/
        log_dir = Path(platformdirs.user_log_dir(
            appname=APP_NAME,
            ensure_exists=True
        ))

        logger.add(
            str(log_dir / "bento.jsonl"),
            format="{message}",
            serialize=True,
            rotation="10 MB",
            retention="7 days",
            compression="gz",
            level="DEBUG"
        )

    return logger
