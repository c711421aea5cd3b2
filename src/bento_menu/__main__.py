"""
Preview CLI: print the menu the engine would draw for a list of paths.

Usage:
    python -m bento_menu preview src/a/foo.py src/b/foo.py README.md
    python -m bento_menu preview --mode tabline --width 60 *.py
    python -m bento_menu preview --json --config ~/.config/bento-menu/config.toml a b c
"""

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path

from loguru import logger

from bento_menu.config import LayoutMode, load_config
from bento_menu.logging_config import setup_logger
from bento_menu.menu import Frame, build_menu, render_panel, render_strip
from bento_menu.roster import Roster


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bento-menu")
    subparsers = parser.add_subparsers(dest="command", required=True)

    preview = subparsers.add_parser("preview", help="Render the menu for the given paths")
    preview.add_argument("paths", nargs="+")
    preview.add_argument("--config", type=Path, default=None)
    preview.add_argument("--mode", choices=[mode.value for mode in LayoutMode], default=None)
    preview.add_argument("--width", type=int, default=80)
    preview.add_argument("--height", type=int, default=24)
    preview.add_argument("--page", type=int, default=1)
    preview.add_argument("--current", default=None, help="Path of the current item")
    preview.add_argument("--collapsed", action="store_true")
    preview.add_argument("--json", action="store_true", dest="as_json")
    preview.add_argument("--log-file", action="store_true", help="Also write the DEBUG log file")
    return parser


def _model_to_dict(model) -> dict:
    return {
        "mode": model.mode.value,
        "page": model.page,
        "total_pages": model.total_pages,
        "visible": {
            "start_index": model.visible.start_index,
            "end_index": model.visible.end_index,
            "more_before": model.visible.more_before,
            "more_after": model.visible.more_after,
        },
        "entries": [
            {
                "index": entry.index,
                "path": entry.item.path,
                "label": entry.label,
                "display_name": entry.display_name,
                "role": entry.role.value,
            }
            for entry in model.entries
        ],
        "unlabeled": model.labels.unlabeled,
    }


def run_preview(args: argparse.Namespace) -> int:
    result = load_config(args.config)
    if result.is_err():
        sys.stderr.write(f"bento-menu: {result.error.describe()}\n")
        return 2
    config = result.value

    roster = Roster.from_config(config)
    for number, path in enumerate(args.paths, start=1):
        roster.add(number, path)
        if path == args.current:
            roster.set_current(number)
            roster.set_visible([number])

    mode = LayoutMode(args.mode) if args.mode else config.layout.mode
    if mode is not config.layout.mode:
        config = replace(config, layout=replace(config.layout, mode=mode))

    model = build_menu(
        roster.snapshot(),
        config,
        Frame(width=args.width, height=args.height),
        current_id=roster.current_id,
        page=args.page,
    )

    if args.as_json:
        sys.stdout.write(json.dumps(_model_to_dict(model), indent=2) + "\n")
    elif mode is LayoutMode.TABLINE:
        sys.stdout.write(render_strip(model, config) + "\n")
    else:
        for line in render_panel(model, config, expanded=not args.collapsed):
            sys.stdout.write(line + "\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logger(console_level="WARNING", log_to_file=args.log_file)

    if args.command == "preview":
        return run_preview(args)

    logger.error("Unknown command", operation="main", command=args.command)
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
