"""CLI/bootstrap helpers for the Wikipedia Searcher application."""

from __future__ import annotations

import argparse
import logging
import logging.handlers
import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from wiki_searcher.config import PreferenceStore
from wiki_searcher.models import CONFIG_APP_NAME, DEFAULT_INITIAL_QUERY

logger = logging.getLogger(__name__)

THEME_CHOICES = ("auto", "light", "dark")


def _configure_logging(debug: bool) -> None:
    """Configure logging. When debug=True, logs to file at DEBUG level."""
    if not debug:
        # Default: suppress all logging (TUI captures stderr)
        logging.disable(logging.CRITICAL)
        return

    log_dir = Path(user_config_dir(CONFIG_APP_NAME))
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "debug.log"

    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(logging.DEBUG)


def _configure_color_mode(color_mode: str) -> None:
    """Configure environment hints for terminal color behavior."""
    if color_mode == "never":
        os.environ["NO_COLOR"] = "1"
        os.environ.pop("FORCE_COLOR", None)
        return
    if color_mode == "always":
        os.environ["FORCE_COLOR"] = "1"
        os.environ.pop("NO_COLOR", None)
        return
    # auto
    os.environ.pop("FORCE_COLOR", None)


def _validate_interactive_tty() -> bool:
    """Return True when stdin/stdout are interactive terminals."""
    return bool(sys.stdin.isatty() and sys.stdout.isatty())


def _theme_override(theme: str) -> bool | None:
    """Map --theme to a dark-mode override; None keeps the saved preference."""
    if theme == "auto":
        return None
    return theme == "dark"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search English Wikipedia in a TUI")
    parser.add_argument(
        "-q",
        "--query",
        type=str,
        default=DEFAULT_INITIAL_QUERY,
        help=f"Search to run on startup (default: {DEFAULT_INITIAL_QUERY})",
    )
    parser.add_argument(
        "--no-initial-search",
        action="store_true",
        help="Start with an empty result list instead of running --query",
    )
    parser.add_argument(
        "--theme",
        choices=THEME_CHOICES,
        default="auto",
        help="Theme for this session only; auto uses the saved preference (default: auto)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help=f"Enable debug logging to file (~/.config/{CONFIG_APP_NAME}/debug.log)",
    )
    parser.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        default="auto",
        help="Color output mode for terminal UI (default: auto)",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable terminal colors (equivalent to --color never)",
    )
    return parser


def main(
    argv: list[str] | None = None,
    *,
    load_store_fn: Callable[[], PreferenceStore] = PreferenceStore.load,
    configure_logging_fn: Callable[[bool], None] = _configure_logging,
    configure_color_mode_fn: Callable[[str], None] = _configure_color_mode,
    validate_interactive_tty_fn: Callable[[], bool] = _validate_interactive_tty,
    app_factory: Callable[..., Any] | None = None,
) -> int:
    """Main entry point. Returns exit code."""
    args = build_parser().parse_args(argv)

    initial_query = None if args.no_initial_search else args.query.strip()
    if initial_query == "":
        print(
            "Error: --query must not be blank (use --no-initial-search to start empty)",
            file=sys.stderr,
        )
        return 1

    color_mode = "never" if args.no_color else args.color
    configure_color_mode_fn(color_mode)
    configure_logging_fn(args.debug)
    logger.debug("wiki-searcher starting, cwd=%s", Path.cwd())

    if not validate_interactive_tty_fn():
        print(
            "Error: wiki-searcher requires an interactive TTY for the full UI.",
            file=sys.stderr,
        )
        print("Next steps:", file=sys.stderr)
        print("  - Run wiki-searcher directly in a terminal session", file=sys.stderr)
        print("  - Use --help for command documentation", file=sys.stderr)
        return 2

    store = load_store_fn()

    if app_factory is None:
        from wiki_searcher.app import WikiSearcher as _WikiSearcher

        app_factory = _WikiSearcher

    app = app_factory(
        store,
        initial_query=initial_query,
        dark_mode=_theme_override(args.theme),
    )
    app.run()
    return 0


__all__ = [
    "THEME_CHOICES",
    "_configure_color_mode",
    "_configure_logging",
    "_theme_override",
    "_validate_interactive_tty",
    "build_parser",
    "main",
]
