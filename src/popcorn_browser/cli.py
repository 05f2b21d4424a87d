"""CLI/bootstrap helpers for the movie browser application."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import logging.handlers
import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from popcorn_browser.action_messages import build_actionable_error, build_missing_api_key_error
from popcorn_browser.config import (
    API_KEY_ENV_VAR,
    CONFIG_APP_NAME,
    get_config_path,
    load_config,
    resolve_api_key,
    save_config,
)
from popcorn_browser.models import UserConfig
from popcorn_browser.watchlist import WatchlistStore
from popcorn_browser.widgets.summary import format_mean

logger = logging.getLogger(__name__)


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


def _print_watched(store: WatchlistStore) -> None:
    """Print the watched list and its summary for non-interactive use."""
    entries = store.list()
    if not entries:
        print("No watched movies yet.")
        return
    print("Watched movies:")
    for entry in entries:
        year = f" ({entry.year})" if entry.year else ""
        print(
            f"  {entry.imdb_id}  {entry.title}{year}  "
            f"imdb {entry.imdb_rating:g}  you {entry.user_rating}  {entry.runtime} min"
        )
    summary = store.summary()
    print(
        f"{summary.count} movies  "
        f"avg imdb {format_mean(summary.mean_imdb_rating)}  "
        f"avg you {format_mean(summary.mean_user_rating)}  "
        f"avg runtime {format_mean(summary.mean_runtime)} min"
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Search the OMDb movie catalog and keep a rated watched list in a TUI"
    )
    parser.add_argument(
        "--api-key",
        type=str,
        default=None,
        help=f"OMDb API key (overrides {API_KEY_ENV_VAR} and the saved config)",
    )
    parser.add_argument(
        "--query",
        type=str,
        default="",
        help="Start with this search query",
    )
    parser.add_argument(
        "--list-watched",
        action="store_true",
        help="Print the watched list with averages and exit",
    )
    parser.add_argument(
        "--save-api-key",
        action="store_true",
        help="Store the effective API key in the config file and exit",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging to file (~/.config/popcorn-browser/debug.log)",
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
    parser.add_argument(
        "--ascii",
        action="store_true",
        help="Use ASCII-only icons for compatibility with limited terminals",
    )
    return parser


def main(
    argv: list[str] | None = None,
    *,
    load_config_fn: Callable[[], UserConfig] = load_config,
    save_config_fn: Callable[[UserConfig], bool] = save_config,
    store_factory: Callable[[], WatchlistStore] = WatchlistStore,
    configure_logging_fn: Callable[[bool], None] = _configure_logging,
    configure_color_mode_fn: Callable[[str], None] = _configure_color_mode,
    validate_interactive_tty_fn: Callable[[], bool] = _validate_interactive_tty,
    app_factory: Callable[..., Any] | None = None,
) -> int:
    """Main entry point. Returns exit code."""
    args = _build_parser().parse_args(argv)

    color_mode = "never" if args.no_color else args.color
    configure_color_mode_fn(color_mode)
    configure_logging_fn(args.debug)
    logger.debug("popcorn-browser starting, cwd=%s", Path.cwd())

    config = load_config_fn()

    if args.list_watched:
        _print_watched(store_factory())
        return 0

    api_key = resolve_api_key(config, args.api_key)

    if args.save_api_key:
        if not api_key:
            print(build_missing_api_key_error(API_KEY_ENV_VAR), file=sys.stderr)
            return 1
        if not save_config_fn(dataclasses.replace(config, omdb_api_key=api_key)):
            print(
                build_actionable_error(
                    "save the API key",
                    why="the config file could not be written",
                    next_step=f"check permissions for {get_config_path()}",
                ),
                file=sys.stderr,
            )
            return 1
        print(f"Saved API key to {get_config_path()}")
        return 0

    if not api_key:
        print(build_missing_api_key_error(API_KEY_ENV_VAR), file=sys.stderr)
        return 1

    if not validate_interactive_tty_fn():
        print(
            "Error: popcorn-browser requires an interactive TTY for the full UI.",
            file=sys.stderr,
        )
        print("Next steps:", file=sys.stderr)
        print("  - Run popcorn-browser directly in a terminal session", file=sys.stderr)
        print("  - Use --list-watched for non-interactive output", file=sys.stderr)
        print("  - Use --help for command documentation", file=sys.stderr)
        return 2

    if app_factory is None:
        from popcorn_browser.app import PopcornBrowser as _PopcornBrowser

        app_factory = _PopcornBrowser

    app = app_factory(
        config,
        api_key=api_key,
        store=store_factory(),
        initial_query=args.query,
        ascii_icons=args.ascii,
    )
    app.run()
    return 0


__all__ = [
    "_configure_color_mode",
    "_configure_logging",
    "_validate_interactive_tty",
    "main",
]
