"""Tests for CLI bootstrap: argument handling, exit codes, and logging setup."""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from popcorn_browser.cli import _configure_color_mode, _configure_logging, main
from popcorn_browser.config import load_config
from popcorn_browser.models import UserConfig


@pytest.fixture
def restore_logging():
    handlers = list(logging.root.handlers)
    level = logging.root.level
    yield
    logging.disable(logging.NOTSET)
    for handler in list(logging.root.handlers):
        if handler not in handlers:
            logging.root.removeHandler(handler)
            handler.close()
    logging.root.setLevel(level)


@pytest.fixture
def run_main(make_store):
    """Call main() with every side-effecting hook replaced."""

    def _run(argv, *, config=None, tty=True, save_result=True, store=None):
        app_factory = MagicMock()
        save_config_fn = MagicMock(return_value=save_result)
        code = main(
            argv,
            load_config_fn=lambda: config or UserConfig(),
            save_config_fn=save_config_fn,
            store_factory=lambda: store if store is not None else make_store(),
            configure_logging_fn=lambda _debug: None,
            configure_color_mode_fn=lambda _mode: None,
            validate_interactive_tty_fn=lambda: tty,
            app_factory=app_factory,
        )
        return code, app_factory, save_config_fn

    return _run


class TestMain:
    def test_launches_app_with_resolved_options(self, run_main):
        config = UserConfig(omdb_api_key="saved")
        code, app_factory, _ = run_main(
            ["--api-key", "flag-key", "--query", "inception", "--ascii"], config=config
        )

        assert code == 0
        args, kwargs = app_factory.call_args
        assert args == (config,)
        assert kwargs["api_key"] == "flag-key"
        assert kwargs["initial_query"] == "inception"
        assert kwargs["ascii_icons"] is True
        app_factory.return_value.run.assert_called_once_with()

    def test_environment_key_is_used(self, run_main, monkeypatch):
        monkeypatch.setenv("OMDB_API_KEY", "env-key")
        code, app_factory, _ = run_main([])
        assert code == 0
        assert app_factory.call_args.kwargs["api_key"] == "env-key"

    def test_missing_key_exits_with_error(self, run_main, capsys):
        code, app_factory, _ = run_main([])

        assert code == 1
        app_factory.assert_not_called()
        assert "OMDb API key" in capsys.readouterr().err

    def test_non_interactive_terminal_exits_2(self, run_main, capsys):
        code, app_factory, _ = run_main(["--api-key", "k"], tty=False)

        assert code == 2
        app_factory.assert_not_called()
        assert "interactive TTY" in capsys.readouterr().err

    def test_list_watched_prints_entries_and_summary(
        self, run_main, make_store, make_entry, capsys
    ):
        store = make_store()
        store.add(make_entry("tt1375666", "Inception", runtime=148, user_rating=8))
        store.add(make_entry("tt0816692", "Interstellar", runtime=170, user_rating=10))

        code, app_factory, _ = run_main(["--list-watched"], store=store)

        out = capsys.readouterr().out
        assert code == 0
        app_factory.assert_not_called()
        assert "Inception (2010)" in out
        assert "Interstellar" in out
        assert "2 movies" in out
        assert "avg you 9.00" in out
        assert "avg runtime 159.00 min" in out

    def test_list_watched_empty(self, run_main, capsys):
        code, _, _ = run_main(["--list-watched"])
        assert code == 0
        assert "No watched movies yet." in capsys.readouterr().out

    def test_save_api_key(self, run_main, capsys):
        code, app_factory, save_config_fn = run_main(["--api-key", "new-key", "--save-api-key"])

        assert code == 0
        app_factory.assert_not_called()
        saved = save_config_fn.call_args.args[0]
        assert saved.omdb_api_key == "new-key"
        assert "Saved API key" in capsys.readouterr().out

    def test_save_api_key_without_key(self, run_main):
        code, _, save_config_fn = run_main(["--save-api-key"])
        assert code == 1
        save_config_fn.assert_not_called()

    def test_save_api_key_write_failure(self, run_main, capsys):
        code, _, _ = run_main(["--api-key", "k", "--save-api-key"], save_result=False)
        assert code == 1
        assert "Could not save the API key." in capsys.readouterr().err

    def test_save_api_key_persists_with_real_config(self, make_store, config_dir: Path):
        code = main(
            ["--api-key", "persisted", "--save-api-key"],
            store_factory=make_store,
            configure_logging_fn=lambda _debug: None,
            configure_color_mode_fn=lambda _mode: None,
        )
        assert code == 0
        assert (config_dir / "config.json").exists()
        assert load_config().omdb_api_key == "persisted"

    def test_no_color_overrides_color_flag(self, make_store):
        modes: list[str] = []
        main(
            ["--color", "always", "--no-color", "--list-watched"],
            load_config_fn=UserConfig,
            store_factory=make_store,
            configure_logging_fn=lambda _debug: None,
            configure_color_mode_fn=modes.append,
        )
        assert modes == ["never"]


class TestConfigureLogging:
    def test_default_disables_logging(self, restore_logging):
        _configure_logging(False)
        assert logging.root.manager.disable == logging.CRITICAL

    def test_debug_writes_rotating_log_in_config_dir(self, restore_logging, config_dir: Path):
        _configure_logging(True)

        handlers = [
            h for h in logging.root.handlers if isinstance(h, logging.handlers.RotatingFileHandler)
        ]
        assert handlers
        assert Path(handlers[-1].baseFilename) == config_dir / "debug.log"
        assert logging.root.level == logging.DEBUG


class TestConfigureColorMode:
    def test_never_sets_no_color(self, monkeypatch):
        monkeypatch.setenv("FORCE_COLOR", "1")
        monkeypatch.delenv("NO_COLOR", raising=False)
        _configure_color_mode("never")
        assert os.environ["NO_COLOR"] == "1"
        assert "FORCE_COLOR" not in os.environ

    def test_always_sets_force_color(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        monkeypatch.delenv("FORCE_COLOR", raising=False)
        _configure_color_mode("always")
        assert os.environ["FORCE_COLOR"] == "1"
        assert "NO_COLOR" not in os.environ
