"""Configuration persistence: load, save, and atomic JSON writes."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from popcorn_browser.models import (
    CONFIG_APP_NAME,
    OMDB_DEFAULT_BASE_URL,
    REQUEST_TIMEOUT_DEFAULT_SECONDS,
    REQUEST_TIMEOUT_MAX_SECONDS,
    SEARCH_DEBOUNCE_DEFAULT_MS,
    SEARCH_DEBOUNCE_MAX_MS,
    UserConfig,
)

logger = logging.getLogger(__name__)

# ============================================================================
# Configuration Persistence
# ============================================================================
#
# Validation contract: _dict_to_config() guarantees valid output for any input:
#
#   Field                    Rule                        Handler
#   ───────────────────────  ──────────────────────────  ─────────────────────────
#   request_timeout_seconds  1 ≤ x ≤ 120                 _coerce_timeout_seconds
#   search_debounce_ms       0 ≤ x ≤ 2000                _coerce_debounce_ms
#   omdb_base_url            non-empty http(s) URL        _coerce_base_url
#   scalar fields            type-checked via _safe_get  _dict_to_config
#
CONFIG_FILENAME = "config.json"
API_KEY_ENV_VAR = "OMDB_API_KEY"


def get_config_dir() -> Path:
    """Get the per-user directory holding config, watched list, and logs.

    Uses platformdirs for cross-platform config directory:
    - Linux: ~/.config/popcorn-browser/
    - macOS: ~/Library/Application Support/popcorn-browser/
    - Windows: %APPDATA%/popcorn-browser/
    """
    return Path(user_config_dir(CONFIG_APP_NAME))


def get_config_path() -> Path:
    """Get the path to the configuration file."""
    return get_config_dir() / CONFIG_FILENAME


def write_json_atomic(path: Path, data: Any) -> None:
    """Write JSON to ``path`` via tempfile + os.replace().

    A crash mid-write leaves the previous file intact.

    Raises:
        OSError: If the directory or file cannot be written.
        TypeError: If ``data`` is not JSON-serializable.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    json_str = json.dumps(data, indent=2, ensure_ascii=False)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp", prefix=f".{path.stem}-")
    closed = False
    try:
        os.write(fd, json_str.encode("utf-8"))
        os.close(fd)
        closed = True
        os.replace(tmp_path, path)
    except BaseException:
        if not closed:
            os.close(fd)
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def _config_to_dict(config: UserConfig) -> dict[str, Any]:
    """Serialize UserConfig to a JSON-compatible dictionary."""
    return {
        "version": config.version,
        "omdb_api_key": config.omdb_api_key,
        "omdb_base_url": config.omdb_base_url,
        "request_timeout_seconds": _coerce_timeout_seconds(config.request_timeout_seconds),
        "search_debounce_ms": _coerce_debounce_ms(config.search_debounce_ms),
        "focus_search_key": config.focus_search_key,
    }


def _safe_get(data: dict, key: str, default: Any, expected_type: type) -> Any:
    """Safely get a value from dict with type validation.

    Returns the default if key is missing or value has wrong type.
    """
    value = data.get(key, default)
    if not isinstance(value, expected_type) or isinstance(value, bool) != isinstance(
        default, bool
    ):
        return default
    return value


def _coerce_timeout_seconds(value: Any) -> int:
    """Validate and clamp the per-request timeout."""
    if not isinstance(value, int) or isinstance(value, bool):
        return REQUEST_TIMEOUT_DEFAULT_SECONDS
    return max(1, min(value, REQUEST_TIMEOUT_MAX_SECONDS))


def _coerce_debounce_ms(value: Any) -> int:
    """Validate and clamp the search input debounce."""
    if not isinstance(value, int) or isinstance(value, bool):
        return SEARCH_DEBOUNCE_DEFAULT_MS
    return max(0, min(value, SEARCH_DEBOUNCE_MAX_MS))


def _coerce_base_url(value: Any) -> str:
    """Accept only http(s) catalog URLs."""
    if not isinstance(value, str) or not value.strip().startswith(("http://", "https://")):
        return OMDB_DEFAULT_BASE_URL
    return value.strip()


def _dict_to_config(data: dict[str, Any]) -> UserConfig:
    """Deserialize a dictionary to UserConfig with type validation."""
    focus_key = _safe_get(data, "focus_search_key", "slash", str).strip()
    return UserConfig(
        omdb_api_key=_safe_get(data, "omdb_api_key", "", str).strip(),
        omdb_base_url=_coerce_base_url(data.get("omdb_base_url")),
        request_timeout_seconds=_coerce_timeout_seconds(data.get("request_timeout_seconds")),
        search_debounce_ms=_coerce_debounce_ms(data.get("search_debounce_ms")),
        focus_search_key=focus_key or "slash",
        version=_safe_get(data, "version", 1, int),
    )


def load_config() -> UserConfig:
    """Load configuration from disk.

    Returns default config if file doesn't exist or is corrupted.
    Logs specific errors to help diagnose config issues.
    """
    config_path = get_config_path()

    if not config_path.exists():
        return UserConfig()

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise TypeError(f"expected a JSON object, got {type(data).__name__}")
        return _dict_to_config(data)
    except json.JSONDecodeError as e:
        logger.warning("Config file has invalid JSON, using defaults: %s", e)
    except (KeyError, TypeError) as e:
        logger.warning("Config file has invalid structure, using defaults: %s", e)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read config file, using defaults: %s", e)
    return UserConfig(config_defaulted=True)


def save_config(config: UserConfig) -> bool:
    """Save configuration to disk atomically.

    Creates the config directory if it doesn't exist.
    Returns True on success, False on failure.
    """
    try:
        write_json_atomic(get_config_path(), _config_to_dict(config))
        return True
    except OSError as e:
        logger.error("Failed to save config: %s", e)
        return False


def resolve_api_key(config: UserConfig, override: str | None = None) -> str:
    """Pick the effective OMDb key: CLI flag, then environment, then config."""
    for candidate in (override, os.environ.get(API_KEY_ENV_VAR), config.omdb_api_key):
        if candidate and candidate.strip():
            return candidate.strip()
    return ""


__all__ = [
    "API_KEY_ENV_VAR",
    "CONFIG_APP_NAME",
    "CONFIG_FILENAME",
    "get_config_dir",
    "get_config_path",
    "load_config",
    "resolve_api_key",
    "save_config",
    "write_json_atomic",
]
