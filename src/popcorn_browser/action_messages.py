"""UI-facing copy builders for errors, warnings, and confirmations."""

from __future__ import annotations


def _ensure_sentence(text: str) -> str:
    """Return text with terminal sentence punctuation."""
    cleaned = text.strip()
    if not cleaned:
        return ""
    if cleaned.endswith((".", "!", "?")):
        return cleaned
    return f"{cleaned}."


def build_next_step_hint(next_step: str) -> str:
    """Build a canonical next-step guidance line."""
    return f"Next step: {_ensure_sentence(next_step)}"


def build_actionable_error(
    action: str,
    *,
    next_step: str,
    why: str | None = None,
) -> str:
    """Build a 2-3 line actionable error message."""
    lines = [f"Could not {action.strip()}."]
    if why:
        lines.append(f"Why: {_ensure_sentence(why)}")
    lines.append(build_next_step_hint(next_step))
    return "\n".join(lines)


def build_actionable_warning(
    message: str,
    *,
    next_step: str,
    why: str | None = None,
) -> str:
    """Build a 2-3 line actionable warning message."""
    lines = [_ensure_sentence(message)]
    if why:
        lines.append(f"Why: {_ensure_sentence(why)}")
    lines.append(build_next_step_hint(next_step))
    return "\n".join(lines)


def build_added_notification(title: str, user_rating: int) -> str:
    return f"Added {title} ({user_rating}/10) to your watched list"


def build_removed_notification(title: str) -> str:
    return f"Removed {title} from your watched list"


def build_duplicate_notification(title: str) -> str:
    return f"{title} is already in your watched list"


def build_storage_unavailable_warning() -> str:
    """Warning shown once the watched list can no longer be saved."""
    return build_actionable_warning(
        "Watched list changes are kept for this session only",
        why="the watched list file could not be written",
        next_step="check permissions on the config directory (run with --debug for details)",
    )


def build_missing_api_key_error(env_var: str) -> str:
    return build_actionable_error(
        "start without an OMDb API key",
        why="every catalog lookup needs a key",
        next_step=f"pass --api-key, set {env_var}, or run with --api-key KEY --save-api-key once",
    )


__all__ = [
    "build_actionable_error",
    "build_actionable_warning",
    "build_added_notification",
    "build_duplicate_notification",
    "build_missing_api_key_error",
    "build_next_step_hint",
    "build_removed_notification",
    "build_storage_unavailable_warning",
]
