"""Scoped global key commands dispatched from the app's key handler.

Textual's ``BINDINGS`` are static per class, so commands that only exist for
part of the app's lifetime (for example "escape closes the open movie") are
registered here and released when their owning scope ends.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class KeyCommandListener:
    """Binds one key to one callback.

    ``skip_when`` is an optional guard; while it returns True the command
    does not fire (and the key is left for other handlers).
    """

    def __init__(
        self,
        key: str,
        callback: Callable[[], None],
        *,
        skip_when: Callable[[], bool] | None = None,
        description: str = "",
    ) -> None:
        self.key = key
        self.callback = callback
        self.skip_when = skip_when
        self.description = description
        self._registry: KeyCommandRegistry | None = None

    @property
    def active(self) -> bool:
        return self._registry is not None

    def should_fire(self) -> bool:
        return self.skip_when is None or not self.skip_when()

    def release(self) -> None:
        """Deregister from the owning registry. Safe to call more than once."""
        registry = self._registry
        if registry is not None:
            registry.unregister(self)

    def __repr__(self) -> str:
        return f"KeyCommandListener({self.key!r}, {self.description!r})"


class KeyCommandRegistry:
    """Holds active key commands and dispatches key presses to them."""

    def __init__(self) -> None:
        self._listeners: list[KeyCommandListener] = []

    def register(self, listener: KeyCommandListener) -> KeyCommandListener:
        """Activate ``listener`` until it is released."""
        if listener._registry is self:
            return listener
        if listener._registry is not None:
            listener._registry.unregister(listener)
        self._listeners.append(listener)
        listener._registry = self
        logger.debug("Key command registered: %r", listener)
        return listener

    def bind(
        self,
        key: str,
        callback: Callable[[], None],
        *,
        skip_when: Callable[[], bool] | None = None,
        description: str = "",
    ) -> KeyCommandListener:
        """Create and register a listener in one step."""
        return self.register(
            KeyCommandListener(key, callback, skip_when=skip_when, description=description)
        )

    def unregister(self, listener: KeyCommandListener) -> None:
        if listener._registry is not self:
            return
        self._listeners.remove(listener)
        listener._registry = None
        logger.debug("Key command released: %r", listener)

    def listeners_for(self, key: str) -> list[KeyCommandListener]:
        return [listener for listener in self._listeners if listener.key == key]

    def __len__(self) -> int:
        return len(self._listeners)

    def dispatch(self, key: str) -> bool:
        """Fire every active listener bound to ``key``.

        Returns True if at least one listener fired.
        """
        fired = False
        # Snapshot: callbacks may release listeners (including themselves).
        for listener in self.listeners_for(key):
            if not listener.active or not listener.should_fire():
                continue
            listener.callback()
            fired = True
        return fired

    def clear(self) -> None:
        """Release every listener (app teardown)."""
        for listener in list(self._listeners):
            self.unregister(listener)


__all__ = [
    "KeyCommandListener",
    "KeyCommandRegistry",
]
