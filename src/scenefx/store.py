"""Store — flat key/value map with per-key change listeners.

The store is the only channel through which units react to each other:
Unit.update() mirrors attributes into it under ``"<unit>::<attr>"`` and
position bindings, anchors and data-change handlers subscribe to those keys.

set() notifies synchronously, depth-first. A listener that calls set()
recurses immediately, so nesting is counted and capped at ``max_depth``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator

from scenefx.errors import MissingKeyError, StoreCycleError

Listener = Callable[[Any], None]

_MISSING = object()


class Subscription:
    """Handle for one on_change registration. dispose() is idempotent."""

    __slots__ = ("_store", "key", "callback", "_active")

    def __init__(self, store: Store, key: str, callback: Listener) -> None:
        self._store = store
        self.key = key
        self.callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def dispose(self) -> None:
        if not self._active:
            return
        self._active = False
        self._store._detach(self)

    def __repr__(self) -> str:
        state = "active" if self._active else "disposed"
        return f"Subscription({self.key!r}, {state})"


class Store:
    """Key-based value container with ordered, per-key listeners."""

    def __init__(self, *, max_depth: int = 64, logger: logging.Logger | None = None) -> None:
        self._data: dict[str, Any] = {}
        self._listeners: dict[str, list[Subscription]] = {}
        self._depth = 0
        self.max_depth = max_depth
        self._logger = logger or logging.getLogger("scenefx.store")

    def get(self, key: str) -> Any:
        """Read a value. Raises MissingKeyError if ``key`` was never set."""
        value = self._data.get(key, _MISSING)
        if value is _MISSING:
            raise MissingKeyError(key)
        return value

    def has(self, key: str) -> bool:
        return key in self._data

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def keys(self) -> Iterator[str]:
        return iter(list(self._data))

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` and call every listener of ``key`` in registration order.

        A failing listener is logged and does not stop the others.
        """
        if self._depth >= self.max_depth:
            raise StoreCycleError(key, self._depth + 1)
        self._data[key] = value
        self._depth += 1
        try:
            for sub in list(self._listeners.get(key, ())):
                if not sub.active:
                    continue
                try:
                    sub.callback(value)
                except Exception:
                    self._logger.exception("Listener %r for %r failed", sub.callback, key)
        finally:
            self._depth -= 1

    def on_change(self, key: str, fn: Listener) -> Subscription:
        """Register ``fn`` for changes to ``key``. Returns a handle to revoke it."""
        sub = Subscription(self, key, fn)
        self._listeners.setdefault(key, []).append(sub)
        return sub

    def remove_on_change(self, key: str, fn: Listener) -> None:
        """Remove every registration of ``fn`` for ``key``. No-op if none exist."""
        for sub in list(self._listeners.get(key, ())):
            if sub.callback == fn:
                sub.dispose()

    def listener_count(self, key: str) -> int:
        return len(self._listeners.get(key, ()))

    def _detach(self, sub: Subscription) -> None:
        subs = self._listeners.get(sub.key)
        if not subs:
            return
        try:
            subs.remove(sub)
        except ValueError:
            pass
        if not subs:
            del self._listeners[sub.key]

    def __repr__(self) -> str:
        return f"Store({len(self._data)} keys)"
