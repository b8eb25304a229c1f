"""DebugConsole — a logging sink that fans messages out to subscribers.

Hosts show scene diagnostics (listener failures, task errors, sketch
build errors) in their own UI by subscribing to a console and attaching
it to the ``scenefx`` logger. Sketch code can also write to it directly
with log().
"""

from __future__ import annotations

import logging
from typing import Callable

ConsoleListener = Callable[[str], None]
Unsubscribe = Callable[[], None]

logger = logging.getLogger("scenefx.console")


class DebugConsole(logging.Handler):
    """Logging handler that forwards each formatted message to its listeners.

    Usage:
        console = DebugConsole()
        lines = []
        console.subscribe(lines.append)
        detach = console.attach()          # receive scenefx.* records

        console.log("x =", 3)              # lines == ["x = 3"]
        detach()
    """

    def __init__(self, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._listeners: list[ConsoleListener] = []
        self._dispatching = False

    def subscribe(self, listener: ConsoleListener) -> Unsubscribe:
        """Register a listener. Returns a function that removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass  # already removed

        return _unsubscribe

    def log(self, *args: object) -> None:
        self._dispatch(" ".join(str(arg) for arg in args))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
        except Exception:
            self.handleError(record)
            return
        self._dispatch(message)

    def attach(self, logger_name: str = "scenefx") -> Callable[[], None]:
        """Add this handler to ``logger_name``. Returns a function that removes it."""
        target = logging.getLogger(logger_name)
        target.addHandler(self)
        return lambda: target.removeHandler(self)

    def _dispatch(self, message: str) -> None:
        # Warnings about failing listeners may route back here; drop those.
        if self._dispatching:
            return
        self._dispatching = True
        try:
            for listener in list(self._listeners):
                try:
                    listener(message)
                except Exception:
                    logger.warning("Console listener %r failed", listener, exc_info=True)
        finally:
            self._dispatching = False
