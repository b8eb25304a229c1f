"""Exception taxonomy.

Configuration and missing-key errors propagate to the caller. Errors raised
by listeners, tasks and gesture handlers are caught where they are
dispatched and logged instead (see store.py, scheduler.py, gestures.py).
"""


class SceneError(Exception):
    """Base class for every error raised by scenefx."""


class ConfigurationError(SceneError, ValueError):
    """A required construction argument is missing or invalid."""


class MissingKeyError(SceneError, KeyError):
    """A store key was read before it was ever set."""

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Empty key in store: {self.key!r}"


class StoreCycleError(SceneError, RecursionError):
    """Nested Store.set calls went deeper than the store allows."""

    def __init__(self, key: str, depth: int) -> None:
        super().__init__(f"Store.set({key!r}) nested {depth} levels deep")
        self.key = key
        self.depth = depth


class AnchorMissingError(SceneError, LookupError):
    """A screen anchor unit was removed from its Context."""
