"""Perch exception hierarchy.

Shared across the synchronizer, the query helpers, and the reference
engine so every module raises and catches the same types.

Failures surfaced by a navigation engine are never wrapped in these
types. They propagate to the caller of ``navigate_to()`` / ``handle_url()``
exactly as the engine raised them.
"""


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError):
    """Raised when a handler or synchronizer is configured incorrectly.

    Typically raised while registering a handler whose
    ``observes_parameters`` declaration cannot be interpreted.
    """


class SynchronizerNotRunning(PerchError):  # noqa: N818
    """Raised when navigating through a synchronizer outside ``async with``.

    Refreshes run in the synchronizer's task group, which only exists
    while the synchronizer context is open.
    """


class NavigationError(PerchError):
    """A navigation the reference engine cannot perform.

    Raised by ``perch.testing.MemoryEngine`` for mismatched context
    arguments. Real engines raise their own types.
    """


class UnknownRouteError(NavigationError):
    """No route is registered under the requested name or path."""

    def __init__(self, target: str) -> None:
        self.target = target
        super().__init__(f"No route matches {target!r}")
