"""Navigation engine and location protocols.

The synchronizer wraps an engine by composition. URL recognition,
handler activation and transitions all live on the engine side; the
synchronizer only decides which query parameters flow into a
navigation and which active handlers need a refresh afterwards.

``perch.testing.MemoryEngine`` is a complete in-memory implementation.
"""

from collections.abc import Sequence
from typing import Any, Protocol

from perch.routing.handler import ActiveHandler, HandlerDescriptor


class Location(Protocol):
    """The address shown to the user."""

    def get_url(self) -> str: ...
    def set_url(self, url: str) -> None: ...


class NavigationEngine(Protocol):
    """Protocol for the navigation engine a synchronizer drives.

    ``navigate_by_path`` and ``navigate_by_target`` return once the
    transition has settled. Failures (unknown targets, rejected
    transitions) are raised from them and reach the caller untouched.
    """

    def resolve_chain(self, name: str) -> Sequence[HandlerDescriptor]: ...
    def has_route(self, name: str) -> bool: ...
    def active_chain(self) -> Sequence[ActiveHandler]: ...
    async def navigate_by_path(self, path: str) -> None: ...
    async def navigate_by_target(self, name: str, contexts: Sequence[Any]) -> None: ...
    def generate_url(self, name: str, contexts: Sequence[Any]) -> str: ...
