"""Shared fixtures: a small posts app on the in-memory engine."""

from dataclasses import dataclass
from typing import Any

import pytest

from perch.sync import TransitionSynchronizer
from perch.testing import MemoryEngine, MemoryLocation


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@dataclass(frozen=True)
class Post:
    id: int
    title: str = ""


class PostsHandler:
    """Post list. Observes sort and search; refreshes through model()."""

    observes_parameters = ["sort", "search"]

    def __init__(self) -> None:
        self.loads: list[dict[str, Any]] = []
        self.applied: list[Any] = []

    def model(self, params: dict[str, Any]) -> tuple[str, Any]:
        self.loads.append(dict(params))
        return ("posts", params.get("sort"))

    def apply_context(self, controller: Any, value: Any) -> None:
        controller.model = value
        self.applied.append(value)


class PostHandler:
    """Single post. Dynamic, observes nothing."""

    observes_parameters = "none"

    def __init__(self) -> None:
        self.loads: list[dict[str, Any]] = []

    def model(self, params: dict[str, Any]) -> Post:
        self.loads.append(dict(params))
        return Post(int(params["post_id"]))


class AboutHandler:
    observes_parameters = None


@pytest.fixture
def location() -> MemoryLocation:
    return MemoryLocation()


@pytest.fixture
def posts() -> PostsHandler:
    return PostsHandler()


@pytest.fixture
def post() -> PostHandler:
    return PostHandler()


@pytest.fixture
def engine(location: MemoryLocation, posts: PostsHandler, post: PostHandler) -> MemoryEngine:
    engine = MemoryEngine(location)
    engine.add("posts", "/posts", posts)
    engine.add("posts.view", "/posts/{post_id}", post)
    engine.add("about", "/about", AboutHandler())
    return engine


@pytest.fixture
def sync(engine: MemoryEngine, location: MemoryLocation) -> TransitionSynchronizer:
    """A synchronizer wired to the engine; enter it with ``async with``."""
    synchronizer = TransitionSynchronizer(engine, location)
    engine.query_source = synchronizer.params_for
    return synchronizer
