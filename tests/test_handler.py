"""Tests for perch.routing.handler: descriptors and refresh capability lookup."""

from types import SimpleNamespace
from typing import Any

import pytest

from perch._internal.invoke import invoke
from perch.errors import ConfigurationError
from perch.routing.handler import ActiveHandler, HandlerDescriptor, refresh_capability


class TestHandlerDescriptor:
    def test_for_handler(self) -> None:
        handler = SimpleNamespace(observes_parameters=["sort"])
        descriptor = HandlerDescriptor.for_handler("posts.view", handler, param_names=("post_id",))
        assert descriptor.name == "posts.view"
        assert descriptor.is_dynamic is True
        assert descriptor.observes == frozenset({"sort"})

    def test_static_without_declaration(self) -> None:
        descriptor = HandlerDescriptor.for_handler("about", object())
        assert descriptor.is_dynamic is False
        assert descriptor.observes == "none"

    def test_invalid_declaration(self) -> None:
        with pytest.raises(ConfigurationError):
            HandlerDescriptor.for_handler("posts", SimpleNamespace(observes_parameters=7))

    def test_frozen(self) -> None:
        descriptor = HandlerDescriptor("posts")
        with pytest.raises(AttributeError):
            descriptor.name = "other"  # type: ignore[misc]


class TestRefreshCapability:
    def test_prefers_refresh(self) -> None:
        class Handler:
            def refresh(self, params: Any) -> str:
                return "refresh"

            def model(self, params: Any) -> str:
                return "model"

        handler = Handler()
        capability = refresh_capability(ActiveHandler("posts", handler))
        assert capability is not None
        assert capability({}) == "refresh"

    def test_model_fallback_merges_path_params(self) -> None:
        handler = SimpleNamespace(model=lambda params: params)
        entry = ActiveHandler("post", handler, params={"post_id": "3"})
        capability = refresh_capability(entry)
        assert capability is not None
        assert capability({"tab": "info"}) == {"post_id": "3", "tab": "info"}

    def test_none_without_loader(self) -> None:
        assert refresh_capability(ActiveHandler("about", SimpleNamespace())) is None

    def test_non_callable_ignored(self) -> None:
        assert refresh_capability(ActiveHandler("about", SimpleNamespace(refresh="nope"))) is None


class TestInvoke:
    @pytest.mark.anyio
    async def test_sync(self) -> None:
        assert await invoke(lambda x: x + 1, 1) == 2

    @pytest.mark.anyio
    async def test_async(self) -> None:
        async def double(x: int) -> int:
            return x * 2

        assert await invoke(double, 4) == 8
