"""Invoke helpers: call sync or async handler capabilities uniformly.

A handler's ``model()``, ``refresh()`` and ``apply_context()`` can be
``def`` or ``async def``. Any code that calls a user-provided capability
must handle both cases. This module provides a single helper so the
sync/async check lives in exactly one place.

Usage::

    from perch._internal.invoke import invoke

    context = await invoke(handler.refresh, params)
"""

import inspect
from typing import Any


async def invoke(capability: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a capability and await the result if it's awaitable.

    Works with both sync and async callables::

        # sync: returns immediately, no await needed
        class Posts:
            def refresh(self, params):
                return store.posts(sort=params.get("sort"))

        # async: returns coroutine, awaited automatically
        class Posts:
            async def refresh(self, params):
                return await api.posts(sort=params.get("sort"))
    """
    result = capability(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
