"""Perch: query parameter synchronization for hierarchical route handlers.

Keeps the handlers of an active navigation chain consistent with a flat
set of query parameters. Handlers that survive a navigation are refreshed
only when the parameters they observe actually changed, and parent-scoped
parameters survive navigating into a child.

Basic usage::

    from perch import QueryParameterOverride, TransitionSynchronizer

    async with TransitionSynchronizer(engine, location) as sync:
        await sync.handle_initial_url("/posts?sort=date:asc")
        await sync.navigate_to("posts", QueryParameterOverride.of(sort="date:desc"))

Testing (``perch.testing``)::

    from perch.testing import MemoryEngine, MemoryLocation
"""

__version__ = "0.1.0-dev"
__all__ = [
    "ConfigurationError",
    "HandlerDescriptor",
    "NavigationEngine",
    "PerchError",
    "QueryParameterOverride",
    "QueryParams",
    "SyncConfig",
    "TransitionSynchronizer",
    "deserialize",
    "differs",
    "extract",
    "serialize",
]

# name -> module that defines it
_LAZY_IMPORTS: dict[str, str] = {
    "ConfigurationError": "perch.errors",
    "HandlerDescriptor": "perch.routing.handler",
    "NavigationEngine": "perch.routing.engine",
    "PerchError": "perch.errors",
    "QueryParameterOverride": "perch.routing.override",
    "QueryParams": "perch.query.params",
    "SyncConfig": "perch.config",
    "TransitionSynchronizer": "perch.sync",
    "deserialize": "perch.query.codec",
    "differs": "perch.query.diff",
    "extract": "perch.query.extract",
    "serialize": "perch.query.codec",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast (anyio is only imported with the
    synchronizer) while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
