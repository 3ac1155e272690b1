"""Handler descriptors, active chain entries, and refresh capability lookup.

A route handler is any object with the right shape. No base class
required. The synchronizer checks for capabilities, not lineage::

    class PostsHandler:
        observes_parameters = ["sort", "search"]

        async def model(self, params):
            return await store.posts(sort=params.get("sort"))

        def apply_context(self, controller, value):
            controller.model = value

Only ``observes_parameters`` is read at registration. The rest are
looked up with ``getattr`` and may be plain or ``async`` methods:

- ``refresh(params)``: reload the context for new query parameters
- ``model(params)``: the normal data-loading hook, used when
  ``refresh`` is absent
- ``on_context_changed()``: notified after a refreshed context is bound
- ``apply_context(controller, value)``: push the context into the view layer
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from perch._internal.types import Capability, Observes
from perch.query.extract import normalize_observes


@dataclass(frozen=True, slots=True)
class HandlerDescriptor:
    """A handler's registration-time description. Immutable.

    ``is_dynamic`` handlers consume one positional context when
    navigated to by name. ``param_names`` are the path parameters the
    handler's own segment adds (``post_id`` for ``/posts/{post_id}``).
    """

    name: str
    is_dynamic: bool = False
    observes: Observes = "none"
    param_names: tuple[str, ...] = ()

    @classmethod
    def for_handler(
        cls,
        name: str,
        handler: Any,
        *,
        param_names: tuple[str, ...] = (),
    ) -> "HandlerDescriptor":
        """Describe *handler*, normalizing its ``observes_parameters``."""
        return cls(
            name=name,
            is_dynamic=bool(param_names),
            observes=normalize_observes(getattr(handler, "observes_parameters", None)),
            param_names=param_names,
        )


@dataclass(slots=True)
class ActiveHandler:
    """One position of the engine's currently active chain.

    ``context`` is the value the engine bound when it activated the
    handler; ``params`` are the path parameters it was activated with.
    ``observes`` is the interest fixed by the handler's descriptor.
    """

    name: str
    handler: Any
    context: Any = None
    controller: Any = None
    params: Mapping[str, str] = field(default_factory=dict)
    observes: Observes = "none"


def refresh_capability(entry: ActiveHandler) -> Capability | None:
    """Return a callable that reloads *entry*'s context, or None.

    Uses the handler's ``refresh(params)`` when defined. Otherwise falls
    back to ``model()``, called with the entry's path parameters merged
    with the query parameters so dynamic handlers still see their ids.
    """
    refresh = getattr(entry.handler, "refresh", None)
    if callable(refresh):
        return refresh

    model = getattr(entry.handler, "model", None)
    if not callable(model):
        return None
    path_params = dict(entry.params)

    def _reload(params: Mapping[str, Any]) -> Any:
        return model({**path_params, **params})

    return _reload
