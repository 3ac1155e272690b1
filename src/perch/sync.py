"""Transition synchronizer: keeps active handlers in step with the query string.

The navigation engine does not re-initialize handlers that stay active
across a navigation. When only query parameters change, those handlers
would keep showing stale data. The synchronizer wraps the engine and:

1. Snapshots the live chain before each navigation
2. Resolves the match point to find ancestors that survive it
3. Merges those ancestors' parameters with any explicit override
4. Lets the engine perform the navigation
5. Reconciles: every still-active handler whose parameter subset
   changed is refreshed in the background (anyio task group)
6. Writes the final query string back into the location

Usage::

    async with TransitionSynchronizer(engine, location) as sync:
        await sync.handle_initial_url("/posts?sort=date:asc")
        await sync.navigate_to("posts", QueryParameterOverride.of(sort="date:desc"))
        await sync.drain()

Refreshes are fire-and-forget: ``navigate_to()`` returns before they
resolve, and nothing cancels a refresh when a newer navigation starts.
A handler's parameters are recorded *before* its refresh resolves, so an
overlapping navigation that asks for the same parameters does not
trigger a second refresh.
"""

import logging
from collections.abc import Mapping, Sequence
from contextlib import AsyncExitStack
from dataclasses import dataclass
from itertools import count
from types import TracebackType
from typing import Any, Self

import anyio
from anyio.abc import TaskGroup

from perch._internal.invoke import invoke
from perch._internal.types import Capability, ParameterSet, ParamValue
from perch.config import SyncConfig
from perch.errors import SynchronizerNotRunning
from perch.query.codec import join_url, serialize, split_url
from perch.query.diff import differs
from perch.query.extract import extract
from perch.query.params import QueryParams, merge
from perch.routing.engine import Location, NavigationEngine
from perch.routing.handler import ActiveHandler, HandlerDescriptor, refresh_capability
from perch.routing.match import NavigationSnapshot, resolve_match_point, take_snapshot
from perch.routing.override import partition_args

logger = logging.getLogger("perch.sync")


@dataclass(slots=True)
class HandlerRuntimeState:
    """What the synchronizer last applied to one active handler.

    ``generation`` changes every time the handler is (re)activated, so a
    refresh started for an earlier activation can tell it is stale.
    """

    context: Any
    current_query_params: ParameterSet
    generation: int


class TransitionSynchronizer:
    """Query parameter synchronizer wrapping a navigation engine.

    Owns the current query string and the per-handler runtime state.
    Nothing else writes either.
    """

    __slots__ = (
        "_engine",
        "_generations",
        "_idle",
        "_in_flight",
        "_location",
        "_query_string",
        "_stack",
        "_states",
        "_task_group",
        "config",
    )

    def __init__(
        self,
        engine: NavigationEngine,
        location: Location,
        config: SyncConfig | None = None,
    ) -> None:
        self._engine = engine
        self._location = location
        self.config = config or SyncConfig()
        self._query_string = ""
        self._states: dict[str, HandlerRuntimeState] = {}
        self._generations = count(1)
        self._stack: AsyncExitStack | None = None
        self._task_group: TaskGroup | None = None
        self._in_flight = 0
        self._idle: anyio.Event | None = None

    # -- Lifecycle --

    async def __aenter__(self) -> Self:
        if self._stack is not None:
            msg = "TransitionSynchronizer is already running."
            raise RuntimeError(msg)
        stack = AsyncExitStack()
        self._task_group = await stack.enter_async_context(anyio.create_task_group())
        self._stack = stack
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool | None:
        stack, self._stack = self._stack, None
        try:
            if stack is None:
                return None
            return await stack.__aexit__(exc_type, exc, tb)
        finally:
            self._task_group = None

    def _require_running(self) -> TaskGroup:
        if self._task_group is None:
            msg = (
                "TransitionSynchronizer is not running. "
                "Use it as 'async with TransitionSynchronizer(...) as sync:'."
            )
            raise SynchronizerNotRunning(msg)
        return self._task_group

    # -- Query state --

    @property
    def engine(self) -> NavigationEngine:
        return self._engine

    @property
    def location(self) -> Location:
        return self._location

    @property
    def query_string(self) -> str:
        """The current query string, without the leading ``?``."""
        return self._query_string

    @property
    def query_params(self) -> QueryParams:
        """The current query parameters as an immutable view."""
        return QueryParams(self._query_string)

    def set_query_params(self, params: Mapping[str, ParamValue | None]) -> None:
        """Replace the current query parameters. Falsy values are dropped."""
        self._query_string = serialize(merge(params))

    def params_for(self, descriptor: HandlerDescriptor) -> ParameterSet:
        """Return the subset of the current parameters *descriptor* observes.

        Engines call this while activating a handler so its first load
        already sees the right parameters.
        """
        return extract(self.query_params, descriptor.observes)

    def handler_state(self, name: str) -> HandlerRuntimeState | None:
        """Return the runtime state of active handler *name*, if tracked."""
        return self._states.get(name)

    @property
    def pending_refreshes(self) -> int:
        """Number of refreshes dispatched but not yet finished."""
        return self._in_flight

    async def drain(self) -> None:
        """Wait until no refresh is in flight."""
        while self._in_flight:
            if self._idle is None:
                self._idle = anyio.Event()
            await self._idle.wait()

    # -- Navigation --

    async def handle_url(self, url: str) -> None:
        """Navigate to *url*, refreshing handlers whose parameters changed.

        Used for every URL-driven change (back/forward, typed URLs).
        """
        await self._handle_url(url, take_snapshot(self._engine.active_chain()))

    async def handle_initial_url(self, url: str) -> None:
        """Navigate to the first URL of a session.

        Every active handler is treated as freshly activated: its
        parameters are recorded, nothing is refreshed.
        """
        await self._handle_url(url, ())

    async def _handle_url(self, url: str, snapshot: NavigationSnapshot) -> None:
        self._require_running()
        path, query_string = split_url(url)
        self._query_string = query_string
        logger.debug("Handling URL %s (query %r)", path, query_string)
        await self._engine.navigate_by_path(path)
        self._reconcile(snapshot)

    async def navigate_to(self, target: str, *args: Any) -> None:
        """Navigate to the route named *target*.

        *args* are positional contexts for dynamic handlers, optionally
        preceded by a ``QueryParameterOverride``. Ancestors that survive
        the navigation keep their parameters; the override wins over them.
        Engine failures propagate unchanged.
        """
        self._require_running()
        name, contexts, params = self._partition(target, args)
        self.set_query_params(params)
        snapshot = take_snapshot(self._engine.active_chain())

        await self._engine.navigate_by_target(name, contexts)
        self._reconcile(snapshot)

        # The engine writes its own URL; replace whatever query it emitted
        path, _ = split_url(self._location.get_url())
        self._location.set_url(join_url(path, self._query_string))

    def generate_url(self, target: str, *args: Any) -> str:
        """Return the URL ``navigate_to(target, *args)`` would produce.

        Performs no navigation and mutates no state.
        """
        name, contexts, params = self._partition(target, args)
        return join_url(self._engine.generate_url(name, contexts), serialize(params))

    def _partition(
        self, target: str, args: Sequence[Any],
    ) -> tuple[str, tuple[Any, ...], ParameterSet]:
        """Resolve the real target, the contexts, and the merged parameters."""
        overrides, contexts = partition_args(args)
        if not self._engine.has_route(target):
            target += self.config.index_suffix

        chain = self._engine.resolve_chain(target)
        live = self._engine.active_chain()
        match_point = resolve_match_point(
            chain,
            take_snapshot(live),
            contexts,
            conservative=self.config.conservative_match,
        )

        inherited: list[ParameterSet] = []
        for entry in live[:match_point]:
            state = self._states.get(entry.name)
            if state is not None:
                inherited.append(state.current_query_params)
        return target, contexts, merge(*inherited, overrides)

    # -- Reconciliation --

    def _reconcile(self, snapshot: NavigationSnapshot) -> None:
        """Record or refresh the parameters of every active handler."""
        chain = self._engine.active_chain()
        active_names = {entry.name for entry in chain}
        for name in [name for name in self._states if name not in active_names]:
            del self._states[name]

        merged = self.query_params
        for i, entry in enumerate(chain):
            observes = entry.observes
            refresh = refresh_capability(entry)
            if observes == "none" or refresh is None:
                continue

            params = extract(merged, observes)
            previous = snapshot[i] if i < len(snapshot) else None
            state = self._states.get(entry.name)

            if (
                state is None
                or previous is None
                or previous.name != entry.name
                or previous.context is not entry.context
            ):
                # Activated by this navigation with the current parameters
                self._states[entry.name] = HandlerRuntimeState(
                    context=entry.context,
                    current_query_params=params,
                    generation=next(self._generations),
                )
                continue

            if not differs(state.current_query_params, params):
                continue

            state.current_query_params = params
            self._dispatch_refresh(entry, state.generation, refresh, params)

    def _dispatch_refresh(
        self,
        entry: ActiveHandler,
        generation: int,
        refresh: Capability,
        params: ParameterSet,
    ) -> None:
        task_group = self._require_running()
        logger.debug("Refreshing %s with %r", entry.name, params)
        self._in_flight += 1
        task_group.start_soon(
            self._refresh, entry, generation, refresh, dict(params),
            name=f"perch-refresh:{entry.name}",
        )

    async def _refresh(
        self,
        entry: ActiveHandler,
        generation: int,
        refresh: Capability,
        params: ParameterSet,
    ) -> None:
        """Reload one handler's context, then bind and apply it."""
        try:
            try:
                value = await invoke(refresh, params)
                self._bind(entry, generation, value)
                await self._apply(entry, value)
            except Exception:
                if self.config.propagate_refresh_errors:
                    raise
                logger.exception(
                    "Refresh of %s failed; keeping its previous context", entry.name,
                )
        finally:
            self._in_flight -= 1
            if not self._in_flight and self._idle is not None:
                self._idle.set()
                self._idle = None

    def _bind(self, entry: ActiveHandler, generation: int, value: Any) -> None:
        state = self._states.get(entry.name)
        if state is not None and state.generation == generation:
            state.context = value
        else:
            logger.debug("%s was deactivated while refreshing; applying anyway", entry.name)

    async def _apply(self, entry: ActiveHandler, value: Any) -> None:
        on_changed = getattr(entry.handler, "on_context_changed", None)
        if callable(on_changed):
            await invoke(on_changed)
        apply_context = getattr(entry.handler, "apply_context", None)
        if callable(apply_context):
            await invoke(apply_context, entry.controller, value)
