"""Match point resolution between the live chain and a prospective one.

Everything above the match point is an ancestor that survives the
navigation untouched, so its previously applied query parameters must
be carried over. Everything at or below it is (re)activated by the
engine and gets its parameters fresh.

Example, live chain ``[posts, posts.view]``, navigating to
``posts.view`` with one context::

    position 1  posts.view  dynamic, consumes the context  -> diverges
    position 0  posts       same name, static              -> unchanged

    match point = 1  ->  ``posts``'s parameters are preserved
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias

from perch.routing.handler import ActiveHandler, HandlerDescriptor

logger = logging.getLogger("perch.routing")


@dataclass(frozen=True, slots=True)
class ChainEntry:
    """A handler name and the context bound to it at snapshot time."""

    name: str
    context: Any = None


# Root-to-leaf chain captured right before a navigation
NavigationSnapshot: TypeAlias = tuple[ChainEntry, ...]


def take_snapshot(chain: Sequence[ActiveHandler]) -> NavigationSnapshot:
    """Capture ``(name, context)`` for every position of *chain*."""
    return tuple(ChainEntry(entry.name, entry.context) for entry in chain)


def resolve_match_point(
    chain: Sequence[HandlerDescriptor],
    snapshot: Sequence[ChainEntry],
    contexts: Sequence[Any],
    *,
    conservative: bool = True,
) -> int:
    """Return the first chain index at which *chain* diverges from *snapshot*.

    Walks leaf to root. A position diverges when the snapshot has no
    handler there or a different one, or when the handler is dynamic
    and still has a context to consume. Contexts are consumed from the
    end of *contexts*, so the leaf-most dynamic handler takes the last.

    With *conservative* (the default) a consumed context always counts
    as a change, even when it is the context already bound. Otherwise an
    identical (``is``) context at an unchanged position does not.

    Never fails: the result is in ``[0, len(chain)]``, ``len(chain)``
    meaning nothing diverged.
    """
    match_point = len(chain)
    remaining = len(contexts)

    for i in range(len(chain) - 1, -1, -1):
        descriptor = chain[i]
        previous = snapshot[i] if i < len(snapshot) else None
        changed = previous is None or previous.name != descriptor.name

        if descriptor.is_dynamic and remaining:
            remaining -= 1
            context = contexts[remaining]
            if conservative or previous is None or context is not previous.context:
                changed = True

        if changed:
            match_point = i

    logger.debug(
        "Match point for %s: %d of %d",
        chain[-1].name if chain else "<empty>", match_point, len(chain),
    )
    return match_point
