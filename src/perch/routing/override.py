"""Explicit query parameter updates passed through navigation calls.

A ``QueryParameterOverride`` travels as the first positional argument of
``navigate_to()`` / ``generate_url()`` and is stripped before the engine
sees the remaining contexts::

    await sync.navigate_to("posts", QueryParameterOverride.of(sort="date:desc"))
    sync.generate_url("posts.view", QueryParameterOverride.of(page=False), post)

A falsy value removes the parameter from the resulting query.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from perch._internal.types import ParamValue


@dataclass(frozen=True, slots=True)
class QueryParameterOverride:
    """Explicit parameter values that win over inherited ones."""

    params: Mapping[str, ParamValue | None] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Freeze a private copy so later mutation of the caller's dict is not seen
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    @classmethod
    def of(cls, **params: ParamValue | None) -> "QueryParameterOverride":
        """Build an override from keyword arguments."""
        return cls(params)


def partition_args(
    args: Sequence[Any],
) -> tuple[Mapping[str, ParamValue | None] | None, tuple[Any, ...]]:
    """Split navigation arguments into ``(override_params, contexts)``.

    Only the first argument is inspected. ``override_params`` is None
    when no override was given.
    """
    if args and isinstance(args[0], QueryParameterOverride):
        return args[0].params, tuple(args[1:])
    return None, tuple(args)
