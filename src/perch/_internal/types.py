"""Shared type aliases used across perch modules."""

from collections.abc import Callable
from typing import Any, Literal, TypeAlias

# A single query value: a string, or True for a bare flag
ParamValue: TypeAlias = str | bool

# Flat query parameter map. Only truthy values are ever stored.
ParameterSet: TypeAlias = dict[str, ParamValue]

# Normalized interest declaration of a handler
Observes: TypeAlias = Literal["all", "none"] | frozenset[str]

# Handler capability: user-defined method with variable signature
Capability: TypeAlias = Callable[..., Any]
