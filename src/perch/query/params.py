"""Immutable query parameter view and ParameterSet helpers.

``QueryParams`` implements ``Mapping[str, str | bool]`` over a parsed
query string. ``compact()`` and ``merge()`` maintain the ParameterSet
invariant: a key is present only when its value is truthy.
"""

from collections.abc import Iterator, Mapping

from perch._internal.types import ParameterSet, ParamValue
from perch.query.codec import deserialize


def compact(params: Mapping[str, ParamValue]) -> ParameterSet:
    """Return a copy of *params* without falsy values.

    ``False``, ``""`` and ``None`` mean "absent". They are dropped
    rather than stored as explicit markers.
    """
    return {key: value for key, value in params.items() if value}


def merge(*layers: Mapping[str, ParamValue] | None) -> ParameterSet:
    """Merge *layers* left to right (later wins) and compact the result.

    ``None`` layers are skipped, so optional overrides can be passed
    through unchanged::

        merge({"sort": "date"}, {"page": "2"}, None)  -> {"sort": "date", "page": "2"}
        merge({"sort": "date"}, {"sort": False})      -> {}
    """
    merged: dict[str, ParamValue] = {}
    for layer in layers:
        if layer:
            merged.update(layer)
    return compact(merged)


class QueryParams(Mapping[str, ParamValue]):
    """Immutable query parameters.

    Attributes:
        _data: Parsed query string as field name -> value.

    ``__getitem__`` returns the string value, or ``True`` for a flag.
    Blank values (``sort=``) are treated as absent.
    """

    _data: ParameterSet

    __slots__ = ("_data",)

    def __init__(self, query_string: str = "") -> None:
        object.__setattr__(self, "_data", compact(deserialize(query_string)))

    def __getitem__(self, key: str) -> ParamValue:
        return self._data[key]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {v!r}" for k, v in self._data.items())
        return f"QueryParams({{{items}}})"

    def __setattr__(self, name: str, value: object) -> None:
        msg = "QueryParams is immutable"
        raise AttributeError(msg)

    def to_dict(self) -> ParameterSet:
        """Return a mutable copy of the parameters."""
        return dict(self._data)
