"""Flat query string codec.

Converts between a ``ParameterSet`` and the query component of a URL::

    serialize({"sort": "date:asc", "draft": True})  -> "sort=date%3Aasc&draft"
    deserialize("sort=date%3Aasc&draft")            -> {"sort": "date:asc", "draft": True}

Keys and values are percent-encoded with the same safe set as
JavaScript's ``encodeURIComponent``, so URLs produced here match what a
browser-side router would produce for the same parameters. A key
without ``=`` is a boolean flag. Values are never coerced: ``"2"``
stays a string.
"""

from collections.abc import Mapping
from urllib.parse import quote, unquote

from perch._internal.types import ParameterSet, ParamValue

# Characters encodeURIComponent leaves untouched besides alphanumerics and "_.-"
_SAFE = "!~*'()"


def _encode(text: str) -> str:
    return quote(text, safe=_SAFE)


def serialize(params: Mapping[str, ParamValue]) -> str:
    """Serialize *params* into a query string (without the leading ``?``).

    Falsy values are skipped entirely, no ``key=`` is emitted.
    ``True`` emits the bare key as a flag. Insertion order is kept.

    Raises ``TypeError`` for a truthy value that is neither ``str`` nor
    ``bool``; query values are flat strings and flags only.
    """
    parts: list[str] = []
    for key, value in params.items():
        if not value:
            continue
        if value is True:
            parts.append(_encode(key))
        elif isinstance(value, str):
            parts.append(f"{_encode(key)}={_encode(value)}")
        else:
            msg = (
                f"Query parameter {key!r} has unsupported value {value!r} "
                f"({type(value).__name__}); expected str or True."
            )
            raise TypeError(msg)
    return "&".join(parts)


def deserialize(query_string: str) -> ParameterSet:
    """Parse a query string into a ``ParameterSet``.

    Empty segments are ignored. Each segment is split on its first
    ``=``; a segment without ``=`` becomes a ``True`` flag. A leading
    ``?`` is tolerated. Later duplicates overwrite earlier ones.
    """
    params: ParameterSet = {}
    for pair in query_string.removeprefix("?").split("&"):
        if not pair:
            continue
        key, sep, value = pair.partition("=")
        params[unquote(key)] = unquote(value) if sep else True
    return params


def split_url(url: str) -> tuple[str, str]:
    """Split *url* into ``(path, query_string)`` on the first ``?``."""
    path, _, query_string = url.partition("?")
    return path, query_string


def join_url(path: str, query_string: str) -> str:
    """Append ``?query_string`` to *path* when the query is non-empty."""
    if query_string:
        return f"{path}?{query_string}"
    return path
