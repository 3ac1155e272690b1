"""Project a merged parameter set onto a handler's declared interest.

A handler declares which query parameters it observes::

    class Posts:
        observes_parameters = ["sort", "search"]   # explicit names
    class Search:
        observes_parameters = "all"                # every parameter
    class About:
        observes_parameters = "none"               # nothing (the default)

``normalize_observes()`` turns any accepted declaration into the
canonical ``Observes`` form once, at registration time.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from perch._internal.types import Observes, ParameterSet, ParamValue
from perch.errors import ConfigurationError


def normalize_observes(declaration: Any) -> Observes:
    """Normalize an ``observes_parameters`` declaration.

    Accepts ``"all"``, ``"none"``, ``None``, ``True`` (all), ``False``
    (none), or an iterable of parameter names.

    Raises ``ConfigurationError`` for anything else.
    """
    if declaration is None or declaration is False or declaration == "none":
        return "none"
    if declaration is True or declaration == "all":
        return "all"
    if isinstance(declaration, str):
        msg = (
            f"observes_parameters={declaration!r} is ambiguous. "
            f"Use 'all', 'none', or a list of parameter names."
        )
        raise ConfigurationError(msg)
    if isinstance(declaration, Iterable):
        names = frozenset(declaration)
        bad = [name for name in names if not isinstance(name, str)]
        if bad:
            msg = f"observes_parameters names must be strings, got {bad!r}"
            raise ConfigurationError(msg)
        return names
    msg = f"Unsupported observes_parameters declaration: {declaration!r}"
    raise ConfigurationError(msg)


def extract(merged: Mapping[str, ParamValue], interest: Any) -> ParameterSet:
    """Return the part of *merged* a handler with *interest* observes.

    - ``"none"`` (or unset): an empty set
    - ``"all"``: a shallow copy of *merged*
    - explicit names: each requested key present in *merged*, in the
      order *merged* holds them

    This is a projection, never an expansion. Requested keys missing
    from *merged* are omitted, not inserted as empty.
    """
    observes = normalize_observes(interest)
    if observes == "none":
        return {}
    if observes == "all":
        return dict(merged)
    return {key: value for key, value in merged.items() if key in observes}
