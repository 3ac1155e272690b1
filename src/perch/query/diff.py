"""Shallow comparison of parameter sets."""

from collections.abc import Mapping

from perch._internal.types import ParamValue

_MISSING = object()


def differs(a: Mapping[str, ParamValue], b: Mapping[str, ParamValue]) -> bool:
    """Return True if *a* and *b* hold different parameters.

    One level only: key counts must match and every key of *a* must map
    to an equal primitive value in *b*. Values are strings or flags, so
    ``!=`` is the whole comparison. Relies on the ParameterSet invariant
    that keys are never stored with "absent" values.
    """
    if len(a) != len(b):
        return True
    return any(b.get(key, _MISSING) != value for key, value in a.items())
