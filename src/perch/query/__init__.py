"""Query parameters: flat codec, projection, and comparison.

Everything here is a total function over well-formed input; nothing
touches synchronizer state.
"""

from perch.query.codec import deserialize, join_url, serialize, split_url
from perch.query.diff import differs
from perch.query.extract import extract, normalize_observes
from perch.query.params import QueryParams, compact, merge

__all__ = [
    "QueryParams",
    "compact",
    "deserialize",
    "differs",
    "extract",
    "join_url",
    "merge",
    "normalize_observes",
    "serialize",
    "split_url",
]
