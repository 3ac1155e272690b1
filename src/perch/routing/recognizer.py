"""Trie-based path recognizer and URL generator for named routes.

Route paths are parsed into segments once at registration. Recognition
walks the trie in O(path-depth); generation substitutes parameters back
into the registered pattern.

Used by the reference engine in ``perch.testing``; the synchronizer
itself never parses paths.
"""

from dataclasses import dataclass
from urllib.parse import quote, unquote

from perch.errors import ConfigurationError, UnknownRouteError


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/posts``       (is_param=False)
    Param:   ``/{post_id}``   (is_param=True, param_name="post_id")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None


@dataclass(frozen=True, slots=True)
class Recognition:
    """Result of a successful path recognition."""

    name: str
    params: dict[str, str]


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/posts"            -> [PathSegment("posts")]
        "/posts/{post_id}"  -> [PathSegment("posts"), PathSegment("{post_id}", is_param=True, ...)]

    Raises ``ConfigurationError`` for ``<param>`` placeholders.
    """
    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if part.startswith("<") and part.endswith(">"):
            msg = (
                f"Route path {path!r} uses <param> placeholders; "
                f"perch expects {{param}} (e.g. /posts/{{post_id}})."
            )
            raise ConfigurationError(msg)
        if part.startswith("{") and part.endswith("}"):
            segments.append(PathSegment(value=part, is_param=True, param_name=part[1:-1]))
        else:
            segments.append(PathSegment(value=part))
    return segments


class _TrieNode:
    """A node in the route trie."""

    __slots__ = ("children", "name", "param_child")

    def __init__(self) -> None:
        # Static segment children: "posts" -> node
        self.children: dict[str, _TrieNode] = {}
        # Single parameter child (only one param pattern per level)
        self.param_child: _ParamEdge | None = None
        # Route name terminating at this node
        self.name: str | None = None


@dataclass(slots=True)
class _ParamEdge:
    """A parameter edge in the trie."""

    param_name: str
    node: _TrieNode


class Recognizer:
    """Named route table with trie-based path matching.

    Usage::

        r = Recognizer()
        r.add("posts", "/posts")
        r.add("posts.view", "/posts/{post_id}")
        r.recognize("/posts/42")       # Recognition("posts.view", {"post_id": "42"})
        r.generate("posts.view", {"post_id": "42"})   # "/posts/42"
    """

    __slots__ = ("_paths", "_root")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._paths: dict[str, list[PathSegment]] = {}

    def add(self, name: str, path: str) -> list[PathSegment]:
        """Register *path* under *name*. Returns the parsed segments.

        Raises ``ConfigurationError`` if the name or the path is taken.
        """
        if name in self._paths:
            msg = f"Route {name!r} is already registered."
            raise ConfigurationError(msg)

        segments = parse_path(path)
        node = self._root

        for seg in segments:
            if seg.is_param:
                if node.param_child is None:
                    node.param_child = _ParamEdge(
                        param_name=seg.param_name or "", node=_TrieNode(),
                    )
                elif node.param_child.param_name != seg.param_name:
                    msg = (
                        f"Route {name!r} names parameter {seg.param_name!r} where "
                        f"another route uses {node.param_child.param_name!r}."
                    )
                    raise ConfigurationError(msg)
                node = node.param_child.node
            else:
                node = node.children.setdefault(seg.value, _TrieNode())

        if node.name is not None:
            msg = f"Path {path!r} of route {name!r} is already used by {node.name!r}."
            raise ConfigurationError(msg)
        node.name = name
        self._paths[name] = segments
        return segments

    def __contains__(self, name: object) -> bool:
        return name in self._paths

    @property
    def names(self) -> list[str]:
        """Return all registered route names in registration order."""
        return list(self._paths)

    def param_names(self, name: str) -> tuple[str, ...]:
        """Return the parameter names of route *name*, root to leaf."""
        return tuple(seg.param_name or "" for seg in self._segments(name) if seg.is_param)

    def recognize(self, path: str) -> Recognition:
        """Match *path* against registered routes.

        Raises ``UnknownRouteError`` if no route matches.
        """
        parts = [unquote(p) for p in path.strip("/").split("/") if p]
        result = self._match_node(self._root, parts, 0, {})
        if result is None:
            raise UnknownRouteError(path)
        name, params = result
        return Recognition(name=name, params=params)

    def generate(self, name: str, params: dict[str, str]) -> str:
        """Build the path of route *name* from *params*.

        Raises ``UnknownRouteError`` for an unknown name and ``KeyError``
        for a missing parameter.
        """
        parts: list[str] = []
        for seg in self._segments(name):
            if seg.is_param:
                parts.append(quote(str(params[seg.param_name or ""]), safe=""))
            else:
                parts.append(seg.value)
        return "/" + "/".join(parts)

    def _segments(self, name: str) -> list[PathSegment]:
        try:
            return self._paths[name]
        except KeyError:
            raise UnknownRouteError(name) from None

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        params: dict[str, str],
    ) -> tuple[str, dict[str, str]] | None:
        """Recursively match path parts against the trie."""
        # All parts consumed: return this node's route
        if index == len(parts):
            if node.name is not None:
                return node.name, params
            return None

        part = parts[index]

        # 1. Try static child first (exact match)
        if part in node.children:
            result = self._match_node(node.children[part], parts, index + 1, params)
            if result is not None:
                return result

        # 2. Try parameter child
        if node.param_child is not None:
            edge = node.param_child
            new_params = {**params, edge.param_name: part}
            return self._match_node(edge.node, parts, index + 1, new_params)

        return None
