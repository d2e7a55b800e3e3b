"""
JSON Pointer (RFC 6901) evaluation.

A ``Pointer`` is parsed once from a path string and can then be evaluated
against any number of documents; it never holds a reference to a document.

Resolution walks every segment but the last to find the *parent* container.
Consumers then ask ``locate`` for a found/not-found ``Location`` instead of
catching lookup errors:

    ptr = Pointer.parse("/a/b/0")
    loc = ptr.locate(doc)
    if loc.exists:
        value.get(loc.container, loc.key)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional, Tuple, Union

from . import value as values
from .errors import PointerError


def escape_segment(segment: str) -> str:
    return segment.replace("~", "~0").replace("/", "~1")


def unescape_segment(segment: str) -> str:
    # Order matters: "~01" must decode to "~1", not "/".
    return segment.replace("~1", "/").replace("~0", "~")


def fix_key(container: Any, key: str) -> Union[str, int]:
    """
    Reinterpret a pointer segment for the container it addresses.

    Arrays need an integer index inside ``[0, len)``; the append marker is not
    accepted here. Object keys are returned unchanged.
    """
    if isinstance(container, list):
        try:
            idx = values.parse_index(key)
        except KeyError:
            raise PointerError(f"invalid array index: {key!r}") from None
        if idx >= len(container):
            raise PointerError(f"array index out of range: {key!r}")
        return idx
    if isinstance(container, dict):
        return key
    raise PointerError(f"cannot index into {type(container).__name__} with {key!r}")


@dataclass(frozen=True)
class Location:
    """Outcome of resolving a pointer: the parent container and fixed key, when found."""

    container: Any
    key: Optional[Union[str, int]]
    exists: bool


@dataclass(frozen=True)
class Pointer:
    path: str
    parts: Tuple[str, ...]
    last: Optional[str]
    well_formed: bool = True

    @classmethod
    def parse(cls, path: str) -> "Pointer":
        if not isinstance(path, str):
            raise PointerError(f"pointer must be a string, got {type(path).__name__}")
        if path == "":
            return cls(path=path, parts=(), last=None)
        segments = [unescape_segment(s) for s in path.split("/")[1:]]
        last = segments.pop() if segments else ""
        return cls(path=path, parts=tuple(segments), last=last, well_formed=path.startswith("/"))

    @classmethod
    def from_parts(cls, segments: Iterable[Union[str, int]]) -> "Pointer":
        escaped = [escape_segment(str(s)) for s in segments]
        return cls.parse("/" + "/".join(escaped) if escaped else "")

    @property
    def is_root(self) -> bool:
        return self.well_formed and self.last is None

    def __str__(self) -> str:
        return self.path

    def _check(self) -> None:
        if not self.well_formed:
            raise PointerError(f"invalid JSON Pointer (must start with '/'): {self.path!r}", path=self.path)

    def parent(self, root: Any) -> Any:
        """
        Return the container the last segment lives in.

        A missing object member along the way yields ``None`` for that step; a
        later step into that ``None`` fails. Raises ``PointerError`` for
        malformed paths, bad array indexes and descents into scalars.
        """
        self._check()
        if self.last is None:
            raise PointerError("the document root has no parent", path=self.path)
        node = root
        for segment in self.parts:
            if isinstance(node, list):
                node = node[fix_key(node, segment)]
            elif isinstance(node, dict):
                node = node.get(segment)
            else:
                raise PointerError(f"cannot descend into {type(node).__name__} at {segment!r}", path=self.path)
        return node

    def locate(self, root: Any) -> Location:
        if self.last is None:
            return Location(container=None, key=None, exists=self.well_formed)
        try:
            container = self.parent(root)
        except PointerError:
            return Location(container=None, key=None, exists=False)
        if isinstance(container, (dict, list)) and values.contains(container, self.last):
            return Location(container=container, key=fix_key(container, self.last), exists=True)
        return Location(container=container, key=None, exists=False)

    def exists(self, root: Any) -> bool:
        return self.locate(root).exists

    def value(self, root: Any) -> Any:
        """Value at the pointer, or ``None`` when absent (indistinguishable from null)."""
        if self.is_root:
            return root
        loc = self.locate(root)
        if not loc.exists:
            return None
        return values.get(loc.container, loc.key)

    def value_with_fail(self, root: Any) -> Any:
        if not self.exists(root):
            raise PointerError(f"path does not exist: {self.path!r}", path=self.path)
        return self.value(root)

    def walk(self, root: Any) -> Iterator[Tuple[str, Any]]:
        """
        Yield ``(segment, value)`` for each step down the path.

        Stops after the first step that yields ``None``. Given
        ``{"a": {"b": 1}}`` and ``/a/b`` this yields ``("a", {"b": 1})`` then
        ``("b", 1)``.
        """
        self._check()
        node = root
        for segment in self.parts:
            node = _child(node, segment)
            yield segment, node
            if node is None:
                return
        if self.last is not None:
            yield self.last, _child(node, self.last)


def _child(node: Any, segment: str) -> Any:
    if values.is_container(node) and values.contains(node, segment):
        return values.get(node, segment)
    return None


def resolve(document: Any, path: str) -> Any:
    return Pointer.parse(path).value_with_fail(document)


__all__ = [
    "Location",
    "Pointer",
    "escape_segment",
    "fix_key",
    "resolve",
    "unescape_segment",
]
