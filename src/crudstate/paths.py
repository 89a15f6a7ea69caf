"""
PathResolver: dotted path strings -> locations inside a nested mapping.

Paths are dot-separated segments (``persons.john``). There is no escaping
for literal dots in keys; a key containing a dot cannot be addressed.

``resolve`` reports found / missing / conflict explicitly instead of letting
a ``None`` leak out of a half-finished walk. ``ensure`` builds the mapping
chain a writer needs and refuses to overwrite non-mapping values.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping, MutableMapping, Optional, Tuple, Union

from crudstate.errors import InvalidPath, PathConflict
from crudstate.slots import AccessorSlot, unwrap

logger = logging.getLogger(__name__)

PathLike = Union[str, Iterable[str]]

SEPARATOR = '.'


def parse_path(path: PathLike) -> Tuple[str, ...]:
    """Split a dotted path (or validate a pre-split one) into segments.

    Raises:
        InvalidPath: path is empty or has an empty segment
    """
    if path is None:
        raise InvalidPath(path)
    if isinstance(path, str):
        if not path:
            raise InvalidPath(path)
        segments = tuple(path.split(SEPARATOR))
    else:
        segments = tuple(path)
        if not segments:
            raise InvalidPath(path)
        if not all(isinstance(s, str) for s in segments):
            raise InvalidPath(path, "segments must be strings")
    if any(s == '' for s in segments):
        raise InvalidPath(path, "empty segment")
    return segments


def format_path(segments: Iterable[str]) -> str:
    return SEPARATOR.join(segments)


class ResolveStatus(Enum):
    FOUND = "found"
    MISSING = "missing"
    CONFLICT = "conflict"


@dataclass(frozen=True, eq=False)
class Location:
    """Terminal location: a key inside its parent mapping."""
    parent: MutableMapping
    key: str
    path: Tuple[str, ...]

    @property
    def present(self) -> bool:
        return self.key in self.parent

    @property
    def raw(self) -> Any:
        return self.parent.get(self.key)


@dataclass(frozen=True)
class Resolution:
    status: ResolveStatus
    path: Tuple[str, ...]
    location: Optional[Location] = None
    blocked_at: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.status is ResolveStatus.FOUND

    @property
    def value(self) -> Any:
        """Current terminal value, or None when not found."""
        if not self.found:
            return None
        return unwrap(self.location.raw)


def resolve(root: Mapping, path: PathLike) -> Resolution:
    """Walk ``path`` from ``root`` without creating anything.

    A node that is not a mapping stops the walk immediately; nothing past a
    non-traversable node is ever reported as found. Accessor slots whose
    current value is a mapping are walked through.
    """
    segments = parse_path(path)
    node = root
    for seg in segments[:-1]:
        if seg not in node:
            return Resolution(ResolveStatus.MISSING, segments)
        child = unwrap(node[seg])
        if child is None:
            return Resolution(ResolveStatus.MISSING, segments)
        if not isinstance(child, Mapping):
            return Resolution(ResolveStatus.CONFLICT, segments, blocked_at=seg)
        node = child

    location = Location(node, segments[-1], segments)
    if not location.present:
        return Resolution(ResolveStatus.MISSING, segments, location=location)
    return Resolution(ResolveStatus.FOUND, segments, location=location)


def ensure(root: MutableMapping, path: PathLike) -> Location:
    """Create every missing intermediate mapping and return the terminal location.

    The terminal slot itself is left alone; installing it is the writer's job.
    An intermediate holding None counts as absent and receives a fresh
    mapping (written through the slot when it is an accessor slot).

    Raises:
        InvalidPath: path is empty or malformed
        PathConflict: an intermediate segment holds a non-mapping value
    """
    segments = parse_path(path)
    node = root
    for depth, seg in enumerate(segments[:-1]):
        raw = node.get(seg)
        child = unwrap(raw)
        if child is None:
            if isinstance(raw, AccessorSlot):
                raw.write({})
                child = raw.read()
            else:
                node[seg] = {}
                child = node[seg]
            logger.debug(f"Created intermediate mapping at '{format_path(segments[:depth + 1])}'")
        elif not isinstance(child, MutableMapping):
            raise PathConflict(segments[:depth + 1], seg, child)
        node = child
    return Location(node, segments[-1], segments)
