"""
ObjectStore: path-addressable in-memory object graph.

The store is a tree of plain dicts. Terminal locations written through
``put`` hold accessor slots; everything a host loads in bulk (``from_dict``
or a pre-built root) stays plain until it is first written.

Lifecycle ownership:
- The application creates one store and injects it into every component.
- Nothing in this package reaches for a process-wide store implicitly.

Thread safety: Not thread-safe (all operations expected on the event loop).
"""
import copy
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, MutableMapping, Optional, Tuple

from crudstate.paths import PathLike, ensure, format_path, resolve
from crudstate.slots import AccessorSlot, is_accessor, unwrap

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[str, Any], None]


class HostStore(ABC):
    """Contract the lifecycles consume: get / put / delete by path.

    Implementations must honour the accessor convention: a put onto a
    location that already holds an accessor slot goes through the slot's
    writer instead of replacing it.
    """

    @abstractmethod
    def get(self, path: PathLike) -> Any:
        """Value at path, or None when any segment is missing."""

    @abstractmethod
    def put(self, path: PathLike, value: Any) -> None:
        """Write value at path, creating intermediate mappings."""

    @abstractmethod
    def delete(self, path: PathLike) -> None:
        """Remove the terminal entry; no-op when the path does not resolve."""

    def exists(self, path: PathLike) -> bool:
        """True iff get(path) is neither missing nor None."""
        return self.get(path) is not None

    def has(self, path: PathLike) -> bool:
        return self.exists(path)


class ObjectStore(HostStore):
    """Default HostStore backed by nested dicts."""

    def __init__(self, root: Optional[MutableMapping] = None):
        self._root: MutableMapping = root if root is not None else {}
        # Observers receive (dotted_path, new_value); new_value is None on delete
        self._on_change_callbacks: List[ChangeCallback] = []

    # ========== OBSERVERS ==========

    def on_change(self, callback: ChangeCallback) -> None:
        """Subscribe to every put/delete on this store."""
        if callback not in self._on_change_callbacks:
            self._on_change_callbacks.append(callback)

    def off_change(self, callback: ChangeCallback) -> None:
        """Unsubscribe from store changes."""
        if callback in self._on_change_callbacks:
            self._on_change_callbacks.remove(callback)

    def _fire_change(self, path: str, value: Any) -> None:
        for callback in list(self._on_change_callbacks):
            try:
                callback(path, value)
            except Exception as e:
                logger.warning(f"Error in store change callback for '{path}': {e}")

    # ========== PATH OPERATIONS ==========

    def get(self, path: PathLike) -> Any:
        """Detached copy of the value at path; None when missing."""
        return _export(resolve(self._root, path).value)

    def put(self, path: PathLike, value: Any) -> None:
        """Write value at path.

        Existing accessor slot: its writer receives the value, the slot stays.
        Anything else: the value is installed wrapped in a new accessor slot,
        so the next write to the same path goes through the writer too.
        Writing the same value twice still notifies observers twice.

        Raises:
            InvalidPath: malformed path
            PathConflict: an intermediate segment holds a non-mapping value
        """
        location = ensure(self._root, path)
        dotted = format_path(location.path)
        existing = location.raw

        if is_accessor(value):
            stored = value
        else:
            stored = copy.deepcopy(value)

        if is_accessor(existing):
            existing.write(unwrap(stored))
            logger.debug(f"Wrote through accessor slot at '{dotted}'")
        elif is_accessor(stored):
            location.parent[location.key] = stored
            logger.debug(f"Installed host accessor slot at '{dotted}'")
        else:
            location.parent[location.key] = AccessorSlot.holding(stored)
            logger.debug(f"Installed accessor slot at '{dotted}'")

        self._fire_change(dotted, unwrap(stored))

    def delete(self, path: PathLike) -> None:
        """Remove the terminal entry. Intermediate mappings are never pruned."""
        resolution = resolve(self._root, path)
        if not resolution.found:
            logger.debug(f"Delete of unresolved path '{format_path(resolution.path)}' ignored")
            return
        location = resolution.location
        del location.parent[location.key]
        dotted = format_path(location.path)
        logger.debug(f"Deleted '{dotted}'")
        self._fire_change(dotted, None)

    def slot(self, path: PathLike) -> Optional[AccessorSlot]:
        """Accessor slot installed at path, if any (for hosts wiring reactivity)."""
        resolution = resolve(self._root, path)
        if resolution.found and is_accessor(resolution.location.raw):
            return resolution.location.raw
        return None

    # ========== INSPECTION ==========

    def keys(self) -> List[Tuple[str, ...]]:
        """Paths of every terminal entry (slots and plain non-mapping values)."""
        result: List[Tuple[str, ...]] = []

        def walk(node: MutableMapping, prefix: Tuple[str, ...]) -> None:
            for key, raw in node.items():
                path = prefix + (key,)
                if isinstance(raw, dict):
                    walk(raw, path)
                else:
                    result.append(path)

        walk(self._root, ())
        return result

    def find(self, predicate: Callable[[Any, Tuple[str, ...]], bool]) -> List[Tuple[Tuple[str, ...], Any]]:
        """(path, value) pairs of terminal entries for which predicate(value, path) holds."""
        matches = []
        for path in self.keys():
            value = self.get(path)
            try:
                if predicate(value, path):
                    matches.append((path, value))
            except Exception as e:
                logger.warning(f"find() predicate failed at '{format_path(path)}': {e}")
        return matches

    def clear(self) -> None:
        self._root.clear()
        logger.debug("Cleared object store")
        self._fire_change("", None)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-able copy of the whole tree with slots unwrapped."""
        return _export(self._root)

    def from_dict(self, data: Dict[str, Any]) -> None:
        """Replace the tree with plain values from data.

        Every terminal entry starts out plain; it becomes an accessor slot on
        its first put.
        """
        self._root.clear()
        self._root.update(copy.deepcopy(data))
        logger.debug(f"Loaded object store with {len(self.keys())} entries")
        self._fire_change("", None)

    def __contains__(self, path: PathLike) -> bool:
        return self.exists(path)

    def __repr__(self) -> str:
        return f"ObjectStore({self.to_dict()!r})"


def _export(node: Any) -> Any:
    value = unwrap(node)
    if isinstance(value, dict):
        return {k: _export(v) for k, v in value.items()}
    return copy.deepcopy(value)
