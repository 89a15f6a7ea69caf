"""
Slot abstraction for terminal store locations.

A terminal location is either plain data or an accessor slot. Accessor slots
are readable like a value, but writes are routed through their own writer so
that whatever reactivity the host wired onto the slot stays attached.

The store keeps raw plain values directly in its mappings (that is what a
host hands us via ``from_dict`` or a pre-built root). ``slot_for`` gives both
shapes a uniform tagged view.
"""
import copy
import logging
from dataclasses import dataclass
from typing import Any, Callable, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlainSlot:
    """Plain value sitting directly in a mapping."""
    value: Any

    is_accessor = False

    def read(self) -> Any:
        return self.value


class AccessorSlot:
    """Dual slot: read like a value, written through ``write``.

    Once installed at a location the slot object is never replaced; the store
    calls ``write`` instead.
    """

    is_accessor = True

    def __init__(self, reader: Callable[[], Any], writer: Callable[[Any], None]):
        self._reader = reader
        self._writer = writer
        self._subscribers: List[Callable[[Any], None]] = []

    @classmethod
    def holding(cls, value: Any) -> 'AccessorSlot':
        """Create a slot backed by its own private cell."""
        cell = {'value': value}

        def write(new_value: Any) -> None:
            cell['value'] = new_value

        return cls(lambda: cell['value'], write)

    def read(self) -> Any:
        return self._reader()

    def write(self, value: Any) -> None:
        self._writer(value)
        for callback in list(self._subscribers):
            try:
                callback(value)
            except Exception as e:
                logger.warning(f"Error in slot subscriber: {e}")

    def __call__(self, value: Any) -> None:
        self.write(value)

    def subscribe(self, callback: Callable[[Any], None]) -> None:
        """Register a callback fired with the new value after every write."""
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[Any], None]) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def __deepcopy__(self, memo):
        # Snapshot semantics: copying a slot copies its current value only
        return AccessorSlot.holding(copy.deepcopy(self.read(), memo))

    def __repr__(self) -> str:
        return f"AccessorSlot({self.read()!r})"


def is_accessor(raw: Any) -> bool:
    return isinstance(raw, AccessorSlot)


def slot_for(raw: Any):
    """Tagged view of a raw mapping entry."""
    if isinstance(raw, AccessorSlot):
        return raw
    return PlainSlot(raw)


def unwrap(raw: Any) -> Any:
    """Current value of a raw mapping entry, reading through accessor slots."""
    if isinstance(raw, AccessorSlot):
        return raw.read()
    return raw
