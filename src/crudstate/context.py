"""
Host reactive context consumed by lifecycles.

A component instance keeps its LifecycleState in a per-instance key/value
context supplied by the host runtime. LocalContext is the in-memory version
used when the host does not supply one (and in tests).
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class HostContext(ABC):
    """get_state / set_state scoped to one mounted component instance."""

    @abstractmethod
    def get_state(self, key: str, default: Any = None) -> Any:
        ...

    @abstractmethod
    def set_state(self, key: str, value: Any) -> None:
        ...


class LocalContext(HostContext):
    """Dict-backed context with change subscribers.

    Subscribers receive (key, value) after every set_state, which is where a
    host would schedule a re-render.
    """

    def __init__(self, initial: Dict[str, Any] = None):
        self._values: Dict[str, Any] = dict(initial or {})
        self._on_state_changed_callbacks: List[Callable[[str, Any], None]] = []

    def get_state(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set_state(self, key: str, value: Any) -> None:
        self._values[key] = value
        for callback in list(self._on_state_changed_callbacks):
            try:
                callback(key, value)
            except Exception as e:
                logger.warning(f"Error in state_changed callback for {key!r}: {e}")

    def on_state_changed(self, callback: Callable[[str, Any], None]) -> None:
        if callback not in self._on_state_changed_callbacks:
            self._on_state_changed_callbacks.append(callback)

    def off_state_changed(self, callback: Callable[[str, Any], None]) -> None:
        if callback in self._on_state_changed_callbacks:
            self._on_state_changed_callbacks.remove(callback)

    def snapshot(self) -> Dict[str, Any]:
        return dict(self._values)
