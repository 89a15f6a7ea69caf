"""
CrudLifecycle: the per-instance state machine behind every CRUD component.

One lifecycle instance per mounted component. Its state (mode, loaded data,
errors, in-progress form values) lives in the instance's host context and is
never shared, even between two instances that target the same store path.

Mode graph (each variant allows a subset, see the TRANSITIONS tables):

    IDLE <-> LOADED -> EDITING -> SUBMITTING -> LOADED          (update)
                    -> CONFIRM_PENDING -> SUBMITTING -> IDLE    (delete)
    IDLE -> SUBMITTING -> IDLE                                   (create)

A failed submission goes back to the mode it came from with ``errors``
populated; that is the recoverable error state. Only one commit per instance
is in flight: while SUBMITTING, further submissions are ignored. A started
commit always runs to completion.

Public operations never raise. They return an Outcome.
"""
import copy
import inspect
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional, Tuple

from crudstate import render
from crudstate.render import Node
from crudstate.config import get_settings
from crudstate.context import HostContext, LocalContext
from crudstate.errors import CrudError, IllegalTransition, InvalidPath, StoreUnavailable, ValidationFailure
from crudstate.paths import PathLike
from crudstate.schema import FieldList
from crudstate.store import HostStore
from crudstate.validation import SchemaCache, ValidationGate

logger = logging.getLogger(__name__)

# Host context keys
STATE_MODE = 'mode'
STATE_DATA = 'object_data'
STATE_ERRORS = 'form_errors'
STATE_FORM = 'form_data'
STATE_PATH = 'state_path'


class Mode(Enum):
    IDLE = "idle"
    LOADED = "loaded"
    EDITING = "editing"
    CONFIRM_PENDING = "confirm_pending"
    SUBMITTING = "submitting"


class OutcomeStatus(Enum):
    COMMITTED = "committed"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    IGNORED = "ignored"
    CHANGED = "changed"


@dataclass(frozen=True)
class Outcome:
    """Result of a lifecycle operation."""
    status: OutcomeStatus
    payload: Any = None
    errors: Tuple[str, ...] = ()
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status not in (OutcomeStatus.REJECTED, OutcomeStatus.IGNORED)

    @classmethod
    def commit(cls, payload: Any) -> 'Outcome':
        return cls(OutcomeStatus.COMMITTED, payload=payload)

    @classmethod
    def reject(cls, errors) -> 'Outcome':
        return cls(OutcomeStatus.REJECTED, errors=tuple(errors))

    @classmethod
    def cancel(cls) -> 'Outcome':
        return cls(OutcomeStatus.CANCELLED)

    @classmethod
    def ignore(cls, reason: str) -> 'Outcome':
        return cls(OutcomeStatus.IGNORED, reason=reason)

    @classmethod
    def change(cls, payload: Any = None) -> 'Outcome':
        return cls(OutcomeStatus.CHANGED, payload=payload)


@dataclass(frozen=True)
class CrudConfig:
    """Shared, immutable configuration of the four generated components."""
    schema: Any


@dataclass(frozen=True)
class LifecycleState:
    """Immutable view of one instance's state at a point in time."""
    mode: Mode
    current_data: Any = None
    errors: Tuple[str, ...] = ()
    form: Mapping[str, Any] = field(default_factory=dict)


class CrudLifecycle:
    """Shared behaviour of the Create/Read/Update/Delete lifecycles.

    Args:
        config: CrudConfig shared with sibling components (never mutated)
        store: HostStore to read from and commit to (injected, never looked up)
        path: store path the instance targets; enhance() may override it
        on_success: called with the committed payload (None for delete)
        on_cancel: called when the user cancels
        context: per-instance host context; a fresh LocalContext by default
        cache: schema cache; the shared process cache by default
    """

    operation = 'base'
    title = ''
    TRANSITIONS: FrozenSet[Tuple[Mode, Mode]] = frozenset()

    def __init__(
        self,
        config: CrudConfig,
        store: Optional[HostStore] = None,
        path: Optional[PathLike] = None,
        on_success: Optional[Callable[[Any], None]] = None,
        on_cancel: Optional[Callable[[], None]] = None,
        context: Optional[HostContext] = None,
        cache: Optional[SchemaCache] = None,
    ):
        self.config = config
        self.store = store
        self.path = path
        self.on_success = on_success
        self.on_cancel = on_cancel
        self.context = context if context is not None else LocalContext()
        self.gate = ValidationGate(config.schema, cache)
        self._fields: FieldList = ()

        if self.context.get_state(STATE_MODE) is None:
            self.context.set_state(STATE_MODE, Mode.IDLE)
            self.context.set_state(STATE_DATA, None)
            self.context.set_state(STATE_ERRORS, [])
            self.context.set_state(STATE_FORM, {})

    # ========== STATE ACCESS ==========

    @property
    def mode(self) -> Mode:
        return self.context.get_state(STATE_MODE, Mode.IDLE)

    @property
    def errors(self) -> List[str]:
        return list(self.context.get_state(STATE_ERRORS, []))

    @property
    def current_data(self) -> Any:
        return copy.deepcopy(self.context.get_state(STATE_DATA))

    @property
    def form(self) -> Dict[str, Any]:
        return copy.deepcopy(self.context.get_state(STATE_FORM, {}))

    @property
    def fields(self) -> FieldList:
        return self._fields

    @property
    def target_path(self) -> Optional[PathLike]:
        """Path bound by enhance(), falling back to the path prop."""
        return self.context.get_state(STATE_PATH) or self.path

    @property
    def state(self) -> LifecycleState:
        return LifecycleState(
            mode=self.mode,
            current_data=self.current_data,
            errors=tuple(self.errors),
            form=self.form,
        )

    def _set_data(self, data: Any) -> None:
        self.context.set_state(STATE_DATA, copy.deepcopy(data))

    def _set_form(self, form: Mapping[str, Any]) -> None:
        self.context.set_state(STATE_FORM, copy.deepcopy(dict(form)))

    def _set_errors(self, errors) -> None:
        self.context.set_state(STATE_ERRORS, list(errors))

    def _clear_errors(self) -> None:
        self.context.set_state(STATE_ERRORS, [])

    # ========== TRANSITIONS ==========

    def can_transition(self, dst: Mode) -> bool:
        src = self.mode
        return src == dst or (src, dst) in self.TRANSITIONS

    def _transition(self, dst: Mode) -> None:
        src = self.mode
        if not self.can_transition(dst):
            raise IllegalTransition(self.operation, src.value, dst.value)
        if src != dst:
            logger.debug(f"{self.operation}: {src.value} -> {dst.value} (path={self.target_path!r})")
        self.context.set_state(STATE_MODE, dst)

    def _ignore(self, action: str) -> Outcome:
        reason = f"{action} not available while {self.mode.value}"
        logger.warning(f"{self.operation}: {reason}")
        return Outcome.ignore(reason)

    # ========== COLLABORATORS ==========

    def _require_target(self) -> Tuple[HostStore, PathLike]:
        settings = get_settings()
        if self.store is None:
            raise StoreUnavailable(settings.store_unavailable)
        path = self.target_path
        if not path:
            raise InvalidPath(path, settings.path_missing)
        return self.store, path

    @staticmethod
    def _error_messages(exc: Exception) -> List[str]:
        if isinstance(exc, ValidationFailure):
            return exc.errors
        if isinstance(exc, InvalidPath) and not exc.path:
            return [get_settings().path_missing]
        return [str(exc) or type(exc).__name__]

    def _fire_success(self, payload: Any) -> None:
        if self.on_success is None:
            return
        try:
            self.on_success(copy.deepcopy(payload))
        except Exception as e:
            logger.warning(f"Error in {self.operation} on_success callback: {e}")

    def _fire_cancel(self) -> None:
        if self.on_cancel is None:
            return
        try:
            self.on_cancel()
        except Exception as e:
            logger.warning(f"Error in {self.operation} on_cancel callback: {e}")

    # ========== MOUNTING ==========

    async def mount(self) -> Outcome:
        """Load the field list and any existing data at the target path."""
        self._fields = await self.gate.fields()
        if self.mode not in (Mode.IDLE, Mode.LOADED):
            return self._ignore("mount")
        try:
            self._load_data()
        except CrudError as e:
            errors = self._error_messages(e)
            self._set_errors(errors)
            return Outcome.reject(errors)
        except Exception as e:
            logger.exception(f"{self.operation}: loading {self.target_path!r} failed")
            errors = self._error_messages(e)
            self._set_errors(errors)
            return Outcome.reject(errors)
        self._clear_errors()
        return Outcome.change(self.current_data)

    def _load_data(self) -> None:
        """Read the target path; None (or missing) means no data."""
        store, path = self._require_target()
        data = store.get(path)
        self._set_data(data)
        self._transition(Mode.IDLE if data is None else Mode.LOADED)

    async def enhance(self, element: Any) -> Outcome:
        """Bind to an externally supplied element carrying the target path."""
        path = element_path(element)
        if path:
            self.context.set_state(STATE_PATH, path)
        else:
            logger.debug(f"{self.operation}: element has no path attribute, using path prop")
        return await self.mount()

    # ========== COMMITTING ==========

    async def _commit(self, payload: Any, *, validate: bool, success_mode: Mode) -> Outcome:
        """Run one SUBMITTING pass: validate, write, notify.

        On any failure the instance returns to the mode it came from, with
        errors set and its previous data untouched.
        """
        if self.mode is Mode.SUBMITTING:
            return self._ignore("submit")
        if not self.can_transition(Mode.SUBMITTING):
            return self._ignore("submit")

        prior = self.mode
        self._transition(Mode.SUBMITTING)
        try:
            if validate:
                result = await self.gate.validate(payload)
                if not result.valid:
                    raise ValidationFailure(list(result.errors))
            store, path = self._require_target()
            store.put(path, payload)
        except CrudError as e:
            errors = self._error_messages(e)
            logger.debug(f"{self.operation}: commit rejected: {errors}")
            self._transition(prior)
            self._set_errors(errors)
            return Outcome.reject(errors)
        except Exception as e:
            logger.exception(f"{self.operation}: commit to {self.target_path!r} failed")
            errors = self._error_messages(e)
            self._transition(prior)
            self._set_errors(errors)
            return Outcome.reject(errors)

        self._after_commit(payload)
        self._clear_errors()
        self._transition(success_mode)
        self._fire_success(payload)
        return Outcome.commit(copy.deepcopy(payload))

    def _after_commit(self, payload: Any) -> None:
        """Update local state to mirror what was just written."""

    # ========== INTERACTION ==========

    def _form_editable(self) -> bool:
        return False

    def set_field(self, name: str, value: Any) -> Outcome:
        """Record user input for one field of the in-progress form."""
        if not self._form_editable():
            return self._ignore("set_field")
        form = self.form
        form[name] = value
        self._set_form(form)
        return Outcome.change(form)

    def _collect_payload(self) -> Dict[str, Any]:
        """Candidate payload from the in-progress form."""
        return self.form

    def cancel(self) -> Outcome:
        """Abandon the interaction and notify on_cancel. Never touches the store."""
        if self.mode is Mode.SUBMITTING:
            return self._ignore("cancel")
        self._discard_interaction()
        self._fire_cancel()
        return Outcome.cancel()

    def _discard_interaction(self) -> None:
        """Drop in-progress interaction state before on_cancel fires."""

    def actions(self) -> Dict[str, Callable[..., Any]]:
        """Action names used in the render description -> operations."""
        return {'cancel': self.cancel, 'refresh': self.mount}

    async def dispatch(self, action: str, **kwargs) -> Outcome:
        """Run the operation behind an action name from the render description."""
        handler = self.actions().get(action)
        if handler is None:
            logger.warning(f"{self.operation}: unknown action {action!r}")
            return Outcome.ignore(f"unknown action {action!r}")
        result = handler(**kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result

    # ========== RENDERING ==========

    def render(self) -> Node:
        """Render description of the component's current state."""
        children = [render.heading(self.title), render.error_list(self.errors)]
        children.extend(self._render_body())
        return render.container(f"crud-{self.operation}", children)

    def _render_body(self) -> List[Node]:
        return []

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={self.target_path!r}, mode={self.mode.value})"


def element_path(element: Any) -> Optional[str]:
    """First path attribute present on an element.

    Elements may expose ``get_attribute(name)``, ``getAttribute(name)``, be a
    mapping of attributes, or carry such a mapping as ``attrs``.
    """
    if hasattr(element, 'get_attribute'):
        getter = element.get_attribute
    elif hasattr(element, 'getAttribute'):
        getter = element.getAttribute
    elif isinstance(element, Mapping):
        getter = element.get
    else:
        getter = getattr(element, 'attrs', {}).get

    for name in get_settings().path_attributes:
        value = getter(name)
        if value:
            return value
    return None
