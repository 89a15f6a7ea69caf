"""
Settings for crudstate components.

Holds the user-visible messages and the element attribute names that
progressive enhancement looks for. The active settings live in a ContextVar
so a test or a host can scope overrides with ``settings_context()`` without
touching the process-wide default.
"""
import contextvars
import dataclasses
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CrudSettings:
    # Attributes searched, in order, for the store path during enhance()
    path_attributes: Tuple[str, ...] = ('state-path', 'data-state-path', 'StatePath')
    validation_failed: str = "Validation failed"
    validator_unavailable: str = "Validator not available"
    store_unavailable: str = "Object store not available"
    path_missing: str = "State path not specified"
    required_template: str = "{label} is required"
    number_template: str = "{label} must be a number"
    boolean_template: str = "{label} must be true or false"
    no_data_text: str = "No data available"
    empty_value_text: str = "-"
    delete_prompt: str = "Are you sure you want to delete this item?"
    delete_warning: str = "This action cannot be undone. Are you absolutely sure?"


_default_settings = CrudSettings()
_current_settings: contextvars.ContextVar[Optional[CrudSettings]] = contextvars.ContextVar(
    'crudstate_settings', default=None
)


def get_settings() -> CrudSettings:
    """Settings in effect for the current context."""
    current = _current_settings.get()
    return current if current is not None else _default_settings


def set_settings(settings: CrudSettings) -> None:
    """Replace the process-wide default settings."""
    global _default_settings
    _default_settings = settings
    logger.debug(f"Default settings replaced: {settings}")


def reset_settings() -> None:
    set_settings(CrudSettings())


@contextmanager
def settings_context(**overrides):
    """Scope settings overrides to a block.

    Usage:
        with settings_context(validation_failed="Please fix the form"):
            ...
    """
    token = _current_settings.set(dataclasses.replace(get_settings(), **overrides))
    try:
        yield get_settings()
    finally:
        _current_settings.reset(token)
