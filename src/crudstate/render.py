"""
Render descriptions for CRUD components.

A render description is a plain nested dict: one tag name mapping to its
attributes, with child nodes under ``children``. Turning it into visible
elements is the host UI layer's job. Buttons carry an ``action`` name the
host sends back through ``component.dispatch(action)``.

    {'div': {'class': 'crud-read', 'children': [{'h2': {'text': 'Item'}}]}}
"""
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional

from crudstate.config import get_settings
from crudstate.schema import FieldSpec

Node = Dict[str, Any]

MAX_SUMMARY_TEXT = 20


def format_value(value: Any) -> str:
    """Display text for a stored value."""
    if value is None or (isinstance(value, str) and not value):
        return get_settings().empty_value_text
    if isinstance(value, Enum):
        return f"{type(value).__name__}.{value.name}"
    if isinstance(value, Mapping):
        return _format_mapping_summary(value)
    return str(value)


def _format_mapping_summary(value: Mapping) -> str:
    parts = []
    for key, item in value.items():
        if item is None:
            continue
        if isinstance(item, str) and len(item) > MAX_SUMMARY_TEXT:
            text = f"{item[:MAX_SUMMARY_TEXT - 3]}..."
        elif isinstance(item, Mapping):
            text = "{...}"
        else:
            text = str(item)
        parts.append(f"{key}={text}")
    return ", ".join(parts) if parts else get_settings().empty_value_text


def field_label(spec: FieldSpec) -> str:
    return spec.label + (' *' if spec.required else '')


def _input_value(spec: FieldSpec, value: Any) -> Any:
    if value is None or value == '':
        return spec.default if spec.default is not None else ''
    return value


def form_field(spec: FieldSpec, value: Any = None, disabled: bool = False) -> Node:
    """Labelled input for one field. Textarea kinds render a textarea."""
    current = _input_value(spec, value)
    if spec.kind == 'textarea':
        control = {'textarea': {
            'id': spec.name,
            'name': spec.name,
            'value': current,
            'required': spec.required,
            'disabled': disabled,
            'class': 'form-input',
        }}
    else:
        attrs = {
            'id': spec.name,
            'name': spec.name,
            'type': spec.kind,
            'required': spec.required,
            'disabled': disabled,
            'class': 'form-input',
        }
        if spec.kind == 'checkbox':
            attrs['checked'] = bool(current)
        else:
            attrs['value'] = current
        control = {'input': attrs}

    return {'div': {
        'class': 'form-field',
        'children': [
            {'label': {'text': field_label(spec), 'for': spec.name}},
            control,
        ],
    }}


def display_field(spec: FieldSpec, value: Any) -> Node:
    """Read-only "Label: value" line."""
    return {'div': {
        'class': 'display-field',
        'children': [
            {'strong': {'text': f"{spec.label}: "}},
            {'span': {'text': format_value(value)}},
        ],
    }}


def heading(text: str) -> Node:
    return {'h2': {'text': text}}


def paragraph(text: str, css_class: Optional[str] = None) -> Node:
    attrs = {'text': text}
    if css_class:
        attrs['class'] = css_class
    return {'p': attrs}


def error_list(errors: Iterable[str]) -> Optional[Node]:
    """Error block, or None when there is nothing to show."""
    errors = list(errors)
    if not errors:
        return None
    return {'div': {
        'class': 'error-messages',
        'children': [paragraph(e, 'error') for e in errors],
    }}


def button(text: str, action: str, kind: str = 'primary', button_type: str = 'button') -> Node:
    return {'button': {
        'type': button_type,
        'text': text,
        'class': f"btn btn-{kind}",
        'action': action,
    }}


def actions(*buttons: Node) -> Node:
    return container('form-actions', buttons)


def no_data() -> List[Node]:
    return [paragraph(get_settings().no_data_text, 'no-data')]


def container(css_class: str, children: Iterable[Optional[Node]], tag: str = 'div', **attrs) -> Node:
    """Wrap children, dropping None entries."""
    node_attrs = {'class': css_class, **attrs}
    node_attrs['children'] = [c for c in children if c is not None]
    return {tag: node_attrs}


def field_value(data: Any, name: str) -> Any:
    """Value of one field from a loaded mapping or object."""
    if isinstance(data, Mapping):
        return data.get(name)
    return getattr(data, name, None)
