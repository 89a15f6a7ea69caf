"""
Schema boundary: SchemaHandle, FieldSpec and schema loading.

A SchemaHandle yields an ordered, immutable field list and a validator.
Lifecycles treat the field list as opaque data; they never special-case a
field name.

DataclassSchema discovers fields from a dataclass, the same way a form is
built from a config object: one field per dataclass field, with the label
and input kind taken from field metadata when present.

    @dataclass
    class Person:
        name: str = field(metadata={'label': 'Full name'})
        age: int = 0
        bio: str = field(default='', metadata={'kind': 'textarea'})
"""
import dataclasses
import importlib
import inspect
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union, get_args, get_origin, get_type_hints

from crudstate.config import get_settings
from crudstate.errors import SchemaLoadFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldSpec:
    """One form field as discovered from a schema."""
    name: str
    label: str
    kind: str = 'text'
    required: bool = False
    default: Any = None


FieldList = Tuple[FieldSpec, ...]


class SchemaHandle(ABC):
    """Loaded schema definition.

    ``validate`` may return a bool or an awaitable bool. ``explain`` returns
    the ordered violation messages for a payload; handles that cannot explain
    themselves return an empty list and the gate falls back to a generic
    message. Objects that only provide ``fields`` and ``validate`` are accepted
    wherever a handle is expected.
    """

    name: str = "schema"

    @abstractmethod
    def fields(self) -> FieldList:
        ...

    @abstractmethod
    def validate(self, payload: Any):
        ...

    def explain(self, payload: Any) -> List[str]:
        return []


_BOOL_STRINGS = {'true', 'false', 'on', 'off', '1', '0', 'yes', 'no'}


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    if isinstance(value, str):
        try:
            float(value)
        except ValueError:
            return False
        return True
    return False


def _is_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return True
    return isinstance(value, str) and value.strip().lower() in _BOOL_STRINGS


def _kind_for_annotation(annotation: Any) -> str:
    # Optional[X] -> X
    if get_origin(annotation) is Union:
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            annotation = args[0]
    if annotation is bool:
        return 'checkbox'
    if annotation in (int, float):
        return 'number'
    return 'text'


class DataclassSchema(SchemaHandle):
    """SchemaHandle backed by a dataclass type."""

    def __init__(self, dataclass_type: type):
        if not (isinstance(dataclass_type, type) and dataclasses.is_dataclass(dataclass_type)):
            raise TypeError(f"DataclassSchema needs a dataclass type, got {dataclass_type!r}")
        self.dataclass_type = dataclass_type
        self.name = dataclass_type.__name__
        self._fields: Optional[FieldList] = None

    def fields(self) -> FieldList:
        if self._fields is None:
            self._fields = self._discover_fields()
        return self._fields

    def _discover_fields(self) -> FieldList:
        try:
            hints = get_type_hints(self.dataclass_type)
        except Exception as e:
            logger.debug(f"Falling back to raw annotations for {self.name}: {e}")
            hints = {}

        discovered = []
        for f in dataclasses.fields(self.dataclass_type):
            annotation = hints.get(f.name, f.type)
            has_default = f.default is not dataclasses.MISSING
            has_factory = f.default_factory is not dataclasses.MISSING
            if has_default:
                default = f.default
            elif has_factory:
                default = f.default_factory()
            else:
                default = None
            discovered.append(FieldSpec(
                name=f.name,
                label=f.metadata.get('label', f.name.replace('_', ' ').capitalize()),
                kind=f.metadata.get('kind', _kind_for_annotation(annotation)),
                required=f.metadata.get('required', not (has_default or has_factory)),
                default=default,
            ))
        return tuple(discovered)

    def explain(self, payload: Any) -> List[str]:
        if not isinstance(payload, Mapping):
            return [f"Expected a mapping payload, got {type(payload).__name__}"]

        settings = get_settings()
        errors = []
        for spec in self.fields():
            value = payload.get(spec.name)
            if _is_empty(value):
                if spec.required:
                    errors.append(settings.required_template.format(label=spec.label, name=spec.name))
                continue
            if spec.kind == 'number' and not _is_number(value):
                errors.append(settings.number_template.format(label=spec.label, name=spec.name))
            elif spec.kind == 'checkbox' and not _is_boolean(value):
                errors.append(settings.boolean_template.format(label=spec.label, name=spec.name))
        return errors

    def validate(self, payload: Any) -> bool:
        return not self.explain(payload)

    def __repr__(self) -> str:
        return f"DataclassSchema({self.name})"


# ========== LOADING ==========

# identifier -> SchemaHandle, dataclass type, or loader callable (sync or async)
_registry: Dict[str, Any] = {}


def register_schema(identifier: str, source: Union[SchemaHandle, type, Callable[[], Any]]) -> None:
    """Make ``identifier`` loadable via load_schema()."""
    if identifier in _registry:
        logger.warning(f"Overwriting registered schema: {identifier}")
    _registry[identifier] = source
    logger.debug(f"Registered schema: {identifier}")


def unregister_schema(identifier: str) -> None:
    _registry.pop(identifier, None)


def clear_schema_registry() -> None:
    _registry.clear()


def is_schema_handle(obj: Any) -> bool:
    """True for SchemaHandle instances and any object with callable fields() and validate()."""
    if isinstance(obj, SchemaHandle):
        return True
    if isinstance(obj, type):
        return False
    return callable(getattr(obj, 'fields', None)) and callable(getattr(obj, 'validate', None))


def _as_handle(source: Any, identifier: Any) -> SchemaHandle:
    if is_schema_handle(source):
        return source
    if isinstance(source, type) and dataclasses.is_dataclass(source):
        return DataclassSchema(source)
    raise SchemaLoadFailure(identifier, TypeError(f"not a schema: {source!r}"))


def _import_dataclass(identifier: str) -> type:
    module_name, _, qualname = identifier.partition(':')
    obj: Any = importlib.import_module(module_name)
    for attr in qualname.split('.'):
        obj = getattr(obj, attr)
    return obj


async def load_schema(identifier: Any) -> SchemaHandle:
    """Turn an identifier into a SchemaHandle.

    Accepts a SchemaHandle or any object with callable ``fields`` and
    ``validate`` (returned as is), a dataclass type, a registered
    identifier, or an import reference of the form ``package.module:ClassName``.

    Raises:
        SchemaLoadFailure: nothing loadable behind the identifier
    """
    if is_schema_handle(identifier):
        return identifier
    if isinstance(identifier, type):
        return _as_handle(identifier, identifier)
    if not isinstance(identifier, str) or not identifier:
        raise SchemaLoadFailure(identifier, TypeError("schema identifier must be a non-empty string"))

    if identifier in _registry:
        source = _registry[identifier]
        if callable(source) and not isinstance(source, type) and not is_schema_handle(source):
            try:
                source = source()
                if inspect.isawaitable(source):
                    source = await source
            except SchemaLoadFailure:
                raise
            except Exception as e:
                raise SchemaLoadFailure(identifier, e) from e
        return _as_handle(source, identifier)

    if ':' in identifier:
        try:
            source = _import_dataclass(identifier)
        except (ImportError, AttributeError) as e:
            raise SchemaLoadFailure(identifier, e) from e
        logger.debug(f"Imported schema {identifier}")
        return _as_handle(source, identifier)

    raise SchemaLoadFailure(identifier, LookupError("unknown schema identifier"))
