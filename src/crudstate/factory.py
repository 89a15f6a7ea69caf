"""
CrudFactory: one schema, four independently instantiable components.

    people = crud('myapp.models:Person', store=store)
    UpdatePerson = people.get_update()
    widget = UpdatePerson(path='persons.alice', on_success=print)
    await widget.mount()

Every get_* call returns a fresh ComponentDefinition bound to the same frozen
CrudConfig. Every call of a definition creates a new lifecycle instance with
its own state.
"""
import logging
from typing import Any, Callable, Optional, Type

from crudstate.components import CreateLifecycle, DeleteLifecycle, ReadLifecycle, UpdateLifecycle
from crudstate.context import HostContext
from crudstate.lifecycle import CrudConfig, CrudLifecycle
from crudstate.paths import PathLike
from crudstate.store import HostStore
from crudstate.validation import SchemaCache

logger = logging.getLogger(__name__)


class ComponentDefinition:
    """Instantiable component: call it with props to get a lifecycle instance."""

    def __init__(
        self,
        lifecycle_type: Type[CrudLifecycle],
        config: CrudConfig,
        store: Optional[HostStore] = None,
        cache: Optional[SchemaCache] = None,
    ):
        self.lifecycle_type = lifecycle_type
        self.config = config
        self.store = store
        self.cache = cache

    @property
    def operation(self) -> str:
        return self.lifecycle_type.operation

    def __call__(
        self,
        path: Optional[PathLike] = None,
        on_success: Optional[Callable[[Any], None]] = None,
        on_cancel: Optional[Callable[[], None]] = None,
        *,
        store: Optional[HostStore] = None,
        context: Optional[HostContext] = None,
    ) -> CrudLifecycle:
        return self.lifecycle_type(
            self.config,
            store=store if store is not None else self.store,
            path=path,
            on_success=on_success,
            on_cancel=on_cancel,
            context=context,
            cache=self.cache,
        )

    def __repr__(self) -> str:
        return f"ComponentDefinition({self.operation}, schema={self.config.schema!r})"


class CrudFactory:
    """Binds one schema to the Create/Read/Update/Delete components.

    Args:
        schema: schema reference (identifier, dataclass type or SchemaHandle)
        store: default store injected into instances (overridable per instance)
        cache: schema cache; the shared process cache by default
    """

    def __init__(self, schema: Any, store: Optional[HostStore] = None, cache: Optional[SchemaCache] = None):
        self.config = CrudConfig(schema=schema)
        self.store = store
        self.cache = cache
        logger.debug(f"CrudFactory created for schema {schema!r}")

    def _definition(self, lifecycle_type: Type[CrudLifecycle]) -> ComponentDefinition:
        return ComponentDefinition(lifecycle_type, self.config, self.store, self.cache)

    def get_create(self) -> ComponentDefinition:
        return self._definition(CreateLifecycle)

    def get_read(self) -> ComponentDefinition:
        return self._definition(ReadLifecycle)

    def get_update(self) -> ComponentDefinition:
        return self._definition(UpdateLifecycle)

    def get_delete(self) -> ComponentDefinition:
        return self._definition(DeleteLifecycle)


def crud(schema: Any, store: Optional[HostStore] = None, cache: Optional[SchemaCache] = None) -> CrudFactory:
    """Create the CRUD component factory for a schema."""
    return CrudFactory(schema, store=store, cache=cache)
