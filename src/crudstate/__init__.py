"""
Schema-driven CRUD components over a path-addressable object store.

This package provides the state side of Create/Read/Update/Delete UI
components: a dotted-path object store, a validation gate in front of every
commit, and a per-instance lifecycle state machine that turns user actions
into store writes.

Key Features:
- Dotted-path store access with explicit found/missing/conflict resolution
- Accessor slots: writes to an existing slot go through its writer
- Schema loading memoised once per schema reference
- Per-instance lifecycles with validation, confirmation and cancel flows
- Plain-dict render descriptions for any UI layer

Quick Start:
    >>> import asyncio
    >>> from dataclasses import dataclass
    >>> from crudstate import ObjectStore, OutcomeStatus, crud
    >>> @dataclass
    ... class Person:
    ...     name: str
    >>> store = ObjectStore()
    >>> people = crud(Person, store=store)
    >>> create = people.get_create()(path='persons.new')
    >>> outcome = asyncio.run(create.submit({'name': 'Ada'}))
    >>> outcome.status is OutcomeStatus.COMMITTED
    True
    >>> store.get('persons.new')
    {'name': 'Ada'}

Architecture:
    PathResolver -> ObjectStore -> CrudLifecycle <- ValidationGate <- SchemaHandle
                                        ^
                                   CrudFactory

Modules:
    - paths: dotted path parsing, resolve() and ensure()
    - slots: plain and accessor slots
    - store: HostStore contract and the ObjectStore implementation
    - schema: SchemaHandle, FieldSpec, DataclassSchema, load_schema()
    - validation: ValidationGate and the shared SchemaCache
    - context: per-instance host context (get_state/set_state)
    - lifecycle: the shared state machine, Outcome and LifecycleState
    - components: Create/Read/Update/Delete lifecycles
    - factory: crud() and ComponentDefinition
    - render: render description helpers
    - config: settings and messages
"""

# Errors
from crudstate.errors import (
    CrudError,
    InvalidPath,
    PathConflict,
    StoreUnavailable,
    SchemaLoadFailure,
    ValidationFailure,
    IllegalTransition,
)

# Paths and store
from crudstate.paths import parse_path, format_path, resolve, ensure, Resolution, ResolveStatus, Location
from crudstate.slots import PlainSlot, AccessorSlot
from crudstate.store import HostStore, ObjectStore

# Schema and validation
from crudstate.schema import (
    FieldSpec,
    SchemaHandle,
    DataclassSchema,
    load_schema,
    register_schema,
    unregister_schema,
)
from crudstate.validation import (
    ValidationGate,
    ValidationResult,
    SchemaCache,
    get_schema_cache,
    reset_schema_cache,
    validate,
)

# Host context
from crudstate.context import HostContext, LocalContext

# Lifecycles
from crudstate.lifecycle import CrudConfig, CrudLifecycle, LifecycleState, Mode, Outcome, OutcomeStatus
from crudstate.components import CreateLifecycle, ReadLifecycle, UpdateLifecycle, DeleteLifecycle

# Factory
from crudstate.factory import ComponentDefinition, CrudFactory, crud

# Configuration
from crudstate.config import CrudSettings, get_settings, set_settings, settings_context

__all__ = [
    # Errors
    'CrudError',
    'InvalidPath',
    'PathConflict',
    'StoreUnavailable',
    'SchemaLoadFailure',
    'ValidationFailure',
    'IllegalTransition',
    # Paths and store
    'parse_path',
    'format_path',
    'resolve',
    'ensure',
    'Resolution',
    'ResolveStatus',
    'Location',
    'PlainSlot',
    'AccessorSlot',
    'HostStore',
    'ObjectStore',
    # Schema and validation
    'FieldSpec',
    'SchemaHandle',
    'DataclassSchema',
    'load_schema',
    'register_schema',
    'unregister_schema',
    'ValidationGate',
    'ValidationResult',
    'SchemaCache',
    'get_schema_cache',
    'reset_schema_cache',
    'validate',
    # Host context
    'HostContext',
    'LocalContext',
    # Lifecycles
    'CrudConfig',
    'CrudLifecycle',
    'LifecycleState',
    'Mode',
    'Outcome',
    'OutcomeStatus',
    'CreateLifecycle',
    'ReadLifecycle',
    'UpdateLifecycle',
    'DeleteLifecycle',
    # Factory
    'ComponentDefinition',
    'CrudFactory',
    'crud',
    # Configuration
    'CrudSettings',
    'get_settings',
    'set_settings',
    'settings_context',
]

__version__ = '1.0.0'
__description__ = 'Schema-driven CRUD components over a path-addressable object store'
