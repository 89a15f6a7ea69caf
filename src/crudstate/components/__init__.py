"""The four CRUD lifecycle variants."""
from crudstate.components.create import CreateLifecycle
from crudstate.components.read import ReadLifecycle
from crudstate.components.update import UpdateLifecycle
from crudstate.components.delete import DeleteLifecycle

__all__ = [
    'CreateLifecycle',
    'ReadLifecycle',
    'UpdateLifecycle',
    'DeleteLifecycle',
]
