"""
Error taxonomy for crudstate.

Store-level code (PathResolver, ObjectStore) raises these exceptions.
Lifecycles and the ValidationGate catch them at their public boundary and
turn them into display-ready error lists, so a caller of a component never
sees one escape.
"""
from typing import List, Optional, Sequence


class CrudError(Exception):
    """Base class for every error raised by crudstate."""


class InvalidPath(CrudError, ValueError):
    """Path is empty or contains an empty segment (e.g. ``"a..b"``)."""

    def __init__(self, path: object, reason: str = "empty path"):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid store path {path!r}: {reason}")


class PathConflict(CrudError):
    """An intermediate path segment holds a value that is not a mapping.

    Fatal for the operation that hit it. Never retried, never coerced.
    """

    def __init__(self, path: Sequence[str], segment: str, found: object):
        self.path = tuple(path)
        self.segment = segment
        self.found = found
        super().__init__(
            f"Cannot traverse '{'.'.join(self.path)}': segment '{segment}' "
            f"holds {type(found).__name__}, not a mapping"
        )


class StoreUnavailable(CrudError):
    """Host store collaborator was not supplied to the component."""


class SchemaLoadFailure(CrudError):
    """Schema identifier could not be turned into a SchemaHandle."""

    def __init__(self, identifier: object, cause: Optional[BaseException] = None):
        self.identifier = identifier
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to load schema {identifier!r}{detail}")


class ValidationFailure(CrudError):
    """Payload was rejected by the schema. Carries the ordered messages."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Validation failed")


class IllegalTransition(CrudError):
    """Lifecycle was asked to move between two modes its table does not allow."""

    def __init__(self, operation: str, src: object, dst: object):
        self.operation = operation
        self.src = src
        self.dst = dst
        super().__init__(f"Illegal {operation} transition: {src} -> {dst}")
