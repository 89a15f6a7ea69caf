"""
ValidationGate: schema-backed payload checks that never raise.

Schema references (identifier strings, dataclass types or SchemaHandles) are
loaded through a SchemaCache, at most once per reference, and shared by every
component using the same reference. Concurrent first loads await the same
task instead of loading twice.

Any failure (schema not loadable, validator raising) comes back as a rejected
ValidationResult carrying one diagnostic, so callers only handle one shape.
"""
import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from crudstate.config import get_settings
from crudstate.schema import FieldList, SchemaHandle, load_schema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: Tuple[str, ...] = ()

    @classmethod
    def accept(cls) -> 'ValidationResult':
        return cls(valid=True)

    @classmethod
    def reject(cls, errors) -> 'ValidationResult':
        return cls(valid=False, errors=tuple(errors))


class SchemaCache:
    """Memoised schema loading keyed by schema reference.

    Successful loads are kept for the cache's lifetime. A failed load is not
    cached, so a later call retries it.

    Example:
        cache = SchemaCache()
        handle = await cache.get_or_load('myapp.models:Person')
        handle is await cache.get_or_load('myapp.models:Person')  # True, one load
    """

    def __init__(self, loader: Callable[[Any], Any] = load_schema):
        self._loader = loader
        self._handles: Dict[Any, SchemaHandle] = {}
        self._pending: Dict[Any, 'asyncio.Task'] = {}
        self.load_count = 0

    async def get_or_load(self, ref: Any) -> SchemaHandle:
        """Return the cached handle for ref, loading it on first use.

        Raises:
            SchemaLoadFailure (or whatever the loader raises) when loading fails
        """
        if ref in self._handles:
            return self._handles[ref]

        pending = self._pending.get(ref)
        if pending is None:
            pending = asyncio.ensure_future(self._load(ref))
            self._pending[ref] = pending
            pending.add_done_callback(lambda task: self._forget(ref, task))
        # A cancelled caller must not cancel the load other callers wait on
        return await asyncio.shield(pending)

    def _forget(self, ref: Any, task: 'asyncio.Task') -> None:
        if self._pending.get(ref) is task:
            del self._pending[ref]

    async def _load(self, ref: Any) -> SchemaHandle:
        self.load_count += 1
        handle = self._loader(ref)
        if inspect.isawaitable(handle):
            handle = await handle
        self._handles[ref] = handle
        logger.debug(f"Loaded schema {ref!r} -> {handle!r}")
        return handle

    def cached(self, ref: Any) -> Optional[SchemaHandle]:
        """Handle for ref if already loaded, without loading."""
        return self._handles.get(ref)

    def invalidate(self) -> None:
        """Drop every cached handle and forget loads in flight."""
        self._handles.clear()
        self._pending.clear()
        self.load_count = 0


_shared_cache = SchemaCache()


def get_schema_cache() -> SchemaCache:
    """Cache shared by every component that was not given its own."""
    return _shared_cache


def reset_schema_cache() -> None:
    _shared_cache.invalidate()


class ValidationGate:
    """Validates payloads against one schema reference."""

    def __init__(self, schema: Any, cache: Optional[SchemaCache] = None):
        self.schema = schema
        self._cache = cache if cache is not None else get_schema_cache()

    async def validate(self, payload: Any) -> ValidationResult:
        """Check payload. Never raises."""
        settings = get_settings()
        try:
            handle = await self._cache.get_or_load(self.schema)
        except Exception as e:
            logger.warning(f"Schema {self.schema!r} unavailable: {e}")
            return ValidationResult.reject([str(e) or settings.validator_unavailable])

        try:
            verdict = handle.validate(payload)
            if inspect.isawaitable(verdict):
                verdict = await verdict
            if verdict:
                return ValidationResult.accept()
            explain = getattr(handle, 'explain', None)
            errors = (explain(payload) if callable(explain) else None) or [settings.validation_failed]
        except Exception as e:
            logger.warning(f"Validator for {self.schema!r} raised: {e}")
            return ValidationResult.reject([str(e) or type(e).__name__])

        logger.debug(f"Payload rejected by {self.schema!r}: {errors}")
        return ValidationResult.reject(errors)

    async def fields(self) -> FieldList:
        """Field list of the schema; empty when the schema cannot be loaded."""
        try:
            handle = await self._cache.get_or_load(self.schema)
            return tuple(handle.fields())
        except Exception as e:
            logger.warning(f"Could not load fields for {self.schema!r}: {e}")
            return ()


async def validate(schema: Any, payload: Any, cache: Optional[SchemaCache] = None) -> ValidationResult:
    """One-shot form of ValidationGate(schema).validate(payload)."""
    return await ValidationGate(schema, cache).validate(payload)
