"""Pytest configuration and shared fixtures."""
import asyncio
from dataclasses import dataclass, field
from typing import Optional

import pytest

import crudstate.config as config_module
import crudstate.schema as schema_module
from crudstate import ObjectStore, SchemaCache, crud, reset_schema_cache


@dataclass
class Person:
    """Test schema: only ``name`` is required."""
    name: str
    id: str = field(default='', metadata={'label': 'ID'})
    age: Optional[int] = None
    bio: str = field(default='', metadata={'kind': 'textarea'})
    active: bool = False


ALICE = {'id': '2', 'name': 'Alice Smith', 'age': 28}


def run(coro):
    """Drive a coroutine to completion from a synchronous test."""
    return asyncio.run(coro)


def mounted(definition, **props):
    """Instantiate a component definition and mount it."""
    component = definition(**props)
    run(component.mount())
    return component


def collect_text(node):
    """All 'text' attributes in a render description, depth first."""
    texts = []
    if isinstance(node, dict):
        for tag, attrs in node.items():
            if isinstance(attrs, dict):
                if 'text' in attrs:
                    texts.append(attrs['text'])
                for child in attrs.get('children', []):
                    texts.extend(collect_text(child))
    return texts


def collect_nodes(node, tag):
    """Attribute dicts of every node with the given tag."""
    found = []
    if isinstance(node, dict):
        for node_tag, attrs in node.items():
            if not isinstance(attrs, dict):
                continue
            if node_tag == tag:
                found.append(attrs)
            for child in attrs.get('children', []):
                found.extend(collect_nodes(child, tag))
    return found


@pytest.fixture(autouse=True)
def reset_module_state():
    """Restore settings, schema registry and shared cache after each test."""
    original_settings = config_module._default_settings
    original_registry = dict(schema_module._registry)
    reset_schema_cache()

    yield

    config_module._default_settings = original_settings
    schema_module._registry.clear()
    schema_module._registry.update(original_registry)
    reset_schema_cache()


@pytest.fixture
def store():
    """Isolated store per test."""
    return ObjectStore()


@pytest.fixture
def alice_store(store):
    store.put('persons.alice', ALICE)
    return store


@pytest.fixture
def cache():
    return SchemaCache()


@pytest.fixture
def people(store, cache):
    """CRUD factory for Person bound to the test store."""
    return crud(Person, store=store, cache=cache)
