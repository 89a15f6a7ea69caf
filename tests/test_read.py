"""Tests for the Read component."""
import typing

import pytest

from crudstate import CrudLifecycle, IllegalTransition, Mode, OutcomeStatus, ReadLifecycle, crud, settings_context
from crudstate.render import Node

from conftest import ALICE, Person, collect_nodes, collect_text, mounted, run


class Element:
    """Minimal stand-in for a host element exposing get_attribute()."""

    def __init__(self, attrs):
        self._attrs = attrs

    def get_attribute(self, name):
        return self._attrs.get(name)


def test_mount_loads_existing_object(people, alice_store):
    read = mounted(people.get_read(), path='persons.alice')
    assert read.mode is Mode.LOADED
    assert read.current_data == ALICE
    assert [f.name for f in read.fields] == ['name', 'id', 'age', 'bio', 'active']


def test_mount_missing_object(people):
    read = mounted(people.get_read(), path='persons.nobody')
    assert read.mode is Mode.IDLE
    assert read.current_data is None


def test_null_value_reads_as_no_data(people, store):
    store.put('persons.alice', None)
    read = mounted(people.get_read(), path='persons.alice')
    assert read.mode is Mode.IDLE
    assert 'No data available' in collect_text(read.render())


def test_current_data_is_a_copy(people, alice_store):
    read = mounted(people.get_read(), path='persons.alice')
    read.current_data['name'] = 'Mallory'
    assert read.current_data == ALICE


def test_mount_without_store(cache):
    read = crud(Person, cache=cache).get_read()(path='persons.alice')
    outcome = run(read.mount())
    assert outcome.status is OutcomeStatus.REJECTED
    assert read.errors == ['Object store not available']


def test_mount_without_path(people):
    read = people.get_read()()
    run(read.mount())
    assert read.errors == ['State path not specified']
    assert read.mode is Mode.IDLE


def test_refresh_picks_up_new_value(people, alice_store):
    read = mounted(people.get_read(), path='persons.alice')
    alice_store.put('persons.alice', {'name': 'Alice Jones'})
    run(read.dispatch('refresh'))
    assert read.current_data == {'name': 'Alice Jones'}

    alice_store.delete('persons.alice')
    run(read.dispatch('refresh'))
    assert read.mode is Mode.IDLE


def test_cancel_notifies_and_keeps_store(people, alice_store):
    cancelled = []
    read = mounted(people.get_read(), path='persons.alice', on_cancel=lambda: cancelled.append(True))
    assert read.cancel().status is OutcomeStatus.CANCELLED
    assert cancelled == [True]
    assert read.mode is Mode.LOADED
    assert alice_store.get('persons.alice') == ALICE


def test_render_display_fields(people, alice_store):
    read = mounted(people.get_read(), path='persons.alice')
    texts = collect_text(read.render())
    assert 'View Item' in texts
    assert 'Alice Smith' in texts
    assert 'ID: ' in texts
    assert '28' in texts
    # Missing bio renders the empty placeholder
    assert '-' in texts
    assert [b['action'] for b in collect_nodes(read.render(), 'button')] == ['cancel']


class TestEnhance:
    """Tests for binding to an element carrying the store path."""

    def test_mapping_element(self, people, alice_store):
        read = people.get_read()()
        run(read.enhance({'data-state-path': 'persons.alice'}))
        assert read.mode is Mode.LOADED
        assert read.target_path == 'persons.alice'

    def test_element_with_get_attribute(self, people, alice_store):
        read = people.get_read()(path='persons.other')
        run(read.enhance(Element({'state-path': 'persons.alice'})))
        assert read.current_data == ALICE

    def test_element_without_attribute_uses_path_prop(self, people, alice_store):
        read = people.get_read()(path='persons.alice')
        run(read.enhance(Element({})))
        assert read.mode is Mode.LOADED

    def test_custom_attribute_names(self, people, alice_store):
        with settings_context(path_attributes=('x-path',)):
            read = people.get_read()()
            run(read.enhance({'x-path': 'persons.alice', 'state-path': 'persons.other'}))
        assert read.current_data == ALICE


def test_state_snapshot(people, alice_store):
    read = mounted(people.get_read(), path='persons.alice')
    state = read.state
    assert state.mode is Mode.LOADED
    assert state.current_data == ALICE
    assert state.errors == ()


def test_transition_table_is_enforced(people, alice_store):
    """Test that Read never enters an editing mode."""
    read = mounted(people.get_read(), path='persons.alice')
    assert not read.can_transition(Mode.EDITING)
    with pytest.raises(IllegalTransition):
        read._transition(Mode.EDITING)
    assert read.mode is Mode.LOADED


def test_render_annotations_resolve():
    """Test that render() is annotated with the render description type, not the method itself."""
    assert typing.get_type_hints(CrudLifecycle.render)['return'] is Node
    assert typing.get_type_hints(ReadLifecycle._render_body)['return'] == typing.List[Node]
