"""Tests for the Delete component."""
from crudstate import Mode, OutcomeStatus

from conftest import ALICE, collect_nodes, collect_text, mounted, run


def loaded(people, **props):
    return mounted(people.get_delete(), path='persons.alice', **props)


def test_request_delete_only_asks_for_confirmation(people, alice_store):
    delete = loaded(people)
    delete.request_delete()
    assert delete.mode is Mode.CONFIRM_PENDING
    assert delete.confirming
    assert alice_store.get('persons.alice') == ALICE


def test_cancel_delete_returns_to_loaded(people, alice_store):
    delete = loaded(people)
    delete.request_delete()
    delete.cancel_delete()
    assert delete.mode is Mode.LOADED
    assert delete.current_data == ALICE
    assert alice_store.get('persons.alice') == ALICE


def test_confirm_removes_object(people, alice_store):
    deleted = []
    delete = loaded(people, on_success=deleted.append)
    delete.request_delete()

    outcome = run(delete.confirm())

    assert outcome.status is OutcomeStatus.COMMITTED
    assert alice_store.get('persons.alice') is None
    assert not alice_store.exists('persons.alice')
    assert delete.mode is Mode.IDLE
    assert delete.current_data is None
    assert deleted == [None]


def test_confirm_without_request_is_ignored(people, alice_store):
    delete = loaded(people)
    assert run(delete.confirm()).status is OutcomeStatus.IGNORED
    assert alice_store.get('persons.alice') == ALICE


def test_request_without_data_is_ignored(people):
    delete = mounted(people.get_delete(), path='persons.nobody')
    assert delete.request_delete().status is OutcomeStatus.IGNORED
    assert delete.mode is Mode.IDLE


def test_confirm_failure_keeps_confirmation_open(people, alice_store):
    delete = loaded(people)
    delete.request_delete()
    delete.store = None

    outcome = run(delete.confirm())

    assert outcome.status is OutcomeStatus.REJECTED
    assert delete.errors == ['Object store not available']
    assert delete.mode is Mode.CONFIRM_PENDING
    assert delete.current_data == ALICE


def test_cancel_from_confirmation(people, alice_store):
    cancelled = []
    delete = loaded(people, on_cancel=lambda: cancelled.append(True))
    delete.request_delete()
    delete.cancel()
    assert cancelled == [True]
    assert delete.mode is Mode.LOADED


def test_render_prompt_then_warning(people, alice_store):
    delete = loaded(people)
    tree = delete.render()
    assert 'Are you sure you want to delete this item?' in collect_text(tree)
    assert 'Alice Smith' in collect_text(tree)
    assert [b['action'] for b in collect_nodes(tree, 'button')] == ['request_delete', 'cancel']

    delete.request_delete()
    tree = delete.render()
    assert {'text': 'This action cannot be undone. Are you absolutely sure?', 'class': 'warning'} in collect_nodes(tree, 'p')
    assert [b['action'] for b in collect_nodes(tree, 'button')] == ['confirm', 'cancel_delete']


def test_dispatch_delete_flow(people, alice_store):
    delete = loaded(people)
    run(delete.dispatch('request_delete'))
    run(delete.dispatch('confirm'))
    assert alice_store.get('persons.alice') is None
    assert 'No data available' in collect_text(delete.render())
