"""Tests for the Create component."""
import asyncio

from crudstate import FieldSpec, Mode, Outcome, OutcomeStatus, SchemaHandle, crud

from conftest import Person, collect_nodes, collect_text, mounted, run


class SlowSchema(SchemaHandle):
    """Validator that yields to the event loop before answering."""

    name = 'slow'

    def fields(self):
        return (FieldSpec('name', 'Name', required=True),)

    async def validate(self, payload):
        await asyncio.sleep(0)
        return True


class TestSubmit:
    """Tests for CreateLifecycle.submit()."""

    def test_valid_submit_writes_store(self, people, store):
        created = []
        create = mounted(people.get_create(), path='persons.bob', on_success=created.append)

        outcome = run(create.submit({'name': 'Bob', 'age': 40}))

        assert outcome.ok
        assert outcome.status is OutcomeStatus.COMMITTED
        assert store.get('persons.bob') == {'name': 'Bob', 'age': 40}
        assert created == [{'name': 'Bob', 'age': 40}]
        assert create.mode is Mode.IDLE
        assert create.errors == []
        assert create.form == {}

    def test_invalid_submit_leaves_store_untouched(self, people, store):
        """Test that a rejected payload keeps the form and reports the message."""
        created = []
        create = mounted(people.get_create(), path='persons.new', on_success=created.append)

        outcome = run(create.submit({'name': ''}))

        assert outcome.status is OutcomeStatus.REJECTED
        assert outcome.errors == ('Name is required',)
        assert not outcome.ok
        assert create.errors == ['Name is required']
        assert store.get('persons.new') is None
        assert create.form == {'name': ''}
        assert create.mode is Mode.IDLE
        assert created == []

    def test_submit_collects_form_with_defaults(self, people, store):
        create = mounted(people.get_create(), path='persons.carol')
        create.set_field('name', 'Carol')

        outcome = run(create.submit())

        assert outcome.status is OutcomeStatus.COMMITTED
        assert store.get('persons.carol') == {
            'name': 'Carol', 'id': '', 'age': None, 'bio': '', 'active': False,
        }

    def test_success_after_failure_clears_errors(self, people):
        create = mounted(people.get_create(), path='persons.bob')
        run(create.submit({'name': ''}))
        run(create.submit({'name': 'Bob'}))
        assert create.errors == []

    def test_store_unavailable(self, cache):
        create = mounted(crud(Person, cache=cache).get_create(), path='persons.bob')

        outcome = run(create.submit({'name': 'Bob'}))

        assert outcome.status is OutcomeStatus.REJECTED
        assert create.errors == ['Object store not available']
        assert create.mode is Mode.IDLE

    def test_path_missing(self, people):
        create = mounted(people.get_create())
        run(create.submit({'name': 'Bob'}))
        assert create.errors == ['State path not specified']

    def test_path_conflict_is_reported(self, people, store):
        store.put('persons', 'flat')
        create = mounted(people.get_create(), path='persons.bob')

        outcome = run(create.submit({'name': 'Bob'}))

        assert outcome.status is OutcomeStatus.REJECTED
        assert "persons" in create.errors[0]
        assert store.get('persons') == 'flat'
        assert create.mode is Mode.IDLE

    def test_second_submit_while_submitting_is_ignored(self, store, cache):
        schema = SlowSchema()
        create = mounted(crud(schema, store=store, cache=cache).get_create(), path='persons.a')

        async def scenario():
            return await asyncio.gather(create.submit({'name': 'A'}), create.submit({'name': 'B'}))

        first, second = run(scenario())

        assert first.status is OutcomeStatus.COMMITTED
        assert second.status is OutcomeStatus.IGNORED
        assert store.get('persons.a') == {'name': 'A'}
        assert create.mode is Mode.IDLE

    def test_failing_on_success_does_not_undo_commit(self, people, store):
        def broken(payload):
            raise RuntimeError("boom")

        create = mounted(people.get_create(), path='persons.bob', on_success=broken)
        assert run(create.submit({'name': 'Bob'})).status is OutcomeStatus.COMMITTED
        assert store.exists('persons.bob')


class TestCancel:
    """Tests for CreateLifecycle.cancel()."""

    def test_cancel_clears_form_and_errors(self, people, store):
        cancelled = []
        create = mounted(people.get_create(), path='persons.bob', on_cancel=lambda: cancelled.append(True))
        run(create.submit({'name': ''}))

        outcome = create.cancel()

        assert outcome.status is OutcomeStatus.CANCELLED
        assert create.form == {}
        assert create.errors == []
        assert cancelled == [True]
        assert store.to_dict() == {}


class TestInteraction:
    """Tests for dispatch() and render()."""

    def test_dispatch_set_field_and_submit(self, people, store):
        create = mounted(people.get_create(), path='persons.zed')
        run(create.dispatch('set_field', name='name', value='Zed'))
        outcome = run(create.dispatch('submit'))
        assert outcome.status is OutcomeStatus.COMMITTED
        assert store.get('persons.zed')['name'] == 'Zed'

    def test_unknown_action(self, people):
        create = mounted(people.get_create(), path='persons.zed')
        assert run(create.dispatch('explode')).status is OutcomeStatus.IGNORED

    def test_render_form(self, people):
        create = mounted(people.get_create(), path='persons.bob')
        tree = create.render()

        assert tree['div']['class'] == 'crud-create'
        assert 'Create New Item' in collect_text(tree)
        assert 'Name *' in collect_text(tree)
        assert [b['action'] for b in collect_nodes(tree, 'button')] == ['submit', 'cancel']
        assert collect_nodes(tree, 'textarea')[0]['name'] == 'bio'
        checkbox = [i for i in collect_nodes(tree, 'input') if i['type'] == 'checkbox']
        assert checkbox[0]['checked'] is False

    def test_render_errors(self, people):
        create = mounted(people.get_create(), path='persons.bob')
        run(create.submit({'name': ''}))
        errors = collect_nodes(create.render(), 'p')
        assert {'text': 'Name is required', 'class': 'error'} in errors


def test_outcome_factories_set_status():
    """Test that each Outcome factory produces the matching status."""
    assert Outcome.commit({'name': 'Bob'}).status is OutcomeStatus.COMMITTED
    rejected = Outcome.reject(['Name is required'])
    assert rejected.status is OutcomeStatus.REJECTED
    assert rejected.errors == ('Name is required',)
    assert not rejected.ok
    assert Outcome.cancel().status is OutcomeStatus.CANCELLED
    assert Outcome.ignore("busy").reason == "busy"
    assert Outcome.change().ok
