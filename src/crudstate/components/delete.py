"""
Delete component: remove the object at a path after explicit confirmation.

Deleting writes None to the path, which every reader treats the same as a
missing entry. There is no payload validation.
"""
from typing import Any, List

from crudstate import render
from crudstate.render import Node
from crudstate.config import get_settings
from crudstate.lifecycle import CrudLifecycle, Mode, Outcome


class DeleteLifecycle(CrudLifecycle):
    """LOADED -> CONFIRM_PENDING -> SUBMITTING -> IDLE, CONFIRM_PENDING -> LOADED on cancel."""

    operation = 'delete'
    title = 'Delete Item'
    TRANSITIONS = frozenset({
        (Mode.IDLE, Mode.LOADED),
        (Mode.LOADED, Mode.IDLE),
        (Mode.LOADED, Mode.CONFIRM_PENDING),
        (Mode.CONFIRM_PENDING, Mode.LOADED),
        (Mode.CONFIRM_PENDING, Mode.SUBMITTING),
        (Mode.SUBMITTING, Mode.IDLE),
        (Mode.SUBMITTING, Mode.CONFIRM_PENDING),
    })

    @property
    def confirming(self) -> bool:
        return self.mode is Mode.CONFIRM_PENDING

    def request_delete(self) -> Outcome:
        """Ask for confirmation. The store is not touched yet."""
        if self.mode is not Mode.LOADED:
            return self._ignore("request_delete")
        self._transition(Mode.CONFIRM_PENDING)
        return Outcome.change(self.current_data)

    def cancel_delete(self) -> Outcome:
        if self.mode is not Mode.CONFIRM_PENDING:
            return self._ignore("cancel_delete")
        self._discard_interaction()
        return Outcome.change(self.current_data)

    def _discard_interaction(self) -> None:
        if self.mode is Mode.CONFIRM_PENDING:
            self._clear_errors()
            self._transition(Mode.LOADED)

    async def confirm(self) -> Outcome:
        """Write None to the target path and drop the local data."""
        if self.mode is not Mode.CONFIRM_PENDING:
            return self._ignore("confirm")
        return await self._commit(None, validate=False, success_mode=Mode.IDLE)

    def _after_commit(self, payload: Any) -> None:
        self._set_data(None)
        self._set_form({})

    def actions(self):
        handlers = super().actions()
        handlers.update({
            'request_delete': self.request_delete,
            'cancel_delete': self.cancel_delete,
            'confirm': self.confirm,
        })
        return handlers

    def _render_body(self) -> List[Node]:
        data = self.current_data
        if data is None:
            return render.no_data()

        settings = get_settings()
        if not self.confirming:
            preview = [render.display_field(spec, render.field_value(data, spec.name)) for spec in self.fields]
            return [
                render.container('data-display', [
                    render.paragraph(settings.delete_prompt),
                    render.container('item-preview', preview),
                ]),
                render.actions(
                    render.button('Delete', 'request_delete', kind='danger'),
                    render.button('Cancel', 'cancel', kind='secondary'),
                ),
            ]
        return [
            render.container('delete-confirmation', [
                render.paragraph(settings.delete_warning, 'warning'),
            ]),
            render.actions(
                render.button('Confirm Delete', 'confirm', kind='danger'),
                render.button('Cancel', 'cancel_delete', kind='secondary'),
            ),
        ]
