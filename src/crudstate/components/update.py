"""
Update component: edit the object at a path and write it back.

Editing works on a copy of the loaded data. Cancelling the edit throws the
copy away and restores the original field values exactly. A validated save
overwrites the store path and replaces the local data with what was written;
the store is not re-read, so a concurrent write from another instance is not
picked up mid-save.
"""
import logging
from typing import Any, Dict, List, Optional

from crudstate import render
from crudstate.render import Node
from crudstate.lifecycle import CrudLifecycle, Mode, Outcome

logger = logging.getLogger(__name__)


class UpdateLifecycle(CrudLifecycle):
    """LOADED -> EDITING -> SUBMITTING -> LOADED, EDITING -> LOADED on cancel."""

    operation = 'update'
    title = 'Update Item'
    TRANSITIONS = frozenset({
        (Mode.IDLE, Mode.LOADED),
        (Mode.LOADED, Mode.IDLE),
        (Mode.LOADED, Mode.EDITING),
        (Mode.EDITING, Mode.LOADED),
        (Mode.EDITING, Mode.SUBMITTING),
        (Mode.SUBMITTING, Mode.LOADED),
        (Mode.SUBMITTING, Mode.EDITING),
    })

    def _form_editable(self) -> bool:
        return self.mode is Mode.EDITING

    def edit(self) -> Outcome:
        """Make the fields mutable, starting from the loaded data."""
        if self.mode is not Mode.LOADED:
            return self._ignore("edit")
        data = self.current_data
        self._set_form(data if isinstance(data, dict) else {})
        self._clear_errors()
        self._transition(Mode.EDITING)
        return Outcome.change(self.form)

    def cancel_edit(self) -> Outcome:
        """Discard edits and return to the read-only view."""
        if self.mode is not Mode.EDITING:
            return self._ignore("cancel_edit")
        self._discard_interaction()
        return Outcome.change(self.current_data)

    def _discard_interaction(self) -> None:
        if self.mode is not Mode.EDITING:
            return
        data = self.current_data
        self._set_form(data if isinstance(data, dict) else {})
        self._clear_errors()
        self._transition(Mode.LOADED)
        logger.debug(f"update: edits discarded at {self.target_path!r}")

    async def save(self, payload: Optional[Dict[str, Any]] = None) -> Outcome:
        """Validate and overwrite the object at the target path.

        Args:
            payload: explicit payload; defaults to the in-progress form
        """
        if self.mode is not Mode.EDITING:
            return self._ignore("save")
        if payload is None:
            payload = self._collect_payload()
        else:
            self._set_form(payload)
        return await self._commit(payload, validate=True, success_mode=Mode.LOADED)

    def _after_commit(self, payload: Any) -> None:
        self._set_data(payload)
        self._set_form(payload if isinstance(payload, dict) else {})

    def actions(self):
        handlers = super().actions()
        handlers.update({
            'edit': self.edit,
            'cancel_edit': self.cancel_edit,
            'save': self.save,
            'set_field': self.set_field,
        })
        return handlers

    def _render_body(self) -> List[Node]:
        data = self.current_data
        if data is None:
            return render.no_data()

        editing = self.mode is Mode.EDITING
        values = self.form if editing else data
        fields = [
            render.form_field(spec, render.field_value(values, spec.name), disabled=not editing)
            for spec in self.fields
        ]
        if editing:
            buttons = render.actions(
                render.button('Save', 'save', button_type='submit'),
                render.button('Cancel Edit', 'cancel_edit', kind='secondary'),
            )
        else:
            buttons = render.actions(
                render.button('Edit', 'edit'),
                render.button('Cancel', 'cancel', kind='secondary'),
            )
        return [render.container('crud-form', [
            render.container('form-fields', fields),
            buttons,
        ], tag='form')]
