"""Create component: collect a new payload and write it to an empty path."""
from typing import Any, Dict, List, Optional

from crudstate import render
from crudstate.render import Node
from crudstate.lifecycle import CrudLifecycle, Mode, Outcome


class CreateLifecycle(CrudLifecycle):
    """IDLE -> SUBMITTING -> IDLE.

    A rejected submission keeps the form so the user can fix it. A committed
    one clears form and errors, then calls on_success with the payload.
    """

    operation = 'create'
    title = 'Create New Item'
    TRANSITIONS = frozenset({
        (Mode.IDLE, Mode.SUBMITTING),
        (Mode.SUBMITTING, Mode.IDLE),
    })

    def _load_data(self) -> None:
        # Nothing to load; a new item starts from the field defaults
        return None

    def _form_editable(self) -> bool:
        return self.mode is Mode.IDLE

    def _collect_payload(self) -> Dict[str, Any]:
        form = self.form
        payload = {spec.name: form.get(spec.name, spec.default) for spec in self.fields}
        payload.update({k: v for k, v in form.items() if k not in payload})
        return payload

    async def submit(self, payload: Optional[Dict[str, Any]] = None) -> Outcome:
        """Validate and write a new item.

        Args:
            payload: explicit payload; defaults to the in-progress form
        """
        if self.mode is not Mode.IDLE:
            return self._ignore("submit")
        if payload is None:
            payload = self._collect_payload()
        else:
            self._set_form(payload)
        return await self._commit(payload, validate=True, success_mode=Mode.IDLE)

    def _after_commit(self, payload: Any) -> None:
        self._set_form({})

    def _discard_interaction(self) -> None:
        self._set_form({})
        self._clear_errors()

    def actions(self):
        handlers = super().actions()
        handlers.update({'submit': self.submit, 'set_field': self.set_field})
        return handlers

    def _render_body(self) -> List[Node]:
        form = self.form
        fields = [render.form_field(spec, form.get(spec.name)) for spec in self.fields]
        return [render.container('crud-form', [
            render.container('form-fields', fields),
            render.actions(
                render.button('Submit', 'submit', button_type='submit'),
                render.button('Cancel', 'cancel', kind='secondary'),
            ),
        ], tag='form')]
