"""Read component: display the object at a path, read only."""
from typing import List

from crudstate import render
from crudstate.render import Node
from crudstate.lifecycle import CrudLifecycle, Mode


class ReadLifecycle(CrudLifecycle):
    """IDLE <-> LOADED. There is no write path."""

    operation = 'read'
    title = 'View Item'
    TRANSITIONS = frozenset({
        (Mode.IDLE, Mode.LOADED),
        (Mode.LOADED, Mode.IDLE),
    })

    def _render_body(self) -> List[Node]:
        data = self.current_data
        if data is None:
            return render.no_data()
        lines = [render.display_field(spec, render.field_value(data, spec.name)) for spec in self.fields]
        return [
            render.container('data-display', lines),
            render.actions(render.button('Cancel', 'cancel', kind='secondary')),
        ]

