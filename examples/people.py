"""
Person CRUD walkthrough.

Drives the four components the way a UI layer would: mount, feed user
actions through dispatch(), and print what gets rendered and stored.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional

from crudstate import ObjectStore, crud

logger = logging.getLogger(__name__)


@dataclass
class Person:
    """A contact record."""
    name: str = field(metadata={'label': 'Full name'})
    email: str = ''
    age: Optional[int] = None
    notes: str = field(default='', metadata={'kind': 'textarea'})
    active: bool = True


async def main() -> None:
    store = ObjectStore()
    store.on_change(lambda path, value: logger.info(f"store: {path} = {value!r}"))
    people = crud(Person, store=store)

    create = people.get_create()(path='persons.ada', on_success=lambda p: logger.info(f"created {p['name']}"))
    await create.mount()
    rejected = await create.submit({'name': ''})
    logger.info(f"create rejected: {list(rejected.errors)}")
    await create.dispatch('set_field', name='name', value='Ada Lovelace')
    await create.dispatch('set_field', name='age', value=36)
    await create.dispatch('submit')

    update = people.get_update()(path='persons.ada')
    await update.mount()
    update.edit()
    update.set_field('email', 'ada@example.org')
    await update.save()

    read = people.get_read()()
    await read.enhance({'data-state-path': 'persons.ada'})
    logger.info(f"read render: {read.render()}")

    delete = people.get_delete()(path='persons.ada')
    await delete.mount()
    delete.request_delete()
    await delete.confirm()
    logger.info(f"after delete: {store.to_dict()}")


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format='%(name)s: %(message)s')
    asyncio.run(main())
