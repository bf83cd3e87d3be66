"""Timeline event service."""

from collections.abc import Sequence

from eacledger.db.store import Table
from eacledger.models.common import EventTarget
from eacledger.models.events import Event, EventCreate, EventUpdate
from eacledger.services.base import EntityService


class EventService(EntityService[Event]):
    """Events, listed by most recent edit.

    ``target_id`` is stored as given; nothing checks that the target exists.
    """

    table = Table.events
    record_model = Event
    create_model = EventCreate
    update_model = EventUpdate
    order_by = "updated_at"

    async def list_by_target(self, target: EventTarget | str, target_id: str) -> list[Event]:
        """Events pointing at one entity, most recently edited first."""
        rows = await self._records.select(
            self.table,
            filters={"target": EventTarget(target).value, "target_id": target_id},
            order_by=self.order_by,
        )
        return [self._to_record(row) for row in rows]

    async def list_by_target_ids(
        self, target: EventTarget | str, target_ids: Sequence[str]
    ) -> list[Event]:
        """Events pointing at any of several entities of one kind.

        Empty ``target_ids`` returns [] without a store call.
        """
        if not target_ids:
            return []

        rows = await self._records.select_in(
            self.table,
            "target_id",
            list(target_ids),
            filters={"target": EventTarget(target).value},
        )
        events = [self._to_record(row) for row in rows]
        events.sort(key=lambda e: e.updated_at, reverse=True)
        return events
