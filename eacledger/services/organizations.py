"""Organization service."""

import asyncio

from eacledger.db.store import Row, Table
from eacledger.models.organizations import (
    Organization,
    OrganizationCreate,
    OrganizationUpdate,
    OrganizationWithRole,
)
from eacledger.services.base import EntityService
from eacledger.stats.aggregation import main_roles


class OrganizationService(EntityService[Organization]):
    """Organizations. A single location is stored as a one-element list."""

    table = Table.organizations
    record_model = Organization
    create_model = OrganizationCreate
    update_model = OrganizationUpdate

    def _prepare_row(self, row: Row) -> Row:
        location = row.get("location")
        if isinstance(location, dict):
            row["location"] = [location]
        return row

    async def list_with_main_role(self) -> list[OrganizationWithRole]:
        """Organizations with the role they most often play on other records.

        Roles are counted across certificates, events, documents and
        production sources.
        """
        tables = (
            Table.organizations,
            Table.certificates,
            Table.events,
            Table.documents,
            Table.production_sources,
        )
        orgs, *holders = await asyncio.gather(
            *(self._records.select(table, order_by=self.order_by) for table in tables)
        )
        roles = main_roles(*holders)

        return [
            OrganizationWithRole.model_validate({**row, "main_role": roles.get(row["id"])})
            for row in orgs
        ]
