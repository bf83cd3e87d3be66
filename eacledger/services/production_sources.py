"""Production source service."""

from eacledger.db.store import Table
from eacledger.models.production_sources import (
    ProductionSource,
    ProductionSourceCreate,
    ProductionSourceUpdate,
)
from eacledger.services.base import EntityService


class ProductionSourceService(EntityService[ProductionSource]):
    """Production sources; related sources are stored as a bare id list."""

    table = Table.production_sources
    record_model = ProductionSource
    create_model = ProductionSourceCreate
    update_model = ProductionSourceUpdate
    id_fields = ("documents", "related_production_sources")
