"""Production source records and create/update payloads."""

from datetime import date, datetime
from typing import ClassVar

from pydantic import Field

from eacledger.models.common import (
    CertificateType,
    DocumentRef,
    ExternalId,
    Location,
    MetadataItem,
    OrganizationRole,
    RecordModel,
    UpdateModel,
)


class ProductionSource(RecordModel):
    """Stored production source row (plant, farm, facility)."""

    id: str
    name: str | None = None
    description: str | None = None
    technology: list[str] = Field(default_factory=list)
    eac_types: list[CertificateType] | None = None
    labels: list[str] | None = None
    operation_start_date: date | None = None
    location: Location | None = None
    links: list[str] | None = None
    documents: list[str] | None = None
    external_ids: list[ExternalId] | None = None
    related_production_sources: list[str] | None = None
    organizations: list[OrganizationRole] | None = None
    metadata: list[MetadataItem] | None = None
    created_at: datetime
    updated_at: datetime

    def display_name(self) -> str:
        """Name, or a shortened id when the source is unnamed."""
        return self.name or f"Source {self.id[:8]}..."


class ProductionSourceCreate(RecordModel):
    """Form payload for a new production source."""

    name: str | None = None
    description: str | None = None
    technology: list[str] = Field(default_factory=list)
    eac_types: list[CertificateType] | None = Field(None, alias="eacTypes")
    labels: list[str] | None = None
    operation_start_date: date | None = Field(None, alias="operationStartDate")
    location: Location | None = None
    links: list[str] | None = None
    documents: list[DocumentRef] | None = None
    external_ids: list[ExternalId] | None = Field(None, alias="externalIDs")
    related_production_sources: list[DocumentRef | str] | None = Field(
        None, alias="relatedProductionSourcesIds"
    )
    organizations: list[OrganizationRole] | None = None
    metadata: list[MetadataItem] | None = None


class ProductionSourceUpdate(UpdateModel):
    """Partial production source edit; only keys present are written."""

    not_nullable: ClassVar[frozenset[str]] = frozenset({"technology"})

    name: str | None = None
    description: str | None = None
    technology: list[str] | None = None
    eac_types: list[CertificateType] | None = Field(None, alias="eacTypes")
    labels: list[str] | None = None
    operation_start_date: date | None = Field(None, alias="operationStartDate")
    location: Location | None = None
    links: list[str] | None = None
    documents: list[DocumentRef] | None = None
    external_ids: list[ExternalId] | None = Field(None, alias="externalIDs")
    related_production_sources: list[DocumentRef | str] | None = Field(
        None, alias="relatedProductionSourcesIds"
    )
    organizations: list[OrganizationRole] | None = None
    metadata: list[MetadataItem] | None = None
