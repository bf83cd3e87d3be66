"""Certificate records and create/update payloads."""

from datetime import datetime
from typing import Annotated, ClassVar

from pydantic import Field, field_validator

from eacledger.models.common import (
    CertificateType,
    DocumentRef,
    ExternalId,
    MetadataItem,
    OrganizationRole,
    RecordModel,
    UpdateModel,
)


class Amount(RecordModel):
    """Certified quantity with its unit."""

    amount: float = Field(..., gt=0)
    unit: str
    conversion_factor: float | None = Field(None, alias="conversionFactor")
    conversion_factor_units: str | None = Field(None, alias="conversionFactorUnits")
    conversion_notes: str | None = Field(None, alias="conversionNotes")
    is_primary: bool | None = Field(None, alias="isPrimary")

    @field_validator("unit")
    @classmethod
    def validate_unit_not_blank(cls, v: str) -> str:
        """Ensure unit is a non-empty string."""
        if not v.strip():
            raise ValueError("unit must be a non-empty string")
        return v.strip()


class Emissions(RecordModel):
    """Carbon intensity and emissions factor data."""

    carbon_intensity: float = Field(..., alias="carbonIntensity")
    ci_unit: str | None = Field(None, alias="ciUnit")
    ci_notes: str | None = Field(None, alias="ciNotes")
    emissions_factor: float = Field(..., alias="emissionsFactor")
    ef_unit: str | None = Field(None, alias="efUnit")
    ef_notes: str | None = Field(None, alias="efNotes")


class Certificate(RecordModel):
    """Stored certificate row."""

    id: str
    type: CertificateType
    type2: str | None = None
    amounts: list[Amount]
    external_ids: list[ExternalId] | None = None
    emissions: list[Emissions] | None = None
    links: list[str] | None = None
    documents: list[str] | None = None
    related_certificates: list[str] | None = None
    metadata: list[MetadataItem] | None = None
    organizations: list[OrganizationRole] | None = None
    production_source_id: str | None = None
    production_tech: str | None = None
    created_at: datetime
    updated_at: datetime


class CertificateCreate(RecordModel):
    """Form payload for a new certificate."""

    type: CertificateType
    type2: str | None = None
    amounts: Annotated[list[Amount], Field(min_length=1)]
    external_ids: list[ExternalId] | None = Field(None, alias="externalIDs")
    emissions: list[Emissions] | None = None
    links: list[str] | None = None
    documents: list[DocumentRef] | None = None
    related_certificates: list[str] | None = Field(None, alias="relatedCertificates")
    metadata: list[MetadataItem] | None = None
    organizations: list[OrganizationRole] | None = None
    production_source_id: str | None = Field(None, alias="productionSourceId")
    production_tech: str | None = Field(None, alias="productionTech")

    @field_validator("amounts")
    @classmethod
    def validate_amounts_not_empty(cls, v: list[Amount]) -> list[Amount]:
        """Ensure at least one amount."""
        if not v:
            raise ValueError("At least one amount is required")
        return v


class CertificateUpdate(UpdateModel):
    """Partial certificate edit; only keys present in the payload are written."""

    not_nullable: ClassVar[frozenset[str]] = frozenset({"type", "amounts"})

    type: CertificateType | None = None
    type2: str | None = None
    amounts: list[Amount] | None = None
    external_ids: list[ExternalId] | None = Field(None, alias="externalIDs")
    emissions: list[Emissions] | None = None
    links: list[str] | None = None
    documents: list[DocumentRef] | None = None
    related_certificates: list[str] | None = Field(None, alias="relatedCertificates")
    metadata: list[MetadataItem] | None = None
    organizations: list[OrganizationRole] | None = None
    production_source_id: str | None = Field(None, alias="productionSourceId")
    production_tech: str | None = Field(None, alias="productionTech")

    @field_validator("amounts")
    @classmethod
    def validate_amounts_not_cleared(cls, v: list[Amount] | None) -> list[Amount] | None:
        """A certificate can never lose all of its amounts."""
        if v is not None and not v:
            raise ValueError("At least one amount is required")
        return v
