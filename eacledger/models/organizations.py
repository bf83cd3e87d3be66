"""Organization records and create/update payloads."""

from datetime import datetime

from pydantic import Field, field_validator

from eacledger.models.common import Contact, DocumentRef, ExternalId, Location, RecordModel


class Organization(RecordModel):
    """Stored organization row."""

    id: str
    name: str
    name_expanded: str | None = None
    url: str | None = None
    description: str | None = None
    contacts: list[Contact] | None = None
    location: list[Location] | None = None
    external_ids: list[ExternalId] | None = None
    documents: list[str] | None = None
    created_at: datetime
    updated_at: datetime


class OrganizationWithRole(Organization):
    """Organization plus its most common role across all records."""

    main_role: str | None = None


class OrganizationCreate(RecordModel):
    """Form payload for a new organization.

    ``location`` accepts a single location (wrapped into a list when stored)
    or a list.
    """

    name: str
    name_expanded: str | None = Field(None, alias="nameExpanded")
    url: str | None = None
    description: str | None = None
    contacts: list[Contact] | None = None
    location: Location | list[Location] | None = None
    external_ids: list[ExternalId] | None = Field(None, alias="externalIDs")
    documents: list[DocumentRef] | None = None

    @field_validator("name")
    @classmethod
    def validate_name_not_blank(cls, v: str) -> str:
        """Ensure the organization has a name."""
        if not v.strip():
            raise ValueError("name must not be empty")
        return v.strip()


class OrganizationUpdate(RecordModel):
    """Partial organization edit; only keys present are written."""

    name: str | None = None
    name_expanded: str | None = Field(None, alias="nameExpanded")
    url: str | None = None
    description: str | None = None
    contacts: list[Contact] | None = None
    location: Location | list[Location] | None = None
    external_ids: list[ExternalId] | None = Field(None, alias="externalIDs")
    documents: list[DocumentRef] | None = None

    @field_validator("name")
    @classmethod
    def validate_name_not_cleared(cls, v: str | None) -> str | None:
        """Name may change but never be cleared."""
        if v is None or not v.strip():
            raise ValueError("name must not be empty")
        return v.strip()
