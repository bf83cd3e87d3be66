"""Document records and upload payloads."""

from datetime import datetime
from typing import ClassVar

from pydantic import Field, field_validator

from eacledger.models.common import (
    FileType,
    MetadataItem,
    OrganizationRole,
    RecordModel,
    UpdateModel,
)


class Document(RecordModel):
    """Stored file plus its metadata row.

    Shared by any number of owning records through their ``documents`` arrays;
    deleting it never touches those arrays.
    """

    id: str
    url: str
    file_type: FileType
    title: str | None = None
    description: str | None = None
    metadata: list[MetadataItem] = Field(default_factory=list)
    organizations: list[OrganizationRole] | None = None
    created_at: datetime
    updated_at: datetime

    @field_validator("metadata", mode="before")
    @classmethod
    def coerce_missing_metadata(cls, v: object) -> object:
        """Rows written without metadata read back as an empty list."""
        return [] if v is None else v


class UploadFile(RecordModel):
    """Binary content handed over by the UI layer."""

    name: str
    content: bytes
    content_type: str = "application/octet-stream"


class DocumentUpdate(UpdateModel):
    """Metadata edit for an existing document; only set fields are written."""

    not_nullable: ClassVar[frozenset[str]] = frozenset({"file_type"})

    file_type: FileType | None = Field(None, alias="fileType")
    title: str | None = None
    description: str | None = None
    metadata: list[MetadataItem] | None = None
    organizations: list[OrganizationRole] | None = None
