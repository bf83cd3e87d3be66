"""Timeline event records and the polymorphic target reference."""

from datetime import date, datetime
from typing import Annotated, ClassVar, Literal

from pydantic import BaseModel, Field, TypeAdapter, ValidationInfo, field_validator

from eacledger.models.common import (
    DocumentRef,
    EventTarget,
    Location,
    MetadataItem,
    OrganizationRole,
    RecordModel,
    UpdateModel,
)


class EventDates(RecordModel):
    """Event date range; ``end`` is optional."""

    start: date
    end: date | None = None

    @field_validator("end")
    @classmethod
    def validate_end_after_start(cls, v: date | None, info: ValidationInfo) -> date | None:
        """Ensure end >= start."""
        if v is not None and "start" in info.data and v < info.data["start"]:
            raise ValueError("end must be >= start")
        return v


class CertificateRef(BaseModel):
    """Event target pointing at a certificate."""

    kind: Literal[EventTarget.CERT] = EventTarget.CERT
    certificate_id: str


class ProductionSourceRef(BaseModel):
    """Event target pointing at a production source."""

    kind: Literal[EventTarget.PSOURCE] = EventTarget.PSOURCE
    production_source_id: str


class ProductRef(BaseModel):
    """Event target pointing at a physical product chain-of-custody entry."""

    kind: Literal[EventTarget.PRODUCT] = EventTarget.PRODUCT
    product_id: str


TargetRef = Annotated[
    CertificateRef | ProductionSourceRef | ProductRef, Field(discriminator="kind")
]

_target_ref_adapter: TypeAdapter[CertificateRef | ProductionSourceRef | ProductRef] = (
    TypeAdapter(TargetRef)
)


def make_target_ref(
    target: EventTarget | str, target_id: str
) -> CertificateRef | ProductionSourceRef | ProductRef:
    """Build the typed reference variant for a (target, target_id) pair."""
    kind = EventTarget(target)
    id_field = {
        EventTarget.CERT: "certificate_id",
        EventTarget.PSOURCE: "production_source_id",
        EventTarget.PRODUCT: "product_id",
    }[kind]
    return _target_ref_adapter.validate_python({"kind": kind, id_field: target_id})


def target_ref_id(ref: CertificateRef | ProductionSourceRef | ProductRef) -> str:
    """Raw id carried by a reference variant."""
    if isinstance(ref, CertificateRef):
        return ref.certificate_id
    if isinstance(ref, ProductionSourceRef):
        return ref.production_source_id
    return ref.product_id


class Event(RecordModel):
    """Stored event row.

    ``target``/``target_id`` form a weak reference whose entity kind depends
    on ``target``; nothing guarantees the target still exists.
    """

    id: str
    target: EventTarget
    target_id: str
    type: str
    value: str | None = None
    dates: EventDates | None = None
    location: Location | None = None
    organizations: list[OrganizationRole] | None = None
    notes: str | None = None
    documents: list[str] | None = None
    links: list[str] | None = None
    metadata: list[MetadataItem] | None = None
    created_at: datetime
    updated_at: datetime

    @property
    def target_key(self) -> str:
        """Lookup key used by label maps: ``"{target}:{target_id}"``."""
        return f"{self.target.value}:{self.target_id}"

    @property
    def target_ref(self) -> CertificateRef | ProductionSourceRef | ProductRef:
        """Typed view of the polymorphic target."""
        return make_target_ref(self.target, self.target_id)


class EventCreate(RecordModel):
    """Form payload for a new event."""

    target: EventTarget
    target_id: str = Field(..., alias="targetId", min_length=1)
    type: str = Field(..., min_length=1)
    value: str | None = None
    dates: EventDates | None = None
    location: Location | None = None
    organizations: list[OrganizationRole] | None = None
    notes: str | None = None
    documents: list[DocumentRef] | None = None
    links: list[str] | None = None
    metadata: list[MetadataItem] | None = None


class EventUpdate(UpdateModel):
    """Partial event edit; only keys present are written."""

    not_nullable: ClassVar[frozenset[str]] = frozenset({"target", "target_id", "type"})

    target: EventTarget | None = None
    target_id: str | None = Field(None, alias="targetId", min_length=1)
    type: str | None = Field(None, min_length=1)
    value: str | None = None
    dates: EventDates | None = None
    location: Location | None = None
    organizations: list[OrganizationRole] | None = None
    notes: str | None = None
    documents: list[DocumentRef] | None = None
    links: list[str] | None = None
    metadata: list[MetadataItem] | None = None
