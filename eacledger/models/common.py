"""Common types and enums shared across all records."""

from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class RecordModel(BaseModel):
    """Base for stored records and their nested shapes.

    Accepts both snake_case names and the camelCase spellings UI payloads use.
    """

    model_config = ConfigDict(populate_by_name=True, use_enum_values=False)


class UpdateModel(RecordModel):
    """Base for partial edits.

    Every field is optional so absent keys can be told apart from present
    ones. Fields listed in ``not_nullable`` back NOT NULL columns: they may be
    omitted but never sent as an explicit None.
    """

    not_nullable: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def reject_cleared_required(self) -> "UpdateModel":
        cleared = sorted(
            name
            for name in self.not_nullable & self.model_fields_set
            if getattr(self, name) is None
        )
        if cleared:
            raise ValueError(f"{', '.join(cleared)} cannot be cleared")
        return self


class CertificateType(str, Enum):
    """Environmental attribute certificate type."""

    REC = "REC"
    RTC = "RTC"
    RNG = "RNG"
    SAF = "SAF"
    CC = "CC"


class FileType(str, Enum):
    """Document file type."""

    CERTIFICATE = "CERTIFICATE"
    POS = "POS"
    CONTRACT = "CONTRACT"
    AUDIT = "AUDIT"
    LABTEST = "LABTEST"
    CONSIGNMENT = "CONSIGNMENT"
    IMAGE = "IMAGE"
    ORGANIZATION_DOCUMENT = "ORGANIZATION_DOCUMENT"


class EventTarget(str, Enum):
    """Kind of entity an event points at."""

    CERT = "CERT"
    PRODUCT = "PRODUCT"
    PSOURCE = "PSOURCE"


class OrgRole(str, Enum):
    """Default roles an organization can play on a record."""

    REGISTRY = "Registry"
    ISSUER = "Issuer"
    PRODUCER = "Producer"
    SELLER = "Seller"
    BROKER = "Broker"
    BUYER = "Buyer"
    BENEFICIARY = "Beneficiary"
    FUEL_USER = "Fuel User"
    TRANSPORT = "Transport"
    GRID_OPERATOR = "Grid Operator"
    AUDITOR = "Auditor"
    RATING_AGENCY = "Rating Agency"
    LABEL = "Label"
    VERIFIER = "Verifier"
    VALIDATOR = "Validator"
    LAB = "Lab"
    OTHER = "Other"


class EventType(str, Enum):
    """Timeline event type."""

    CREATION = "CREATION"
    ACTIVATION = "ACTIVATION"
    PAUSE = "PAUSE"
    SUSPENSION = "SUSPENSION"
    TERMINATION = "TERMINATION"
    PRODUCTION = "PRODUCTION"
    ISSUANCE = "ISSUANCE"
    REDEMPTION = "REDEMPTION"
    TRANSFER = "TRANSFER"
    TRANSPORT = "TRANSPORT"
    INJECTION = "INJECTION"
    AUDIT = "AUDIT"
    LAB_TEST = "LAB_TEST"
    VERIFICATION = "VERIFICATION"
    VALIDATION = "VALIDATION"
    RATING = "RATING"
    LABELING = "LABELING"


CERTIFICATE_TYPE_NAMES: dict[CertificateType, str] = {
    CertificateType.REC: "Renewable Energy Certificate",
    CertificateType.RTC: "Renewable Thermal Certificate",
    CertificateType.RNG: "Renewable Natural Gas",
    CertificateType.SAF: "Sustainable Aviation Fuel",
    CertificateType.CC: "Carbon Credit",
}

FILE_TYPE_NAMES: dict[FileType, str] = {
    FileType.CERTIFICATE: "Certificate",
    FileType.POS: "Proof of Sustainability",
    FileType.CONTRACT: "Contract",
    FileType.AUDIT: "Audit",
    FileType.LABTEST: "Lab Test",
    FileType.CONSIGNMENT: "Consignment receipt",
    FileType.IMAGE: "Image",
    FileType.ORGANIZATION_DOCUMENT: "Organization Document",
}

EVENT_TARGET_NAMES: dict[EventTarget, str] = {
    EventTarget.CERT: "Environmental Certificate",
    EventTarget.PRODUCT: "Physical Product Chain-of-Custody",
    EventTarget.PSOURCE: "Production Source",
}


class MetadataItem(RecordModel):
    """Ordered key/label/value entry attached to a record."""

    key: str
    label: str
    value: str | None = None
    type: str | None = None  # string, number, boolean, date, enum
    options: list[str] | None = None
    required: bool | None = None
    description: str | None = None


class ExternalId(RecordModel):
    """Identifier of a record in some external registry."""

    id: str
    owner_org_id: str | None = Field(None, alias="ownerOrgId")
    owner_org_name: str | None = Field(None, alias="ownerOrgName")
    description: str | None = None
    external_field_name: str | None = Field(None, alias="externalFieldName")


class OrganizationRole(RecordModel):
    """An organization and the role it plays on a record."""

    org_id: str = Field(..., alias="orgId")
    role: OrgRole | str
    org_name: str | None = Field(None, alias="orgName")
    role_custom: str | None = Field(None, alias="roleCustom")
    external_ids: list[ExternalId] | None = Field(None, alias="externalIDs")

    def display_role(self) -> str:
        """Custom role for ``Other`` when given, else the role name."""
        role = self.role.value if isinstance(self.role, OrgRole) else self.role
        if role == OrgRole.OTHER.value and self.role_custom:
            return self.role_custom
        return role


class Location(RecordModel):
    """Postal/geographic location. ``country`` is an ISO code or full name."""

    country: str
    subdivision: str | None = None
    region: str | None = None
    address: str | None = None
    zip_code: str | None = Field(None, alias="zipCode")
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    geo_bounds: str | None = Field(None, alias="geoBounds")

    @field_validator("country")
    @classmethod
    def validate_country_not_blank(cls, v: str) -> str:
        """Ensure country is present."""
        if not v.strip():
            raise ValueError("country must not be empty")
        return v.strip()


class Contact(RecordModel):
    """Organization contact entry."""

    value: str
    label: str | None = None


class DocumentRef(RecordModel):
    """UI-level pointer to a document, as attached in forms.

    Forms carry either the row id (``id``) or the storage id (``docId``).
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str | None = None
    doc_id: str | None = Field(None, alias="docId")
