"""Models package - re-exports for convenience."""

from eacledger.models.certificates import (
    Amount,
    Certificate,
    CertificateCreate,
    CertificateUpdate,
    Emissions,
)
from eacledger.models.common import (
    CERTIFICATE_TYPE_NAMES,
    EVENT_TARGET_NAMES,
    FILE_TYPE_NAMES,
    CertificateType,
    Contact,
    DocumentRef,
    EventTarget,
    EventType,
    ExternalId,
    FileType,
    Location,
    MetadataItem,
    OrganizationRole,
    OrgRole,
)
from eacledger.models.documents import Document, DocumentUpdate, UploadFile
from eacledger.models.events import (
    CertificateRef,
    Event,
    EventCreate,
    EventDates,
    EventUpdate,
    ProductionSourceRef,
    ProductRef,
    make_target_ref,
    target_ref_id,
)
from eacledger.models.organizations import (
    Organization,
    OrganizationCreate,
    OrganizationUpdate,
    OrganizationWithRole,
)
from eacledger.models.production_sources import (
    ProductionSource,
    ProductionSourceCreate,
    ProductionSourceUpdate,
)

__all__ = [
    # Common
    "CertificateType",
    "FileType",
    "EventTarget",
    "EventType",
    "OrgRole",
    "CERTIFICATE_TYPE_NAMES",
    "FILE_TYPE_NAMES",
    "EVENT_TARGET_NAMES",
    "MetadataItem",
    "ExternalId",
    "OrganizationRole",
    "Location",
    "Contact",
    "DocumentRef",
    # Documents
    "Document",
    "DocumentUpdate",
    "UploadFile",
    # Certificates
    "Amount",
    "Emissions",
    "Certificate",
    "CertificateCreate",
    "CertificateUpdate",
    # Production sources
    "ProductionSource",
    "ProductionSourceCreate",
    "ProductionSourceUpdate",
    # Organizations
    "Organization",
    "OrganizationWithRole",
    "OrganizationCreate",
    "OrganizationUpdate",
    # Events
    "Event",
    "EventCreate",
    "EventUpdate",
    "EventDates",
    "CertificateRef",
    "ProductionSourceRef",
    "ProductRef",
    "make_target_ref",
    "target_ref_id",
]
