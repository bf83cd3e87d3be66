"""Certificate service."""

from eacledger.db.store import Table
from eacledger.models.certificates import Certificate, CertificateCreate, CertificateUpdate
from eacledger.services.base import EntityService


class CertificateService(EntityService[Certificate]):
    """Certificates and their ``documents`` id arrays.

    Creation requires at least one amount with a positive value and a unit;
    both checks run before the store is touched.
    """

    table = Table.certificates
    record_model = Certificate
    create_model = CertificateCreate
    update_model = CertificateUpdate
