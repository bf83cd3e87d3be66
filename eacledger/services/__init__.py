"""Owning-entity services."""

from eacledger.services.certificates import CertificateService
from eacledger.services.dashboard import (
    DashboardOverview,
    DashboardService,
    DashboardSummaries,
)
from eacledger.services.events import EventService
from eacledger.services.organizations import OrganizationService
from eacledger.services.production_sources import ProductionSourceService

__all__ = [
    "CertificateService",
    "DashboardOverview",
    "DashboardService",
    "DashboardSummaries",
    "EventService",
    "OrganizationService",
    "ProductionSourceService",
]
