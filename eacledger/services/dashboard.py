"""Dashboard overview: entity totals, the latest events and list summaries."""

import asyncio
from dataclasses import dataclass

from eacledger.config import Settings, get_settings
from eacledger.db.store import RecordStore, Table
from eacledger.models.events import Event
from eacledger.stats.aggregation import Summary, summarize


@dataclass(frozen=True)
class DashboardOverview:
    """Totals per entity kind and the most recently edited events."""

    organizations: int
    certificates: int
    events: int
    production_sources: int
    recent_events: tuple[Event, ...]


@dataclass(frozen=True)
class DashboardSummaries:
    """Summary headers shown above each entity list."""

    certificates: Summary
    production_sources: Summary
    organizations: Summary


class DashboardService:
    """Read-only overview, loaded with one concurrent round of queries."""

    def __init__(self, records: RecordStore, settings: Settings | None = None) -> None:
        self._records = records
        self._settings = settings or get_settings()

    async def overview(self) -> DashboardOverview:
        orgs, certs, events, sources = await asyncio.gather(
            self._records.select(Table.organizations),
            self._records.select(Table.certificates),
            self._records.select(Table.events, order_by="updated_at"),
            self._records.select(Table.production_sources),
        )
        recent = tuple(
            Event.model_validate(row) for row in events[: self._settings.recent_events_limit]
        )
        return DashboardOverview(
            organizations=len(orgs),
            certificates=len(certs),
            events=len(events),
            production_sources=len(sources),
            recent_events=recent,
        )

    async def summaries(self) -> DashboardSummaries:
        """Top-N breakdowns per list; N comes from ``summary_top_n``."""
        certs, sources, orgs = await asyncio.gather(
            self._records.select(Table.certificates),
            self._records.select(Table.production_sources),
            self._records.select(Table.organizations),
        )
        top_n = self._settings.summary_top_n
        return DashboardSummaries(
            certificates=summarize(certs, ("type",), top_n=top_n, country_field=None),
            production_sources=summarize(
                sources, ("technology", "eac_types", "labels"), top_n=top_n
            ),
            organizations=summarize(orgs, top_n=top_n),
        )
