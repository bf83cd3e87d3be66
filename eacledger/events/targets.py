"""Display labels for the polymorphic target of timeline events."""

import asyncio
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Protocol

from eacledger.db.store import RecordStore, Table
from eacledger.errors import Outcome, error_message
from eacledger.models.certificates import Certificate
from eacledger.models.common import EventTarget
from eacledger.models.events import Event
from eacledger.models.production_sources import ProductionSource
from eacledger.utils.metrics import PrometheusDocumentMetrics

logger = logging.getLogger(__name__)

LABEL_PREFIXES: dict[EventTarget, str] = {
    EventTarget.CERT: "Certificate",
    EventTarget.PSOURCE: "Production Source",
}


class TargetLookup(Protocol):
    """Batch label source for one target kind."""

    async def labels(self) -> dict[str, str]:
        """Return id -> display label for every candidate entity.

        Returns:
            Labels keyed by entity id, in store order
        """
        ...


class CertificateLabelLookup:
    """Labels every certificate as ``Certificate • {type}``."""

    def __init__(self, records: RecordStore) -> None:
        self._records = records

    async def labels(self) -> dict[str, str]:
        rows = await self._records.select(Table.certificates, order_by="created_at")
        labels: dict[str, str] = {}
        for row in rows:
            cert = Certificate.model_validate(row)
            labels[cert.id] = f"{LABEL_PREFIXES[EventTarget.CERT]} • {cert.type.value}"
        return labels


class ProductionSourceLabelLookup:
    """Labels every production source as ``Production Source • {name or id}``."""

    def __init__(self, records: RecordStore) -> None:
        self._records = records

    async def labels(self) -> dict[str, str]:
        rows = await self._records.select(Table.production_sources, order_by="created_at")
        labels: dict[str, str] = {}
        for row in rows:
            source = ProductionSource.model_validate(row)
            name = source.name if source.name is not None else source.id
            labels[source.id] = f"{LABEL_PREFIXES[EventTarget.PSOURCE]} • {name}"
        return labels


@dataclass(frozen=True)
class TargetOption:
    """One selectable event target."""

    target: EventTarget
    id: str
    label: str


def fallback_label(target: EventTarget | str, target_id: str) -> str:
    """Raw-id label used on a miss or for kinds without a lookup."""
    kind = target.value if isinstance(target, EventTarget) else target
    return f"{kind} • {target_id}"


class TargetResolver:
    """Resolves ``(target, target_id)`` pairs on events to display labels.

    Each lookup runs once per call regardless of how many events are passed,
    and all lookups run concurrently. Label loading is auxiliary: a failing
    lookup never raises, it empties the result and adds a warning.
    """

    def __init__(
        self,
        lookups: Mapping[EventTarget, TargetLookup],
        *,
        metrics: PrometheusDocumentMetrics | None = None,
    ) -> None:
        self._lookups = dict(lookups)
        self._metrics = metrics or PrometheusDocumentMetrics()

    @classmethod
    def for_store(
        cls, records: RecordStore, *, metrics: PrometheusDocumentMetrics | None = None
    ) -> "TargetResolver":
        """Resolver backed by full certificate and production source scans."""
        return cls(
            {
                EventTarget.CERT: CertificateLabelLookup(records),
                EventTarget.PSOURCE: ProductionSourceLabelLookup(records),
            },
            metrics=metrics,
        )

    async def resolve(self, events: Iterable[Event]) -> Outcome[dict[str, str]]:
        """Map ``"{target}:{target_id}"`` to a label for every event.

        Args:
            events: Events whose targets should be labelled

        Returns:
            Outcome with the label map; on any lookup failure the map is empty
            and ``warnings`` names each failure
        """
        events = list(events)
        by_kind = await self._load_all()
        if not by_kind.ok:
            return Outcome(value={}, warnings=by_kind.warnings)

        labels: dict[str, str] = {}
        for event in events:
            kind_labels = by_kind.value.get(event.target, {})
            label = kind_labels.get(event.target_id)
            labels[event.target_key] = label or fallback_label(event.target, event.target_id)
        return Outcome(value=labels)

    async def target_options(
        self,
        preselected: tuple[EventTarget | str, str] | None = None,
    ) -> Outcome[list[TargetOption]]:
        """Every selectable target for an event form.

        When ``preselected`` names an id that is not among the loaded options,
        a placeholder option for it is pinned first so the form can still show
        the current value.
        """
        by_kind = await self._load_all()
        options = [
            TargetOption(target=kind, id=target_id, label=label)
            for kind, kind_labels in by_kind.value.items()
            for target_id, label in kind_labels.items()
        ]

        if preselected is not None:
            kind, target_id = EventTarget(preselected[0]), preselected[1]
            if target_id and not any(o.id == target_id for o in options):
                prefix = LABEL_PREFIXES.get(kind, kind.value)
                options.insert(
                    0, TargetOption(target=kind, id=target_id, label=f"{prefix} • {target_id}")
                )

        return Outcome(value=options, warnings=by_kind.warnings)

    async def _load_all(self) -> Outcome[dict[EventTarget, dict[str, str]]]:
        kinds = list(self._lookups)
        results = await asyncio.gather(
            *(self._lookups[kind].labels() for kind in kinds), return_exceptions=True
        )

        loaded: dict[EventTarget, dict[str, str]] = {}
        warnings: list[str] = []
        for kind, result in zip(kinds, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                reason = error_message(result)
                logger.warning(
                    "Target label load failed",
                    extra={"structured": {"target": kind.value, "error_reason": reason}},
                )
                self._metrics.record_label_failure(kind.value)
                warnings.append(f"{kind.value} labels unavailable: {reason}")
                continue
            loaded[kind] = result

        return Outcome(value=loaded, warnings=warnings)
