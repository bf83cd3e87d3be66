"""Tests for event target label resolution."""

from datetime import datetime, timezone

import pytest

from eacledger.db.inmemory import InMemoryRecordStore
from eacledger.db.store import Table
from eacledger.events.targets import TargetResolver, fallback_label
from eacledger.models.common import EventTarget
from eacledger.models.events import Event
from tests.doubles import FailingSelectRecordStore, RecordingMetrics

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _event(target: str, target_id: str) -> Event:
    return Event(
        id=f"e-{target_id}",
        target=target,
        target_id=target_id,
        type="ISSUANCE",
        created_at=NOW,
        updated_at=NOW,
    )


@pytest.mark.asyncio
async def test_resolve_labels_hits_and_falls_back_on_miss(records: InMemoryRecordStore) -> None:
    """Known certificates get typed labels; unknown targets get raw ids."""
    await records.insert(
        Table.certificates, {"id": "c1", "type": "REC", "amounts": [{"amount": 1, "unit": "MWh"}]}
    )
    resolver = TargetResolver.for_store(records, metrics=RecordingMetrics())

    outcome = await resolver.resolve([_event("CERT", "c1"), _event("PSOURCE", "missing")])

    assert outcome.ok
    assert outcome.value == {
        "CERT:c1": "Certificate • REC",
        "PSOURCE:missing": "PSOURCE • missing",
    }


@pytest.mark.asyncio
async def test_production_source_label_uses_name_then_id(records: InMemoryRecordStore) -> None:
    """Unnamed sources are labelled with their id."""
    await records.insert(Table.production_sources, {"id": "ps1", "name": "Hydro plant"})
    await records.insert(Table.production_sources, {"id": "ps2", "name": None})
    resolver = TargetResolver.for_store(records, metrics=RecordingMetrics())

    outcome = await resolver.resolve([_event("PSOURCE", "ps1"), _event("PSOURCE", "ps2")])

    assert outcome.value["PSOURCE:ps1"] == "Production Source • Hydro plant"
    assert outcome.value["PSOURCE:ps2"] == "Production Source • ps2"


@pytest.mark.asyncio
async def test_kind_without_lookup_falls_back(records: InMemoryRecordStore) -> None:
    """Product targets have no lookup and keep the raw-id label."""
    resolver = TargetResolver.for_store(records, metrics=RecordingMetrics())

    outcome = await resolver.resolve([_event("PRODUCT", "p1")])

    assert outcome.value == {"PRODUCT:p1": "PRODUCT • p1"}


@pytest.mark.asyncio
async def test_one_query_per_kind_regardless_of_event_count(
    records: InMemoryRecordStore,
) -> None:
    """Labels for many events cost exactly one select per lookup."""
    resolver = TargetResolver.for_store(records, metrics=RecordingMetrics())
    events = [_event("CERT", f"c{i}") for i in range(25)]

    await resolver.resolve(events)

    assert sorted(records.calls) == [
        ("select", Table.certificates),
        ("select", Table.production_sources),
    ]


@pytest.mark.asyncio
async def test_lookup_failure_yields_empty_map_with_warning() -> None:
    """A failing batch load never raises; the map is empty and warned about."""
    records = FailingSelectRecordStore(Table.production_sources)
    await records.insert(
        Table.certificates, {"id": "c1", "type": "REC", "amounts": [{"amount": 1, "unit": "MWh"}]}
    )
    metrics = RecordingMetrics()
    resolver = TargetResolver.for_store(records, metrics=metrics)

    outcome = await resolver.resolve([_event("CERT", "c1")])

    assert outcome.value == {}
    assert not outcome.ok
    assert "PSOURCE" in outcome.warnings[0]
    assert metrics.label_failures == ["PSOURCE"]


@pytest.mark.asyncio
async def test_custom_lookup_is_used() -> None:
    """Lookups are injected per target kind."""

    class ProductLookup:
        async def labels(self) -> dict[str, str]:
            return {"p1": "Product • Batch 7"}

    resolver = TargetResolver({EventTarget.PRODUCT: ProductLookup()}, metrics=RecordingMetrics())

    outcome = await resolver.resolve([_event("PRODUCT", "p1"), _event("CERT", "c9")])

    assert outcome.value == {"PRODUCT:p1": "Product • Batch 7", "CERT:c9": "CERT • c9"}


@pytest.mark.asyncio
async def test_target_options_pins_missing_preselected_target(
    records: InMemoryRecordStore,
) -> None:
    """A preselected id that was not loaded gets a placeholder first."""
    await records.insert(
        Table.certificates, {"id": "c1", "type": "SAF", "amounts": [{"amount": 2, "unit": "t"}]}
    )
    resolver = TargetResolver.for_store(records, metrics=RecordingMetrics())

    outcome = await resolver.target_options(preselected=("PSOURCE", "ps-404"))

    labels = [o.label for o in outcome.value]
    assert labels == ["Production Source • ps-404", "Certificate • SAF"]
    assert outcome.value[0].target == EventTarget.PSOURCE


@pytest.mark.asyncio
async def test_target_options_no_placeholder_for_known_id(records: InMemoryRecordStore) -> None:
    """A preselected id that exists is not duplicated."""
    await records.insert(Table.production_sources, {"id": "ps1", "name": "Farm"})
    resolver = TargetResolver.for_store(records, metrics=RecordingMetrics())

    outcome = await resolver.target_options(preselected=(EventTarget.PSOURCE, "ps1"))

    assert [o.id for o in outcome.value] == ["ps1"]


def test_fallback_label_format() -> None:
    """Raw labels read ``{target} • {target_id}``."""
    assert fallback_label(EventTarget.CERT, "x") == "CERT • x"
    assert fallback_label("OTHER", "y") == "OTHER • y"
