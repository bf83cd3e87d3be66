"""Count, top-N and geography summaries over entity collections.

Everything here is pure and synchronous. Items may be pydantic records or
plain row dicts.
"""

from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, TypeVar

from eacledger.stats.countries import country_display_name

E = TypeVar("E", bound=Enum)


@dataclass(frozen=True)
class ValueCount:
    """A categorical value and how often it occurred."""

    value: Any
    count: int


@dataclass(frozen=True)
class CountryCount:
    """A canonical country key, its display name and frequency."""

    key: str
    name: str
    count: int


@dataclass(frozen=True)
class FieldSummary:
    """Frequency table and top-N for one field."""

    counts: Mapping[Any, int]
    top: tuple[ValueCount, ...]


@dataclass(frozen=True)
class Summary:
    """Immutable summary of one collection."""

    total: int
    fields: Mapping[str, FieldSummary] = field(default_factory=lambda: MappingProxyType({}))
    unique_countries: int = 0
    top_countries: tuple[CountryCount, ...] = ()


def field_value(item: Any, name: str) -> Any:
    """Read ``name`` from a mapping key or an attribute."""
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def top_values(counts: Counter, n: int) -> tuple[ValueCount, ...]:
    """Top ``n`` by descending count; ties keep first-occurrence order.

    ``Counter`` preserves insertion order and ``sorted`` is stable, so equal
    counts stay in the order their values were first seen.
    """
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    return tuple(ValueCount(value=v, count=c) for v, c in ranked[:n])


def summarize_field(items: Sequence[Any], name: str, *, top_n: int = 3) -> FieldSummary:
    """Frequency table for one field; list values count once per element."""
    counts: Counter = Counter()
    for item in items:
        value = field_value(item, name)
        if value is None:
            continue
        if isinstance(value, list | tuple):
            counts.update(_plain(v) for v in value if v is not None)
        else:
            counts[_plain(value)] += 1
    return FieldSummary(counts=MappingProxyType(dict(counts)), top=top_values(counts, top_n))


def country_keys(location: Any) -> list[str]:
    """Lower-cased country keys of a single location or a list of locations."""
    locations = location if isinstance(location, list | tuple) else [location]
    keys = []
    for loc in locations:
        if loc is None:
            continue
        country = field_value(loc, "country")
        if isinstance(country, str) and country.strip():
            keys.append(country.strip().lower())
    return keys


def summarize(
    items: Iterable[Any],
    fields: Iterable[str] = (),
    *,
    top_n: int = 3,
    country_field: str | None = "location",
) -> Summary:
    """Summarize a collection.

    Args:
        items: Records or row dicts
        fields: Categorical fields to tabulate
        top_n: Length of every top list
        country_field: Field holding a location (or list of locations);
            None skips geography

    Returns:
        Summary with totals, per-field tables and geography
    """
    items = list(items)
    field_summaries = {name: summarize_field(items, name, top_n=top_n) for name in fields}

    countries: Counter = Counter()
    names: dict[str, str] = {}
    if country_field:
        for item in items:
            for key in country_keys(field_value(item, country_field)):
                countries[key] += 1
                if key not in names:
                    names[key] = country_display_name(key)

    top_countries = tuple(
        CountryCount(key=vc.value, name=names[vc.value], count=vc.count)
        for vc in top_values(countries, top_n)
    )

    return Summary(
        total=len(items),
        fields=MappingProxyType(field_summaries),
        unique_countries=len(countries),
        top_countries=top_countries,
    )


def count_by_enum(items: Iterable[Any], name: str, enum: type[E]) -> dict[E, int]:
    """Count per enum member, zeros included, in member order."""
    counts = {member: 0 for member in enum}
    for item in items:
        value = field_value(item, name)
        try:
            member = enum(_plain(value))
        except ValueError:
            continue
        counts[member] += 1
    return counts


def main_roles(*collections: Iterable[Any]) -> dict[str, str]:
    """Most common organization role per org id across collections.

    Entries without an org id or role are skipped. On a tie the role seen
    first wins.
    """
    role_counts: dict[str, Counter] = {}
    for collection in collections:
        for item in collection:
            for org in field_value(item, "organizations") or []:
                org_id = field_value(org, "org_id") or field_value(org, "orgId")
                role = _plain(field_value(org, "role"))
                if not org_id or not role:
                    continue
                role_counts.setdefault(org_id, Counter())[role] += 1

    return {
        org_id: top_values(counts, 1)[0].value
        for org_id, counts in role_counts.items()
        if counts
    }
