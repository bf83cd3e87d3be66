"""SQLAlchemy ORM models for the five core tables.

Reference arrays (``documents``, ``related_*``) are plain JSON id lists with
no foreign keys; the store never enforces that referenced rows exist.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from eacledger.db.store import Table

# JSONB on PostgreSQL, generic JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class TimestampMixin:
    """created_at/updated_at maintained on the client side."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )


class DocumentRow(TimestampMixin, Base):
    """Document metadata row - the blob itself lives in the object store."""

    __tablename__ = Table.documents.value

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    file_type: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    metadata_: Mapped[list[dict[str, Any]] | None] = mapped_column(
        "metadata", JSONType, nullable=True
    )
    organizations: Mapped[list[dict[str, Any]] | None] = mapped_column(JSONType, nullable=True)


class CertificateRow(TimestampMixin, Base):
    """Environmental attribute certificate row."""

    __tablename__ = Table.certificates.value

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    type: Mapped[str] = mapped_column(Text, nullable=False)
    type2: Mapped[str | None] = mapped_column(Text, nullable=True)
    amounts: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False)
    external_ids: Mapped[list[dict[str, Any]] | None] = mapped_column(JSONType, nullable=True)
    emissions: Mapped[list[dict[str, Any]] | None] = mapped_column(JSONType, nullable=True)
    links: Mapped[list[str] | None] = mapped_column(JSONType, nullable=True)
    documents: Mapped[list[str] | None] = mapped_column(JSONType, nullable=True)
    related_certificates: Mapped[list[str] | None] = mapped_column(JSONType, nullable=True)
    metadata_: Mapped[list[dict[str, Any]] | None] = mapped_column(
        "metadata", JSONType, nullable=True
    )
    organizations: Mapped[list[dict[str, Any]] | None] = mapped_column(JSONType, nullable=True)
    production_source_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    production_tech: Mapped[str | None] = mapped_column(Text, nullable=True)


class ProductionSourceRow(TimestampMixin, Base):
    """Production source row."""

    __tablename__ = Table.production_sources.value

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    technology: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    eac_types: Mapped[list[str] | None] = mapped_column(JSONType, nullable=True)
    labels: Mapped[list[str] | None] = mapped_column(JSONType, nullable=True)
    # ISO date string
    operation_start_date: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    links: Mapped[list[str] | None] = mapped_column(JSONType, nullable=True)
    documents: Mapped[list[str] | None] = mapped_column(JSONType, nullable=True)
    external_ids: Mapped[list[dict[str, Any]] | None] = mapped_column(JSONType, nullable=True)
    related_production_sources: Mapped[list[str] | None] = mapped_column(
        JSONType, nullable=True
    )
    organizations: Mapped[list[dict[str, Any]] | None] = mapped_column(JSONType, nullable=True)
    metadata_: Mapped[list[dict[str, Any]] | None] = mapped_column(
        "metadata", JSONType, nullable=True
    )


class OrganizationRow(TimestampMixin, Base):
    """Organization row."""

    __tablename__ = Table.organizations.value

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    name_expanded: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    contacts: Mapped[list[dict[str, Any]] | None] = mapped_column(JSONType, nullable=True)
    location: Mapped[list[dict[str, Any]] | None] = mapped_column(JSONType, nullable=True)
    external_ids: Mapped[list[dict[str, Any]] | None] = mapped_column(JSONType, nullable=True)
    documents: Mapped[list[str] | None] = mapped_column(JSONType, nullable=True)


class EventRow(TimestampMixin, Base):
    """Timeline event row - ``target_id`` is a weak, untyped reference."""

    __tablename__ = Table.events.value
    __table_args__ = (Index("idx_events_target", "target", "target_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    target: Mapped[str] = mapped_column(Text, nullable=False)
    target_id: Mapped[str] = mapped_column(String(36), nullable=False)
    type: Mapped[str] = mapped_column(Text, nullable=False)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)
    dates: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    location: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    organizations: Mapped[list[dict[str, Any]] | None] = mapped_column(JSONType, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    documents: Mapped[list[str] | None] = mapped_column(JSONType, nullable=True)
    links: Mapped[list[str] | None] = mapped_column(JSONType, nullable=True)
    metadata_: Mapped[list[dict[str, Any]] | None] = mapped_column(
        "metadata", JSONType, nullable=True
    )


ROW_MODELS: dict[Table, type[Base]] = {
    Table.documents: DocumentRow,
    Table.certificates: CertificateRow,
    Table.production_sources: ProductionSourceRow,
    Table.organizations: OrganizationRow,
    Table.events: EventRow,
}
