"""SQLAlchemy ORM models for local SQLite database.

Tables:
- sets: LEGO set records
"""

import json
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .schemas import DataSource, SetStatus


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def generate_uuid() -> str:
    """Generate a UUID string for primary keys."""
    return str(uuid4())


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class LegoSet(Base):
    """A LEGO set in the collection."""

    __tablename__ = "sets"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    collection_id: Mapped[Optional[str]] = mapped_column(String(36), index=True)

    # Core identifiers
    set_number: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(300), nullable=False)

    # Catalog data
    theme: Mapped[Optional[str]] = mapped_column(String(200), index=True)
    subtheme: Mapped[Optional[str]] = mapped_column(String(200))
    piece_count: Mapped[Optional[int]] = mapped_column(Integer)
    year: Mapped[Optional[int]] = mapped_column(Integer)
    image_url: Mapped[Optional[str]] = mapped_column(Text)

    # Ownership
    status: Mapped[str] = mapped_column(
        String(30), default=SetStatus.UNOPENED.value, index=True
    )
    has_been_assembled: Mapped[bool] = mapped_column(Boolean, default=False)
    occasion: Mapped[str] = mapped_column(String(200), default="")
    date_received: Mapped[Optional[str]] = mapped_column(String(10))  # ISO date
    owners: Mapped[Optional[str]] = mapped_column(Text)  # JSON array
    notes: Mapped[Optional[str]] = mapped_column(Text)

    data_source: Mapped[str] = mapped_column(String(20), default=DataSource.MANUAL.value)

    created_at: Mapped[str] = mapped_column(String(32), default=utc_now_iso)
    updated_at: Mapped[str] = mapped_column(
        String(32), default=utc_now_iso, onupdate=utc_now_iso
    )

    def __repr__(self) -> str:
        return f"<LegoSet(id={self.id}, set_number='{self.set_number}', name='{self.name}')>"

    def get_owners(self) -> list[str]:
        """Get owners as list."""
        if self.owners:
            return json.loads(self.owners)
        return []

    def set_owners(self, owners: list[str]) -> None:
        """Set owners from list."""
        self.owners = json.dumps(owners) if owners else None
