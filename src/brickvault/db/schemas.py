"""Pydantic schemas for set records.

These schemas describe a LEGO set as it moves between the CLI, the local
SQLite store and the home-section engine.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class SetStatus(str, Enum):
    """Build status of a set in the collection."""

    UNOPENED = "unopened"  # Still sealed in box
    IN_PROGRESS = "in_progress"  # Currently being built
    REBUILD_IN_PROGRESS = "rebuild_in_progress"
    ASSEMBLED = "assembled"
    DISASSEMBLED = "disassembled"  # Was built, now taken apart


class DataSource(str, Enum):
    """Source of set metadata."""

    REBRICKABLE = "rebrickable"
    BRICKSET = "brickset"
    BRICKLINK = "bricklink"
    MANUAL = "manual"


# ============================================================================
# Set Schemas
# ============================================================================


class SetBase(BaseModel):
    """Base set fields common to create/update operations."""

    set_number: str = Field(..., min_length=1, description="Catalog number, e.g. 75192-1")
    name: str = Field(..., min_length=1)
    collection_id: Optional[str] = None

    # Catalog data
    theme: Optional[str] = None
    subtheme: Optional[str] = None
    piece_count: Optional[int] = Field(None, ge=0)
    year: Optional[int] = Field(None, ge=1949, le=2100)
    image_url: Optional[str] = None

    # Ownership
    status: SetStatus = Field(default=SetStatus.UNOPENED)
    has_been_assembled: bool = False
    occasion: str = ""
    date_received: Optional[date] = None
    owners: list[str] = Field(default_factory=list)
    notes: Optional[str] = None

    data_source: DataSource = DataSource.MANUAL

    @field_validator("theme", "subtheme", mode="before")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat blank catalog strings as missing."""
        if v is None:
            return None
        v = str(v).strip()
        return v or None


class SetCreate(SetBase):
    """Schema for creating a new set."""

    pass


class SetUpdate(BaseModel):
    """Schema for updating an existing set. All fields optional."""

    name: Optional[str] = Field(None, min_length=1)
    theme: Optional[str] = None
    subtheme: Optional[str] = None
    piece_count: Optional[int] = Field(None, ge=0)
    year: Optional[int] = Field(None, ge=1949, le=2100)
    status: Optional[SetStatus] = None
    occasion: Optional[str] = None
    date_received: Optional[date] = None
    owners: Optional[list[str]] = None
    notes: Optional[str] = None


class SetResponse(BaseModel):
    """Read-only view of a stored set.

    ``date_received`` stays a string: rows written by older versions may hold
    values the ranking code has to normalize itself.
    """

    id: str
    set_number: str
    name: str
    collection_id: Optional[str] = None
    theme: Optional[str] = None
    subtheme: Optional[str] = None
    piece_count: Optional[int] = None
    year: Optional[int] = None
    status: SetStatus
    has_been_assembled: bool = False
    occasion: str = ""
    date_received: Optional[str] = None
    notes: Optional[str] = None
    data_source: DataSource = DataSource.MANUAL
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
