"""Database models for user preferences."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from ..db.models import Base


class UserPreference(Base):
    """One preferences record per user."""

    __tablename__ = "user_preferences"

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    theme: Mapped[str] = mapped_column(String(20), default="system")
    ui_theme: Mapped[str] = mapped_column(String(20), default="mono")
    # JSON array of section configs; NULL until the user customizes their home
    home_sections: Mapped[Optional[str]] = mapped_column(Text)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )
