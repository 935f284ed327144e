"""Schemas for user preferences."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from ..sections.schemas import SectionConfig


class ThemePreference(str, Enum):
    """Color scheme preference."""

    SYSTEM = "system"
    LIGHT = "light"
    DARK = "dark"


class UITheme(str, Enum):
    """UI style."""

    BASEPLATE = "baseplate"
    MONO = "mono"


class UserPreferences(BaseModel):
    """A user's stored preferences.

    ``home_sections`` is None until the user saves a custom home layout.
    """

    user_id: str
    theme: ThemePreference = ThemePreference.SYSTEM
    ui_theme: UITheme = UITheme.MONO
    home_sections: Optional[list[SectionConfig]] = None
    updated_at: Optional[datetime] = None
