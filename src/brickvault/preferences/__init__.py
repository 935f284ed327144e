"""User preferences module."""

from .manager import PreferencesManager, PreferencesSaveError
from .models import UserPreference
from .schemas import ThemePreference, UITheme, UserPreferences

__all__ = [
    "PreferencesManager",
    "PreferencesSaveError",
    "ThemePreference",
    "UITheme",
    "UserPreference",
    "UserPreferences",
]
