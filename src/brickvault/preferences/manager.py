"""Manager for user preferences, including the home section layout."""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Optional, Sequence, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db.sqlite import Database, get_db
from ..editor.session import HomeSectionsEditor
from ..sections.schemas import (
    SectionConfig,
    default_home_sections,
    dump_section_configs,
    parse_section_config,
)
from .models import UserPreference
from .schemas import ThemePreference, UITheme, UserPreferences

logger = logging.getLogger(__name__)


class PreferencesSaveError(Exception):
    """Raised when preferences could not be written. Nothing was applied."""

    pass


class PreferencesManager:
    """Reads and writes per-user preferences."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize preferences manager.

        Args:
            db: Database instance
        """
        self.db = db or get_db()

    def _get_row(self, session: Session, user_id: str) -> Optional[UserPreference]:
        return session.get(UserPreference, user_id)

    def _decode_sections(self, user_id: str, raw: Optional[str]) -> Optional[list[SectionConfig]]:
        """Parse stored section JSON, dropping entries this version can't read."""
        if raw is None:
            return None
        try:
            entries = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt home sections for user %s", user_id)
            return None
        if not isinstance(entries, list):
            logger.warning("Ignoring non-list home sections for user %s", user_id)
            return None

        sections = []
        for entry in entries:
            try:
                sections.append(parse_section_config(entry))
            except ValueError:
                logger.warning("Dropping unknown home section %r for user %s", entry, user_id)
        return sections

    def _write(self, user_id: str, **fields: Any) -> None:
        """Upsert fields on the user's record in one transaction."""
        try:
            with self.db.get_session() as session:
                row = self._get_row(session, user_id)
                if row is None:
                    row = UserPreference(user_id=user_id)
                    session.add(row)
                for field, value in fields.items():
                    setattr(row, field, value)
                row.updated_at = datetime.now(timezone.utc)
        except SQLAlchemyError as e:
            logger.error("Failed to save preferences for user %s: %s", user_id, e)
            raise PreferencesSaveError(f"Could not save preferences: {e}") from e

    # ========================================================================
    # Preferences Record
    # ========================================================================

    def get_preferences(self, user_id: str) -> UserPreferences:
        """Get a user's preferences, with defaults for anything unset."""
        with self.db.get_session() as session:
            row = self._get_row(session, user_id)
            if row is None:
                return UserPreferences(user_id=user_id)

            return UserPreferences(
                user_id=user_id,
                theme=ThemePreference(row.theme),
                ui_theme=UITheme(row.ui_theme),
                home_sections=self._decode_sections(user_id, row.home_sections),
                updated_at=row.updated_at,
            )

    def set_theme(self, user_id: str, theme: ThemePreference) -> None:
        """Update the color scheme preference."""
        self._write(user_id, theme=ThemePreference(theme).value)

    def set_ui_theme(self, user_id: str, ui_theme: UITheme) -> None:
        """Update the UI style preference."""
        self._write(user_id, ui_theme=UITheme(ui_theme).value)

    # ========================================================================
    # Home Sections
    # ========================================================================

    def get_home_sections(self, user_id: str) -> Optional[list[SectionConfig]]:
        """Get the stored section list, or None if never customized."""
        with self.db.get_session() as session:
            row = self._get_row(session, user_id)
            if row is None:
                return None
            return self._decode_sections(user_id, row.home_sections)

    def get_home_sections_or_default(self, user_id: str) -> list[SectionConfig]:
        """Get the stored section list, falling back to the default."""
        sections = self.get_home_sections(user_id)
        if sections is None:
            return default_home_sections()
        return sections

    def set_home_sections(
        self, user_id: str, sections: Sequence[Union[SectionConfig, dict]]
    ) -> list[SectionConfig]:
        """Replace the user's whole section list.

        Raises:
            ValueError: If an entry is not a valid section config.
            PreferencesSaveError: If the store rejects the write.
        """
        parsed = [parse_section_config(s) for s in sections]
        self._write(user_id, home_sections=json.dumps(dump_section_configs(parsed)))
        logger.info("Saved %d home sections for user %s", len(parsed), user_id)
        return parsed

    def reset_home_sections(self, user_id: str) -> list[SectionConfig]:
        """Store the default section list."""
        return self.set_home_sections(user_id, default_home_sections())

    def open_home_sections_editor(
        self, user_id: str, available_themes: Iterable[str] = ()
    ) -> HomeSectionsEditor:
        """Start an editor session seeded from the freshly stored list."""
        return HomeSectionsEditor(
            self.get_home_sections_or_default(user_id),
            available_themes=available_themes,
            on_save=lambda draft: self.set_home_sections(user_id, draft),
        )
