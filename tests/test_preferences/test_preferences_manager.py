"""Tests for PreferencesManager."""

import json
import logging
from unittest.mock import patch

import pytest
from sqlalchemy.exc import SQLAlchemyError

from brickvault.editor import EditorSaveError
from brickvault.preferences import (
    PreferencesManager,
    PreferencesSaveError,
    ThemePreference,
    UITheme,
    UserPreference,
)
from brickvault.sections import SmartSectionConfig, ThemeSectionConfig, section_key


@pytest.fixture
def manager(memory_db):
    """Create a PreferencesManager with test database."""
    return PreferencesManager(memory_db)


def store_raw(manager: PreferencesManager, user_id: str, raw: str) -> None:
    """Write a home_sections value directly, bypassing validation."""
    with manager.db.get_session() as session:
        session.add(UserPreference(user_id=user_id, home_sections=raw))


class TestPreferencesRecord:
    """Tests for the preferences record."""

    def test_defaults_for_new_user(self, manager):
        """Test a user with no record gets defaults."""
        prefs = manager.get_preferences("alice")
        assert prefs.theme == ThemePreference.SYSTEM
        assert prefs.ui_theme == UITheme.MONO
        assert prefs.home_sections is None

    def test_set_theme(self, manager):
        """Test updating the color scheme."""
        manager.set_theme("alice", ThemePreference.DARK)
        assert manager.get_preferences("alice").theme == ThemePreference.DARK

    def test_set_ui_theme_keeps_other_fields(self, manager):
        """Test partial updates leave other fields alone."""
        manager.set_home_sections("alice", [{"type": "discover"}])
        manager.set_ui_theme("alice", "baseplate")
        prefs = manager.get_preferences("alice")
        assert prefs.ui_theme == UITheme.BASEPLATE
        assert [section_key(s) for s in prefs.home_sections] == ["discover"]
        assert prefs.updated_at is not None

    def test_invalid_theme(self, manager):
        """Test unknown theme values are rejected."""
        with pytest.raises(ValueError):
            manager.set_theme("alice", "sepia")

    def test_theme_only_record_has_no_sections(self, manager):
        """Test a record without a saved layout still reports None."""
        manager.set_theme("alice", ThemePreference.LIGHT)
        assert manager.get_home_sections("alice") is None


class TestHomeSections:
    """Tests for storing the home section list."""

    def test_never_customized(self, manager):
        """Test None distinguishes never-set from an empty list."""
        assert manager.get_home_sections("alice") is None
        defaults = manager.get_home_sections_or_default("alice")
        assert [c.key for c in defaults] == ["in_progress", "discover", "recently_added", "largest"]

    def test_roundtrip_preserves_order(self, manager):
        """Test the stored list comes back in order."""
        configs = [
            ThemeSectionConfig(theme_name="Star Wars"),
            SmartSectionConfig(type="assembled"),
        ]
        manager.set_home_sections("alice", configs)
        assert manager.get_home_sections("alice") == configs

    def test_stored_json_shape(self, manager):
        """Test the stored column uses the JSON layout."""
        manager.set_home_sections("alice", [ThemeSectionConfig(theme_name="City")])
        with manager.db.get_session() as session:
            raw = session.get(UserPreference, "alice").home_sections
        assert json.loads(raw) == [{"type": "theme", "themeName": "City"}]

    def test_empty_list_is_kept(self, manager):
        """Test an empty list is stored, not treated as unset."""
        manager.set_home_sections("alice", [])
        assert manager.get_home_sections("alice") == []
        assert manager.get_home_sections_or_default("alice") == []

    def test_replace_whole_list(self, manager):
        """Test saving replaces rather than merges."""
        manager.set_home_sections("alice", [{"type": "discover"}, {"type": "largest"}])
        manager.set_home_sections("alice", [{"type": "unopened"}])
        assert [c.key for c in manager.get_home_sections("alice")] == ["unopened"]

    def test_users_are_independent(self, manager):
        """Test one user's layout doesn't affect another's."""
        manager.set_home_sections("alice", [])
        assert manager.get_home_sections("bob") is None

    def test_reset(self, manager):
        """Test reset stores the defaults explicitly."""
        manager.set_home_sections("alice", [])
        manager.reset_home_sections("alice")
        assert [c.key for c in manager.get_home_sections("alice")] == [
            "in_progress",
            "discover",
            "recently_added",
            "largest",
        ]

    def test_invalid_entry_rejected_before_write(self, manager):
        """Test a bad entry fails the whole save."""
        manager.set_home_sections("alice", [{"type": "discover"}])
        with pytest.raises(ValueError):
            manager.set_home_sections("alice", [{"type": "largest"}, {"type": "bogus"}])
        assert [c.key for c in manager.get_home_sections("alice")] == ["discover"]

    def test_unknown_stored_entries_dropped(self, manager, caplog):
        """Test entries written by a newer version are skipped."""
        store_raw(manager, "alice", json.dumps([{"type": "future_thing"}, {"type": "assembled"}]))
        with caplog.at_level(logging.WARNING):
            sections = manager.get_home_sections("alice")
        assert [c.key for c in sections] == ["assembled"]
        assert "future_thing" in caplog.text

    @pytest.mark.parametrize("raw", ["{not json", json.dumps({"type": "discover"})])
    def test_corrupt_stored_value(self, manager, raw):
        """Test unreadable layouts fall back to never-customized."""
        store_raw(manager, "alice", raw)
        assert manager.get_home_sections("alice") is None

    def test_write_failure(self, manager):
        """Test store errors surface as PreferencesSaveError."""
        manager.set_home_sections("alice", [{"type": "discover"}])
        with patch.object(manager.db, "get_session", side_effect=SQLAlchemyError("locked")):
            with pytest.raises(PreferencesSaveError):
                manager.set_home_sections("alice", [])
        assert [c.key for c in manager.get_home_sections("alice")] == ["discover"]


class TestEditorIntegration:
    """Tests for editor sessions backed by the store."""

    def test_save_persists_draft(self, manager):
        """Test saving an editor writes the draft."""
        editor = manager.open_home_sections_editor("alice", ["Icons"])
        editor.remove(0)
        editor.add_theme("Icons")
        editor.save()
        assert [c.key for c in manager.get_home_sections("alice")] == [
            "discover",
            "recently_added",
            "largest",
            "theme:icons",
        ]

    def test_cancel_leaves_store_untouched(self, manager):
        """Test cancelling writes nothing."""
        editor = manager.open_home_sections_editor("alice")
        editor.remove(0)
        editor.cancel()
        assert manager.get_home_sections("alice") is None

    def test_reopen_reads_latest(self, manager):
        """Test a new session sees the most recent save."""
        manager.set_home_sections("alice", [{"type": "unopened"}])
        editor = manager.open_home_sections_editor("alice")
        assert [c.key for c in editor.draft] == ["unopened"]

    def test_failed_save_keeps_session_open(self, manager):
        """Test a store failure leaves the draft for a retry."""
        editor = manager.open_home_sections_editor("alice")
        editor.remove(0)
        with patch.object(manager.db, "get_session", side_effect=SQLAlchemyError("locked")):
            with pytest.raises(EditorSaveError):
                editor.save()
        assert editor.is_open
        assert manager.get_home_sections("alice") is None

        editor.save()
        assert len(manager.get_home_sections("alice")) == 3
