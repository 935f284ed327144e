"""Draft workflow for customizing home sections.

An editor session owns a private draft copy of the user's section list.
Edits only reach the store when the session is saved; cancelling (or just
dropping the session) discards them. Opening the editor again means
creating a new session from the stored list, so stale edits never leak
into the next visit.
"""

import logging
from enum import Enum
from typing import Callable, Iterable, Optional, Sequence, Union

from ..sections.registry import all_smart_types
from ..sections.schemas import (
    SectionConfig,
    SmartSectionConfig,
    SmartSectionType,
    ThemeSectionConfig,
    default_home_sections,
    is_default_config,
    parse_section_config,
    section_key,
    theme_section_key,
)

logger = logging.getLogger(__name__)

SaveFn = Callable[[list[SectionConfig]], None]


class EditorError(Exception):
    """Base exception for editor session errors."""

    pass


class EditorClosedError(EditorError):
    """Raised when a saved or cancelled session is used again."""

    pass


class EditorSaveError(EditorError):
    """Raised when committing the draft fails. The draft is kept."""

    pass


class EditorView(str, Enum):
    """Screen the editor is showing."""

    LIST = "list"
    ADD_SMART = "add-smart"
    ADD_THEME = "add-theme"


class EditorStatus(str, Enum):
    """Lifecycle of an editor session."""

    OPEN = "open"
    SAVED = "saved"
    CANCELLED = "cancelled"


class HomeSectionsEditor:
    """Editor session over a draft copy of a section list."""

    def __init__(
        self,
        initial: Optional[Sequence[Union[SectionConfig, dict]]],
        available_themes: Iterable[str] = (),
        on_save: Optional[SaveFn] = None,
    ):
        """Open a session.

        Args:
            initial: The persisted section list. None opens on the default.
            available_themes: Theme names in the collection, offered by the
                theme picker.
            on_save: Called with the draft on save; should raise on failure.
        """
        if initial is None:
            initial = default_home_sections()
        self._draft: list[SectionConfig] = [parse_section_config(c) for c in initial]
        self._themes = list(available_themes)
        self._on_save = on_save
        self.view = EditorView.LIST
        self.status = EditorStatus.OPEN

    # ========================================================================
    # State
    # ========================================================================

    @property
    def draft(self) -> list[SectionConfig]:
        """Copy of the current draft."""
        return list(self._draft)

    @property
    def is_open(self) -> bool:
        return self.status == EditorStatus.OPEN

    @property
    def is_empty(self) -> bool:
        """True when every section was removed from the draft."""
        return not self._draft

    @property
    def is_default(self) -> bool:
        return is_default_config(self._draft)

    @property
    def can_reset(self) -> bool:
        """Reset is only offered when the draft differs from the default."""
        return not self.is_default

    def _existing_keys(self) -> set[str]:
        return {section_key(config) for config in self._draft}

    @property
    def available_smart_types(self) -> list[SmartSectionType]:
        """Smart types not yet in the draft."""
        existing = self._existing_keys()
        return [t for t in all_smart_types() if t.value not in existing]

    @property
    def available_themes(self) -> list[str]:
        """Themes not yet in the draft."""
        existing = self._existing_keys()
        return [t for t in self._themes if theme_section_key(t) not in existing]

    def _require_open(self) -> None:
        if not self.is_open:
            raise EditorClosedError(f"Editor session is {self.status.value}")

    # ========================================================================
    # Navigation
    # ========================================================================

    def begin_add_smart(self) -> None:
        """Switch to the smart section picker."""
        self._require_open()
        self.view = EditorView.ADD_SMART

    def begin_add_theme(self) -> None:
        """Switch to the theme section picker."""
        self._require_open()
        self.view = EditorView.ADD_THEME

    def back(self) -> None:
        """Escape: leave a picker, or close the editor from the list."""
        self._require_open()
        if self.view != EditorView.LIST:
            self.view = EditorView.LIST
        else:
            self.cancel()

    # ========================================================================
    # Draft Edits
    # ========================================================================

    def remove(self, index: int) -> SectionConfig:
        """Remove and return the section at index."""
        self._require_open()
        self._check_index(index)
        return self._draft.pop(index)

    def move(self, from_index: int, to_index: int) -> None:
        """Move a section, keeping the others in their relative order."""
        self._require_open()
        self._check_index(from_index)
        self._check_index(to_index)
        config = self._draft.pop(from_index)
        self._draft.insert(to_index, config)

    def move_up(self, index: int) -> None:
        """Swap with the previous section. No-op for the first one."""
        self._require_open()
        self._check_index(index)
        if index > 0:
            self.move(index, index - 1)

    def move_down(self, index: int) -> None:
        """Swap with the next section. No-op for the last one."""
        self._require_open()
        self._check_index(index)
        if index < len(self._draft) - 1:
            self.move(index, index + 1)

    def add_smart(self, section_type: Union[SmartSectionType, str]) -> bool:
        """Append a smart section unless it is already in the draft.

        Returns:
            True if the section was appended.
        """
        self._require_open()
        config = SmartSectionConfig(type=SmartSectionType(section_type))
        return self._append(config)

    def add_theme(self, theme_name: str) -> bool:
        """Append a theme section unless that theme is already in the draft.

        Returns:
            True if the section was appended.
        """
        self._require_open()
        theme_name = theme_name.strip()
        if not theme_name:
            raise ValueError("Theme name cannot be empty")
        return self._append(ThemeSectionConfig(theme_name=theme_name))

    def _append(self, config: SectionConfig) -> bool:
        added = section_key(config) not in self._existing_keys()
        if added:
            self._draft.append(config)
        self.view = EditorView.LIST
        return added

    def reset(self) -> None:
        """Replace the draft with the default sections."""
        self._require_open()
        self._draft = default_home_sections()
        self.view = EditorView.LIST

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._draft):
            raise IndexError(f"No section at position {index}")

    # ========================================================================
    # Commit
    # ========================================================================

    def save(self) -> list[SectionConfig]:
        """Commit the draft through the save callback and close.

        Raises:
            EditorSaveError: If the callback fails. The session stays open
                with the draft intact so the save can be retried.
        """
        self._require_open()
        if self._on_save is None:
            raise EditorError("Editor session has no save target")

        draft = self.draft
        try:
            self._on_save(draft)
        except Exception as e:
            logger.error("Saving home sections failed: %s", e)
            raise EditorSaveError(f"Could not save home sections: {e}") from e

        self.status = EditorStatus.SAVED
        return draft

    def cancel(self) -> None:
        """Discard the draft and close."""
        self._require_open()
        self._draft = []
        self.status = EditorStatus.CANCELLED
