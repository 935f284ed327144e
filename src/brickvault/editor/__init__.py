"""Home sections editor."""

from .session import (
    EditorClosedError,
    EditorError,
    EditorSaveError,
    EditorStatus,
    EditorView,
    HomeSectionsEditor,
)

__all__ = [
    "EditorClosedError",
    "EditorError",
    "EditorSaveError",
    "EditorStatus",
    "EditorView",
    "HomeSectionsEditor",
]
