"""Schemas for home section configuration.

A user's home screen is an ordered list of section configs. Each entry is
either a smart section (membership computed by a fixed rule) or a theme
section (all sets of one LEGO theme). Stored as JSON in the shape::

    [{"type": "in_progress"}, {"type": "theme", "themeName": "Star Wars"}]
"""

from enum import Enum
from typing import Any, Literal, Optional, Sequence, Union

from pydantic import BaseModel, Field


class SmartSectionType(str, Enum):
    """Identifiers of the built-in smart sections."""

    IN_PROGRESS = "in_progress"
    DISCOVER = "discover"
    RECENTLY_ADDED = "recently_added"
    LARGEST = "largest"
    SMALLEST = "smallest"
    NEWEST_YEAR = "newest_year"
    OLDEST_YEAR = "oldest_year"
    UNOPENED = "unopened"
    ASSEMBLED = "assembled"
    DISASSEMBLED = "disassembled"


THEME_TYPE = "theme"


def theme_section_key(theme_name: str) -> str:
    """Derived key of the theme section for a theme name."""
    return f"{THEME_TYPE}:{theme_name.lower()}"


class SmartSectionConfig(BaseModel):
    """A section driven by one of the smart section rules."""

    type: SmartSectionType

    model_config = {"frozen": True}

    @property
    def key(self) -> str:
        return self.type.value


class ThemeSectionConfig(BaseModel):
    """A section showing every set of one theme."""

    type: Literal["theme"] = THEME_TYPE
    theme_name: str = Field(..., min_length=1, alias="themeName")

    model_config = {"frozen": True, "populate_by_name": True}

    @property
    def key(self) -> str:
        return theme_section_key(self.theme_name)


SectionConfig = Union[SmartSectionConfig, ThemeSectionConfig]


def section_key(config: Union[SectionConfig, dict]) -> str:
    """Derived identity of a config, used for deduplication.

    Smart sections are keyed by their type; theme sections by
    ``theme:<lowercased name>``.
    """
    return parse_section_config(config).key


def parse_section_config(data: Any) -> SectionConfig:
    """Build a config from its stored form.

    Raises:
        ValueError: If the entry has an unknown type or is malformed
            (pydantic's ValidationError is a ValueError).
    """
    if isinstance(data, (SmartSectionConfig, ThemeSectionConfig)):
        return data
    if not isinstance(data, dict):
        raise ValueError(f"Section config must be an object, got {type(data).__name__}")
    if data.get("type") == THEME_TYPE:
        return ThemeSectionConfig.model_validate(data)
    return SmartSectionConfig.model_validate(data)


def dump_section_configs(configs: Sequence[SectionConfig]) -> list[dict]:
    """Serialize configs to their stored JSON-compatible form."""
    return [config.model_dump(mode="json", by_alias=True) for config in configs]


DEFAULT_HOME_SECTIONS: tuple[SectionConfig, ...] = (
    SmartSectionConfig(type=SmartSectionType.IN_PROGRESS),
    SmartSectionConfig(type=SmartSectionType.DISCOVER),
    SmartSectionConfig(type=SmartSectionType.RECENTLY_ADDED),
    SmartSectionConfig(type=SmartSectionType.LARGEST),
)


def default_home_sections() -> list[SectionConfig]:
    """Return a fresh, mutable copy of the built-in default list."""
    return list(DEFAULT_HOME_SECTIONS)


def is_default_config(configs: Optional[Sequence[Union[SectionConfig, dict]]]) -> bool:
    """Check whether configs match the default, key by key and in order."""
    if configs is None:
        return False
    if len(configs) != len(DEFAULT_HOME_SECTIONS):
        return False
    try:
        keys = [section_key(config) for config in configs]
    except ValueError:
        return False
    return keys == [default.key for default in DEFAULT_HOME_SECTIONS]
