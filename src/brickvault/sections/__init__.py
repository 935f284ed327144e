"""Home sections: smart section registry and resolver."""

from .dates import date_sort_key, format_received_date
from .registry import (
    SMART_SECTIONS,
    SectionDefinition,
    all_smart_types,
    get_definition,
    section_label,
    smart_section_description,
    smart_section_title,
)
from .resolver import (
    HomeState,
    HomeView,
    ResolvedSection,
    available_themes,
    build_home,
    resolve_section,
    resolve_sections,
    theme_definition,
)
from .schemas import (
    DEFAULT_HOME_SECTIONS,
    SectionConfig,
    SmartSectionConfig,
    SmartSectionType,
    ThemeSectionConfig,
    default_home_sections,
    dump_section_configs,
    is_default_config,
    parse_section_config,
    section_key,
    theme_section_key,
)

__all__ = [
    "DEFAULT_HOME_SECTIONS",
    "HomeState",
    "HomeView",
    "ResolvedSection",
    "SMART_SECTIONS",
    "SectionConfig",
    "SectionDefinition",
    "SmartSectionConfig",
    "SmartSectionType",
    "ThemeSectionConfig",
    "all_smart_types",
    "available_themes",
    "build_home",
    "date_sort_key",
    "default_home_sections",
    "dump_section_configs",
    "format_received_date",
    "get_definition",
    "is_default_config",
    "parse_section_config",
    "resolve_section",
    "resolve_sections",
    "section_key",
    "section_label",
    "smart_section_description",
    "smart_section_title",
    "theme_definition",
    "theme_section_key",
]
