"""Resolve a user's section configuration into populated home sections."""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Sequence, Union
from urllib.parse import quote

from .registry import DetailFn, SectionDefinition, SetList, get_definition, piece_detail
from .schemas import (
    DEFAULT_HOME_SECTIONS,
    SectionConfig,
    SmartSectionConfig,
    ThemeSectionConfig,
    parse_section_config,
)

logger = logging.getLogger(__name__)

ConfigLike = Union[SectionConfig, dict]

# Characters JavaScript's encodeURIComponent leaves unescaped, beyond quote()'s own
_URI_SAFE = "!'()*"


@dataclass
class ResolvedSection:
    """A section ready to render. Computed fresh on every resolution."""

    id: str
    title: str
    sets: list
    empty_message: str
    max_items: Optional[int] = None
    view_all_filter: Optional[str] = None
    detail: Optional[DetailFn] = field(default=None, repr=False, compare=False)

    @property
    def visible_sets(self) -> list:
        """Sets shown in the carousel, after the display cap."""
        if self.max_items is None:
            return list(self.sets)
        return self.sets[: self.max_items]

    @property
    def has_more(self) -> bool:
        return len(self.visible_sets) < len(self.sets)

    def detail_for(self, lego_set: Any) -> Optional[str]:
        """Short per-card detail line, e.g. piece count or release year."""
        return self.detail(lego_set) if self.detail else None

    def to_dict(self) -> dict:
        """Renderer payload; optional keys are left out when unset."""
        data = {
            "id": self.id,
            "title": self.title,
            "sets": self.sets,
            "emptyMessage": self.empty_message,
        }
        if self.max_items is not None:
            data["maxItems"] = self.max_items
        if self.view_all_filter is not None:
            data["viewAllFilter"] = self.view_all_filter
        return data


class HomeState(str, Enum):
    """What the home screen should show."""

    EMPTY_COLLECTION = "empty_collection"
    NO_SECTIONS = "no_sections"
    ALL_EMPTY = "all_empty"
    POPULATED = "populated"


@dataclass
class HomeView:
    """Resolved home screen."""

    state: HomeState
    sections: list[ResolvedSection] = field(default_factory=list)


def theme_definition(theme_name: str) -> SectionDefinition:
    """Synthesize the definition of a theme section."""
    wanted = theme_name.lower()

    def rank(sets: SetList, rng: Optional[random.Random]) -> list:
        return [s for s in sets if s.theme and s.theme.lower() == wanted]

    return SectionDefinition(
        title=theme_name,
        description=f"All your {theme_name} sets",
        get_sets=rank,
        empty_message=f"No {theme_name} sets",
        view_all_filter=f"theme={quote(theme_name, safe=_URI_SAFE)}",
        get_detail=piece_detail,
    )


def _coerce(config: ConfigLike) -> Optional[SectionConfig]:
    try:
        return parse_section_config(config)
    except ValueError:
        logger.warning("Skipping unknown home section config: %r", config)
        return None


def resolve_section(
    config: ConfigLike,
    sets: SetList,
    rng: Optional[random.Random] = None,
) -> Optional[ResolvedSection]:
    """Resolve one config against the set list.

    Returns None for configs this version doesn't understand. The result may
    hold no sets; callers decide whether to show it.
    """
    parsed = _coerce(config)
    if parsed is None:
        return None

    if isinstance(parsed, ThemeSectionConfig):
        definition = theme_definition(parsed.theme_name)
    elif isinstance(parsed, SmartSectionConfig):
        definition = get_definition(parsed.type)
    else:
        raise TypeError(f"Unhandled section config: {parsed!r}")

    return ResolvedSection(
        id=parsed.key,
        title=definition.title,
        sets=definition.get_sets(sets, rng),
        empty_message=definition.empty_message,
        max_items=definition.max_items,
        view_all_filter=definition.view_all_filter,
        detail=definition.get_detail,
    )


def resolve_sections(
    configs: Optional[Sequence[ConfigLike]],
    sets: SetList,
    rng: Optional[random.Random] = None,
) -> list[ResolvedSection]:
    """Resolve configs into the ordered list of non-empty sections.

    Output order follows ``configs`` exactly. ``None`` means the user never
    customized their home and the default list applies. Sections that
    resolve to no sets are dropped.

    The discover section reshuffles on every call; pass a seeded ``rng`` to
    keep its order stable across calls.
    """
    if configs is None:
        configs = DEFAULT_HOME_SECTIONS

    resolved = []
    for config in configs:
        section = resolve_section(config, sets, rng)
        if section is not None and section.sets:
            resolved.append(section)
    return resolved


def build_home(
    configs: Optional[Sequence[ConfigLike]],
    sets: SetList,
    rng: Optional[random.Random] = None,
) -> HomeView:
    """Resolve sections and classify which home screen state applies."""
    if not sets:
        return HomeView(state=HomeState.EMPTY_COLLECTION)
    if configs is not None and len(configs) == 0:
        return HomeView(state=HomeState.NO_SECTIONS)

    sections = resolve_sections(configs, sets, rng)
    if not sections:
        return HomeView(state=HomeState.ALL_EMPTY)
    return HomeView(state=HomeState.POPULATED, sections=sections)


def available_themes(sets: SetList) -> list[str]:
    """Distinct theme names in the collection, sorted case-insensitively.

    Names differing only in case collapse to the first spelling seen.
    """
    seen: dict[str, str] = {}
    for lego_set in sets:
        theme = (lego_set.theme or "").strip()
        if theme and theme.lower() not in seen:
            seen[theme.lower()] = theme
    return sorted(seen.values(), key=str.lower)
