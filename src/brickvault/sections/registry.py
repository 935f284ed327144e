"""Registry of smart home sections.

Each smart section maps a fixed identifier to a pure ranking function over
the full set list, plus the text shown around it. Ranking functions accept
anything exposing ``status``, ``theme``, ``piece_count``, ``year`` and
``date_received`` (ORM rows or pydantic schemas) and never mutate their
input.
"""

import random
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Sequence

from .dates import date_sort_key, format_received_date
from .schemas import SectionConfig, SmartSectionType, ThemeSectionConfig

SetList = Sequence[Any]
RankFn = Callable[[SetList, Optional[random.Random]], list]
DetailFn = Callable[[Any], Optional[str]]

CAROUSEL_LIMIT = 10


@dataclass(frozen=True)
class SectionDefinition:
    """Static description of one smart section."""

    title: str
    description: str
    get_sets: RankFn
    empty_message: str
    view_all_filter: Optional[str] = None
    # Max items to show in the carousel; None means show all
    max_items: Optional[int] = None
    get_detail: Optional[DetailFn] = None


def _status(lego_set: Any) -> str:
    status = lego_set.status
    return getattr(status, "value", status)


def _with_status(*statuses: str) -> RankFn:
    def rank(sets: SetList, rng: Optional[random.Random]) -> list:
        return [s for s in sets if _status(s) in statuses]

    return rank


def _sorted_by(attr: str, descending: bool) -> RankFn:
    def rank(sets: SetList, rng: Optional[random.Random]) -> list:
        present = [s for s in sets if getattr(s, attr)]
        return sorted(present, key=lambda s: getattr(s, attr), reverse=descending)

    return rank


def _discover(sets: SetList, rng: Optional[random.Random]) -> list:
    picks = [s for s in sets if _status(s) in ("unopened", "disassembled")]
    (rng or random).shuffle(picks)
    return picks


def _recently_added(sets: SetList, rng: Optional[random.Random]) -> list:
    dated = [s for s in sets if s.date_received]
    return sorted(dated, key=lambda s: date_sort_key(s.date_received), reverse=True)


def piece_detail(lego_set: Any) -> Optional[str]:
    if not lego_set.piece_count:
        return None
    return f"{lego_set.piece_count:,} pieces"


def year_detail(lego_set: Any) -> Optional[str]:
    return str(lego_set.year) if lego_set.year else None


def theme_detail(lego_set: Any) -> Optional[str]:
    return lego_set.theme or None


def received_detail(lego_set: Any) -> Optional[str]:
    return format_received_date(lego_set.date_received)


SMART_SECTIONS: Mapping[SmartSectionType, SectionDefinition] = MappingProxyType({
    SmartSectionType.IN_PROGRESS: SectionDefinition(
        title="In Progress",
        description="Sets currently being built",
        get_sets=_with_status("in_progress", "rebuild_in_progress"),
        empty_message="No builds in progress",
        view_all_filter="status=in_progress",
        get_detail=piece_detail,
    ),
    SmartSectionType.DISCOVER: SectionDefinition(
        title="Discover Something New",
        description="Random picks from your unopened or disassembled sets",
        get_sets=_discover,
        empty_message="All sets have been built!",
        max_items=CAROUSEL_LIMIT,
        get_detail=piece_detail,
    ),
    SmartSectionType.RECENTLY_ADDED: SectionDefinition(
        title="Recently Added",
        description="Sets sorted by date received",
        get_sets=_recently_added,
        empty_message="No sets with dates yet",
        max_items=CAROUSEL_LIMIT,
        get_detail=received_detail,
    ),
    SmartSectionType.LARGEST: SectionDefinition(
        title="Biggest Builds",
        description="Your sets with the most pieces",
        get_sets=_sorted_by("piece_count", descending=True),
        empty_message="No piece counts available",
        max_items=CAROUSEL_LIMIT,
        get_detail=piece_detail,
    ),
    SmartSectionType.SMALLEST: SectionDefinition(
        title="Quick Builds",
        description="Your sets with the fewest pieces",
        get_sets=_sorted_by("piece_count", descending=False),
        empty_message="No piece counts available",
        max_items=CAROUSEL_LIMIT,
        get_detail=piece_detail,
    ),
    SmartSectionType.NEWEST_YEAR: SectionDefinition(
        title="Newest Releases",
        description="Sets from the most recent years",
        get_sets=_sorted_by("year", descending=True),
        empty_message="No release years available",
        max_items=CAROUSEL_LIMIT,
        get_detail=year_detail,
    ),
    SmartSectionType.OLDEST_YEAR: SectionDefinition(
        title="Vintage Collection",
        description="Your oldest sets by release year",
        get_sets=_sorted_by("year", descending=False),
        empty_message="No release years available",
        max_items=CAROUSEL_LIMIT,
        get_detail=year_detail,
    ),
    SmartSectionType.UNOPENED: SectionDefinition(
        title="Unopened",
        description="Sets still sealed in the box",
        get_sets=_with_status("unopened"),
        empty_message="No unopened sets",
        view_all_filter="status=unopened",
        get_detail=theme_detail,
    ),
    SmartSectionType.ASSEMBLED: SectionDefinition(
        title="On Display",
        description="Completed and assembled sets",
        get_sets=_with_status("assembled"),
        empty_message="No assembled sets",
        view_all_filter="status=assembled",
        get_detail=theme_detail,
    ),
    SmartSectionType.DISASSEMBLED: SectionDefinition(
        title="Ready for Rebuild",
        description="Disassembled sets waiting for another go",
        get_sets=_with_status("disassembled"),
        empty_message="No disassembled sets",
        view_all_filter="status=disassembled",
        get_detail=theme_detail,
    ),
})


def get_definition(section_type: SmartSectionType) -> SectionDefinition:
    """Look up a smart section definition.

    Raises:
        ValueError: If the type is not a known smart section.
    """
    return SMART_SECTIONS[SmartSectionType(section_type)]


def all_smart_types() -> list[SmartSectionType]:
    """All smart section types, in picker order."""
    return list(SMART_SECTIONS)


def smart_section_title(section_type: SmartSectionType) -> str:
    return get_definition(section_type).title


def smart_section_description(section_type: SmartSectionType) -> str:
    return get_definition(section_type).description


def section_label(config: SectionConfig) -> str:
    """Human-readable name of a configured section."""
    if isinstance(config, ThemeSectionConfig):
        return config.theme_name
    return smart_section_title(config.type)
