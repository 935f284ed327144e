"""Tests for resolving section configs into home sections."""

import logging
import random

from brickvault.db.schemas import SetStatus
from brickvault.sections import (
    HomeState,
    SmartSectionConfig,
    SmartSectionType,
    ThemeSectionConfig,
    available_themes,
    build_home,
    resolve_section,
    resolve_sections,
    theme_definition,
)


def ids(sections) -> list[str]:
    return [section.id for section in sections]


class TestResolveSections:
    """Tests for resolve_sections."""

    def test_none_uses_defaults(self, sample_sets):
        """Test an unset config resolves the default list."""
        sections = resolve_sections(None, sample_sets, random.Random(0))
        assert ids(sections) == ["in_progress", "discover", "recently_added", "largest"]

    def test_output_follows_config_order(self, sample_sets):
        """Test sections come out in the configured order."""
        configs = [
            SmartSectionConfig(type=SmartSectionType.OLDEST_YEAR),
            ThemeSectionConfig(theme_name="Icons"),
            SmartSectionConfig(type=SmartSectionType.IN_PROGRESS),
        ]
        assert ids(resolve_sections(configs, sample_sets)) == [
            "oldest_year",
            "theme:icons",
            "in_progress",
        ]

    def test_empty_sections_are_dropped(self, make_set):
        """Test a section with no matching sets is omitted."""
        sets = [make_set(status=SetStatus.ASSEMBLED) for _ in range(3)]
        sections = resolve_sections(
            [{"type": "unopened"}, {"type": "assembled"}],
            sets,
        )
        assert len(sections) == 1
        assert sections[0].title == "On Display"
        assert len(sections[0].sets) == 3

    def test_empty_config_gives_no_sections(self, sample_sets):
        """Test an explicit empty list is not replaced by defaults."""
        assert resolve_sections([], sample_sets) == []

    def test_unknown_entries_skipped(self, sample_sets, caplog):
        """Test configs from newer versions are skipped with a warning."""
        configs = [{"type": "most_expensive"}, {"type": "assembled"}, "junk"]
        with caplog.at_level(logging.WARNING):
            sections = resolve_sections(configs, sample_sets)
        assert ids(sections) == ["assembled"]
        assert "most_expensive" in caplog.text

    def test_accepts_stored_dicts(self, sample_sets):
        """Test configs can be given in their stored JSON form."""
        sections = resolve_sections([{"type": "theme", "themeName": "Technic"}], sample_sets)
        assert [s.name for s in sections[0].sets] == ["Lamborghini Sian"]

    def test_removing_a_config_removes_only_its_section(self, sample_sets):
        """Test dropping one config leaves the other sections unchanged."""
        configs = [
            {"type": "largest"},
            {"type": "theme", "themeName": "Icons"},
            {"type": "assembled"},
        ]
        full = resolve_sections(configs, sample_sets)
        reduced = resolve_sections([configs[0], configs[2]], sample_sets)

        assert ids(reduced) == [full[0].id, full[2].id]
        assert reduced[0].sets == full[0].sets
        assert reduced[1].sets == full[2].sets

    def test_does_not_mutate_sets(self, sample_sets):
        """Test resolution leaves the input list alone."""
        before = list(sample_sets)
        resolve_sections(None, sample_sets, random.Random(5))
        assert sample_sets == before


class TestThemeSections:
    """Tests for theme sections."""

    def test_case_insensitive_match(self, sample_sets):
        """Test theme matching ignores case."""
        section = resolve_section(ThemeSectionConfig(theme_name="Star Wars"), sample_sets)
        assert section.id == "theme:star wars"
        assert section.title == "Star Wars"
        assert [s.name for s in section.sets] == ["Millennium Falcon", "Razor Crest"]

    def test_view_all_filter_is_url_encoded(self):
        """Test the theme filter escapes its value."""
        assert theme_definition("Star Wars").view_all_filter == "theme=Star%20Wars"
        assert theme_definition("Harry Potter & Co").view_all_filter == (
            "theme=Harry%20Potter%20%26%20Co"
        )

    def test_view_all_filter_keeps_uri_safe_punctuation(self):
        """Test punctuation left alone by URI component encoding stays literal."""
        assert theme_definition("Pirates (Classic)!").view_all_filter == (
            "theme=Pirates%20(Classic)!"
        )
        assert theme_definition("Jurassic World*'").view_all_filter == (
            "theme=Jurassic%20World*'"
        )

    def test_empty_message_and_no_cap(self):
        """Test theme sections show every set."""
        definition = theme_definition("Ninjago")
        assert definition.empty_message == "No Ninjago sets"
        assert definition.max_items is None

    def test_no_match_resolves_empty(self, sample_sets):
        """Test resolve_section keeps an empty result for callers to decide."""
        section = resolve_section(ThemeSectionConfig(theme_name="Ninjago"), sample_sets)
        assert section is not None
        assert section.sets == []


class TestResolvedSection:
    """Tests for ResolvedSection helpers."""

    def test_visible_sets_capped(self, make_set):
        """Test carousels show at most their cap."""
        sets = [make_set(piece_count=100 + i) for i in range(12)]
        section = resolve_section({"type": "largest"}, sets)
        assert len(section.sets) == 12
        assert len(section.visible_sets) == 10
        assert section.has_more is True
        assert section.visible_sets[0].piece_count == 111

    def test_uncapped_section_shows_all(self, make_set):
        """Test sections without a cap show everything."""
        sets = [make_set(status=SetStatus.UNOPENED) for _ in range(12)]
        section = resolve_section({"type": "unopened"}, sets)
        assert len(section.visible_sets) == 12
        assert section.has_more is False

    def test_detail_for(self, sample_sets):
        """Test the per-card detail line."""
        section = resolve_section({"type": "largest"}, sample_sets)
        assert section.detail_for(section.sets[0]) == "7,541 pieces"

    def test_to_dict_smart(self, sample_sets):
        """Test the renderer payload of a capped smart section."""
        data = resolve_section({"type": "largest"}, sample_sets).to_dict()
        assert data["id"] == "largest"
        assert data["title"] == "Biggest Builds"
        assert data["emptyMessage"] == "No piece counts available"
        assert data["maxItems"] == 10
        assert "viewAllFilter" not in data

    def test_to_dict_theme(self, sample_sets):
        """Test the renderer payload of a theme section."""
        data = resolve_section({"type": "theme", "themeName": "Icons"}, sample_sets).to_dict()
        assert data["viewAllFilter"] == "theme=Icons"
        assert "maxItems" not in data
        assert len(data["sets"]) == 2


class TestBuildHome:
    """Tests for home screen states."""

    def test_empty_collection_wins(self):
        """Test an empty collection is reported before anything else."""
        assert build_home([], []).state == HomeState.EMPTY_COLLECTION
        assert build_home(None, []).state == HomeState.EMPTY_COLLECTION

    def test_no_sections(self, sample_sets):
        """Test a user who removed every section."""
        view = build_home([], sample_sets)
        assert view.state == HomeState.NO_SECTIONS
        assert view.sections == []

    def test_all_sections_empty(self, make_set):
        """Test configured sections with nothing to show."""
        sets = [make_set(status=SetStatus.ASSEMBLED)]
        view = build_home([{"type": "unopened"}, {"type": "theme", "themeName": "City"}], sets)
        assert view.state == HomeState.ALL_EMPTY

    def test_populated(self, sample_sets):
        """Test a normal home screen."""
        view = build_home(None, sample_sets, random.Random(2))
        assert view.state == HomeState.POPULATED
        assert len(view.sections) == 4


class TestAvailableThemes:
    """Tests for available_themes."""

    def test_distinct_sorted(self, sample_sets):
        """Test themes are deduplicated case-insensitively and sorted."""
        assert available_themes(sample_sets) == ["City", "Icons", "Star Wars", "Technic"]

    def test_skips_missing_themes(self, make_set):
        """Test sets without a theme contribute nothing."""
        assert available_themes([make_set(theme=None), make_set(theme="Ideas")]) == ["Ideas"]

    def test_empty_collection(self):
        """Test no sets means no themes."""
        assert available_themes([]) == []
