"""Tests for selector building, pagination and cell rendering."""

import pytest

from pw_studio.host import PageNode, PageRef
from pw_studio.lister import (
    ActiveFilterState,
    Selector,
    build_query,
    build_selector,
    format_cell,
    page_count,
    page_number,
    page_window,
    pager_query,
)

FIELDS = ["date", "summary", "views"]


class TestBuildSelector:
    def test_defaults(self):
        selector, active, allowed = build_selector(1001, FIELDS, {})
        assert selector == "parent=1001, sort=title asc"
        assert active.is_empty
        assert allowed == ["title", "date", "summary", "views"]

    def test_text_clause(self):
        selector, active, _ = build_selector(1001, FIELDS, {"q": "coffee", "by": "summary"})
        assert selector == "parent=1001, summary*=coffee, sort=title asc"
        assert active == ActiveFilterState(by="summary", q="coffee")

    def test_empty_query_leaves_filter_inactive(self):
        """Sort and direction alone do not make the filter active."""
        selector, active, _ = build_selector(1001, FIELDS, {"q": "  ", "sort": "date", "dir": "desc"})
        assert selector == "parent=1001, sort=date desc"
        assert not active
        assert active.to_dict() == {}

    def test_unknown_search_field_falls_back_to_title(self):
        selector, active, _ = build_selector(1001, FIELDS, {"q": "x", "by": "nonexistent"})
        assert "title*=x" in selector
        assert active.by == "title"

    def test_sort_field_is_not_checked(self):
        """Sort names outside the display fields pass through, sanitized."""
        selector, _, _ = build_selector(1001, FIELDS, {"sort": "secret field"})
        assert selector.endswith("sort=secret_field asc")

    @pytest.mark.parametrize("raw, expected", [("DESC", "desc"), ("Desc", "desc"), ("down", "asc"), (None, "asc")])
    def test_direction(self, raw, expected):
        selector, _, _ = build_selector(1001, FIELDS, {"dir": raw})
        assert selector.endswith(expected)

    def test_query_text_is_sanitized(self):
        selector, active, _ = build_selector(1001, FIELDS, {"q": " <i>dark</i>\n roast "})
        assert "title*=dark roast" in selector
        assert active.q == "dark roast"

    def test_repeated_parameters_use_first_value(self):
        selector, _, _ = build_selector(1001, FIELDS, {"q": ["first", "second"]})
        assert "title*=first" in selector

    def test_parent_page_object(self):
        selector, _, _ = build_query(PageNode(id=42), FIELDS, None)
        assert selector.parent_id == 42


class TestSelectorParsing:
    def test_round_trip(self):
        selector = Selector(1001, ("summary", "milk, sugar"), "date", "desc")
        assert Selector.parse(str(selector)) == selector

    def test_without_match(self):
        parsed = Selector.parse("parent=7, sort=views asc")
        assert parsed.match is None
        assert parsed.sort_field == "views"
        assert not parsed.descending

    def test_defaults_for_missing_sort(self):
        parsed = Selector.parse("parent=7")
        assert (parsed.sort_field, parsed.sort_dir) == ("title", "asc")

    @pytest.mark.parametrize("text", ["", "template=blog", "parent=abc, sort=title asc"])
    def test_unparseable(self, text):
        with pytest.raises(ValueError):
            Selector.parse(text)


class TestPagination:
    @pytest.mark.parametrize(
        "params, expected",
        [(None, 1), ({}, 1), ({"pg": "3"}, 3), ({"pg": "0"}, 1), ({"pg": "-4"}, 1), ({"pg": "x"}, 1)],
    )
    def test_page_number(self, params, expected):
        assert page_number(params) == expected

    def test_page_count(self):
        assert page_count(0, 50) == 1
        assert page_count(101, 50) == 3

    @pytest.mark.parametrize(
        "pg, pages, expected",
        [
            (1, 1, []),
            (2, 5, [1, 2, 3, 4, 5]),
            (1, 10, [1, 2, "...", 10]),
            (5, 10, [1, "...", 4, 5, 6, "...", 10]),
            (10, 10, [1, "...", 9, 10]),
            (3, 10, [1, 2, 3, 4, "...", 10]),
        ],
    )
    def test_page_window(self, pg, pages, expected):
        assert page_window(pg, pages) == expected

    def test_pager_query_keeps_active_filter(self):
        active = ActiveFilterState(by="summary", q="tea")
        assert pager_query(active, 2) == {"q": "tea", "by": "summary", "pg": 2}
        assert pager_query(ActiveFilterState(), 3) == {"pg": 3}


class TestFormatCell:
    def test_values(self):
        assert format_cell(None) == ""
        assert format_cell(True) == "1"
        assert format_cell(PageRef(1, "Coffee")) == "Coffee"
        assert format_cell([PageRef(1, "Coffee"), PageRef(2, "Travel")]) == "Coffee, Travel"

    def test_long_text_is_cut(self):
        cell = format_cell("x" * 150)
        assert len(cell) == 100
        assert cell.endswith("...")

    def test_text_at_limit_is_kept(self):
        assert format_cell("y" * 100) == "y" * 100
