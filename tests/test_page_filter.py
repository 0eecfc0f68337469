"""Tests for page range parsing and rotation normalization."""

import pytest

from docops.utils.page_filter import normalize_rotation, parse_page_range


class TestParsePageRange:
    """Tests for parse_page_range."""

    def test_parse_single_page(self):
        assert parse_page_range("1", 5) == [0]

    def test_parse_multiple_pages(self):
        assert parse_page_range("1,3,5", 5) == [0, 2, 4]

    def test_range_expansion(self):
        assert parse_page_range("1-3,5", 10) == [0, 1, 2, 4]

    def test_sorted_and_deduplicated(self):
        assert parse_page_range("3,1,2,1", 5) == [0, 1, 2]

    def test_overlapping_ranges_collapse(self):
        assert parse_page_range("1-4,3-6", 10) == [0, 1, 2, 3, 4, 5]

    def test_range_clipped_to_page_count(self):
        assert parse_page_range("1-100", 3) == [0, 1, 2]

    def test_range_starting_at_zero_is_clipped(self):
        assert parse_page_range("0-2", 5) == [0, 1]

    def test_out_of_range_single_pages_dropped(self):
        assert parse_page_range("0,4,9", 5) == [3]

    def test_malformed_tokens_dropped(self):
        assert parse_page_range("a,2,-,5-", 5) == [1]

    def test_negative_number_dropped(self):
        assert parse_page_range("-3", 5) == []

    def test_span_with_extra_dash_dropped(self):
        assert parse_page_range("1-2-3,4", 5) == [3]

    def test_reversed_range_contributes_nothing(self):
        assert parse_page_range("5-3", 10) == []

    def test_whitespace_ignored(self):
        assert parse_page_range(" 1 - 2 ,  4 ", 5) == [0, 1, 3]

    @pytest.mark.parametrize("expression", ["", " ", ",,,", "x-y"])
    def test_nothing_valid_yields_empty(self, expression):
        assert parse_page_range(expression, 10) == []

    def test_zero_page_document(self):
        assert parse_page_range("1-3", 0) == []

    def test_idempotent(self):
        expression = "7-9, 1, 3-4, 3"
        assert parse_page_range(expression, 8) == parse_page_range(expression, 8)


class TestNormalizeRotation:
    """Tests for normalize_rotation."""

    def test_wraps_past_full_turn(self):
        assert normalize_rotation(270, 180) == 90

    def test_negative_delta_is_non_negative(self):
        assert normalize_rotation(0, -90) == 270

    def test_multiple_turns(self):
        assert normalize_rotation(90, 720) == 90
