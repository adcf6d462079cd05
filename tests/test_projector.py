"""Tests for projecting flat translation maps into the push table."""

import pytest

from sheets_translations.projector import (
    KEY_COLUMN_LABEL,
    build_frame,
    order_languages,
    pad_columns,
    project_columns,
    to_cell,
)


class TestOrderLanguages:

    def test_reference_first_then_discovery_order(self):
        assert order_languages(["de", "en", "fr"], "en") == ["en", "de", "fr"]


class TestToCell:

    @pytest.mark.parametrize("value,expected", [
        ("Hello", "Hello"),
        ("", ""),
        (None, ""),
        (3, "3"),
        (["a", "b"], '["a", "b"]'),
    ])
    def test_values(self, value, expected):
        assert to_cell(value) == expected


class TestProjectColumns:
    """Tests for project_columns()"""

    def test_column_major_table(self):
        flat_maps = {
            "fr": {"a.b": "Bonjour", "a.c": "Au revoir"},
            "en": {"a.b": "Hello", "a.c": "Bye"},
        }
        assert project_columns(flat_maps, "en") == [
            [KEY_COLUMN_LABEL, "a.b", "a.c"],
            ["en", "Hello", "Bye"],
            ["fr", "Bonjour", "Au revoir"],
        ]

    def test_keys_follow_reference_order(self):
        flat_maps = {"en": {"z": "1", "a": "2", "m": "3"}, "fr": {"a": "deux", "m": "trois", "z": "un"}}
        table = project_columns(flat_maps, "en")
        assert table[0] == [KEY_COLUMN_LABEL, "z", "a", "m"]
        assert table[2] == ["fr", "un", "deux", "trois"]

    def test_missing_key_is_empty_string(self):
        flat_maps = {"en": {"a": "A", "b": "B"}, "fr": {"a": "Ah"}}
        assert project_columns(flat_maps, "en")[2] == ["fr", "Ah", ""]

    def test_language_without_keys_keeps_its_column(self):
        flat_maps = {"en": {"a": "A"}, "de": {}}
        assert project_columns(flat_maps, "en")[2] == ["de", ""]

    def test_keys_missing_from_reference_are_dropped(self):
        flat_maps = {"en": {"a": "A"}, "fr": {"a": "Ah", "extra": "X"}}
        table = project_columns(flat_maps, "en")
        assert table[0] == [KEY_COLUMN_LABEL, "a"]
        assert table[2] == ["fr", "Ah"]

    def test_reference_language_required(self):
        with pytest.raises(ValueError):
            project_columns({"fr": {"a": "b"}}, "en")

    def test_empty_reference(self):
        assert project_columns({"en": {}, "fr": {"a": "b"}}, "en") == [[KEY_COLUMN_LABEL], ["en"], ["fr"]]

    def test_frame_index_is_reference_keys(self):
        frame = build_frame({"en": {"b": "1", "a": "2"}}, "en")
        assert list(frame.index) == ["b", "a"]
        assert list(frame.columns) == ["en"]


class TestPadColumns:

    def test_pads_to_previous_extent(self):
        table = [["Key Name", "a"], ["en", "A"]]
        assert pad_columns(table, 3, 4) == [
            ["Key Name", "a", "", ""],
            ["en", "A", "", ""],
            ["", "", "", ""],
        ]

    def test_never_truncates(self):
        table = [["Key Name", "a", "b"], ["en", "A", "B"]]
        assert pad_columns(table, 1, 1) == table
