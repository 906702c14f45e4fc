"""Tests for preset list files."""

from __future__ import annotations

from hemarchive.domain.preset import ContinuumPreset
from hemarchive.domain.preset_listing import (
    DEFAULT_LISTING_NAME,
    format_preset_listing,
    listing_path,
    parse_preset_listing,
    read_preset_listing,
    save_preset_listing,
)


DEVICE_ORDER = [ContinuumPreset(name="Brass", number=2), ContinuumPreset(name="Cello", number=0)]


class TestFormat:
    def test_lines_are_one_based_and_reversed(self):
        assert format_preset_listing(DEVICE_ORDER) == '1,"Cello.mid"\n3,"Brass.mid"\n'

    def test_empty(self):
        assert format_preset_listing([]) == ""


class TestSave:
    def test_folder_gets_default_name(self, tmp_path):
        written = save_preset_listing(DEVICE_ORDER, tmp_path)
        assert written == tmp_path / DEFAULT_LISTING_NAME
        assert written.read_text(encoding="utf-8") == '1,"Cello.mid"\n3,"Brass.mid"\n'

    def test_file_path_used_as_is(self, tmp_path):
        target = tmp_path / "mine.txt"
        assert save_preset_listing(DEVICE_ORDER, target) == target
        assert target.exists()

    def test_listing_path(self, tmp_path):
        assert listing_path(tmp_path, "x.txt") == tmp_path / "x.txt"
        assert listing_path(tmp_path / "y.txt") == tmp_path / "y.txt"


class TestParse:
    def test_parse_keeps_slot_and_file_name(self):
        presets = parse_preset_listing('1,"Cello.mid"\n3, "Brass.mid"\n')
        assert [(p.number, p.name) for p in presets] == [(1, "Cello.mid"), (3, "Brass.mid")]

    def test_stops_at_non_numeric_line(self):
        presets = parse_preset_listing('1,"A.mid"\nslot,"B.mid"\n3,"C.mid"\n')
        assert [p.name for p in presets] == ["A.mid"]

    def test_stops_at_slot_out_of_range(self):
        presets = parse_preset_listing('128,"A.mid"\n129,"B.mid"\n')
        assert [p.number for p in presets] == [128]

    def test_stops_at_missing_name(self):
        assert parse_preset_listing('1\n2,"B.mid"\n') == []
        assert parse_preset_listing('1,""\n') == []

    def test_read_round_trip(self, tmp_path):
        written = save_preset_listing(DEVICE_ORDER, tmp_path)
        presets = read_preset_listing(written)
        assert [(p.number, p.name) for p in presets] == [(1, "Cello.mid"), (3, "Brass.mid")]
