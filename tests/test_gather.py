"""Tests for data stream reassembly."""

from __future__ import annotations

from hemarchive.protocol import varlen
from hemarchive.protocol.gather import DataKind, GatherMode, StreamGatherer, gather_mode_for


class TestStreamGatherer:
    def test_unencoded_bytes_kept_as_is(self):
        gatherer = StreamGatherer()
        gatherer.start(True)
        for byte in b"AB":
            gatherer.add(byte)
        assert gatherer.flush() == b"AB"

    def test_encoded_values_become_big_endian_words(self):
        gatherer = StreamGatherer()
        gatherer.start(False)
        for value in (0x01020304, 0x7F):
            for byte in varlen.encode(value):
                gatherer.add(byte)
        assert gatherer.flush() == b"\x01\x02\x03\x04\x00\x00\x00\x7f"

    def test_partial_value_is_zero_padded_on_flush(self):
        gatherer = StreamGatherer()
        gatherer.start(False)
        gatherer.add(0x81)
        assert gatherer.flush() == b"\x00\x00\x00\x80"

    def test_flush_without_partial_adds_nothing(self):
        gatherer = StreamGatherer()
        gatherer.start(False)
        gatherer.add(0x05)
        assert gatherer.flush() == b"\x00\x00\x00\x05"

    def test_flush_resets_to_unencoded(self):
        gatherer = StreamGatherer()
        gatherer.start(False)
        gatherer.flush()
        assert gatherer.unencoded
        gatherer.add(0x81)
        assert gatherer.flush() == b"\x81"


class TestDataKind:
    def test_known_kinds(self):
        assert DataKind.from_byte(0) is DataKind.NAME
        assert DataKind.from_byte(8) is DataKind.CATEGORY
        assert DataKind.from_byte(14) is DataKind.CONVOLUTION

    def test_unlisted_values_are_unknown(self):
        assert DataKind.from_byte(15) is DataKind.UNKNOWN
        assert DataKind.from_byte(126) is DataKind.UNKNOWN

    def test_labels(self):
        assert DataKind.GRAPH_OFFSET_1.label == "Graph Offset 1"
        assert DataKind.UNKNOWN.label == "Unknown"

    def test_gather_modes(self):
        assert gather_mode_for(DataKind.NAME) is GatherMode.NAME
        assert gather_mode_for(DataKind.CONTROL_TEXT) is GatherMode.TEXT
        assert gather_mode_for(DataKind.CATEGORY) is GatherMode.CATEGORY
        assert gather_mode_for(DataKind.KINETIC) is GatherMode.BINARY
        assert gather_mode_for(DataKind.UNKNOWN) is GatherMode.BINARY
