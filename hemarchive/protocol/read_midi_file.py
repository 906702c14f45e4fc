from __future__ import annotations

"""Reader for the single-track preset archives written by `MidiFile`."""

from collections.abc import Iterator

import mido

from hemarchive.errors import (
    ExpectedTrackChunkError,
    IncompleteValueError,
    MalformedInputError,
    NotAMidiFileError,
    UnsupportedStatusError,
)
from hemarchive.protocol.codes import MS_PER_TICK
from hemarchive.protocol.varlen import VarLenDecoder


FILE_HEADER_LENGTH = 14
TRACK_HEADER_LENGTH = 8


def is_midi_header(data: bytes) -> bool:
    return data[:4] == b"MThd"


def _data_byte_count(status: int) -> int:
    family = status & 0xF0
    if family in (0xC0, 0xD0):
        return 1
    return 2


class ReadMidiFile:
    """Yields `(delay_ms, message)` for each event of the first track.

    Only channel voice messages and the end-of-track meta event are accepted.
    Headers are validated on the first call to `next()`.
    """

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._decoder = VarLenDecoder()
        self._running_status = 0
        self._index = 0
        self._end = 0
        self._opened = False

    def __iter__(self) -> Iterator[tuple[int, mido.Message]]:
        while True:
            item = self.next()
            if item is None:
                return
            yield item

    def next(self) -> tuple[int, mido.Message] | None:
        if not self._opened:
            self._read_headers()
            self._opened = True
        if self._index >= self._end:
            return None
        return self._read_event()

    def _read_headers(self) -> None:
        data = self._data
        if len(data) < FILE_HEADER_LENGTH + TRACK_HEADER_LENGTH or not is_midi_header(data):
            raise NotAMidiFileError("Not a MIDI file")
        header_length = int.from_bytes(data[4:8], "big")
        index = 8 + header_length
        if data[index : index + 4] != b"MTrk":
            raise ExpectedTrackChunkError("Expecting MTrk")
        track_length = int.from_bytes(data[index + 4 : index + 8], "big")
        self._index = index + TRACK_HEADER_LENGTH
        self._end = self._index + track_length
        if self._end > len(data):
            raise MalformedInputError(
                f"track length {track_length} runs past the end of the data ({len(data)} bytes)"
            )

    def _next_byte(self) -> int:
        if self._index >= self._end:
            raise MalformedInputError("truncated event at end of track")
        byte = self._data[self._index]
        self._index += 1
        return byte

    def _read_var_len(self) -> int:
        self._decoder.start()
        try:
            while self._decoder.add_byte(self._next_byte()):
                pass
        except MalformedInputError as exc:
            raise IncompleteValueError("truncated delta time") from exc
        return self._decoder.finish()

    def _read_event(self) -> tuple[int, mido.Message] | None:
        delta = self._read_var_len()
        status = self._data[self._index] if self._index < self._end else None
        if status is None:
            raise MalformedInputError("missing event after delta time")

        if status & 0x80:
            self._index += 1
            if status == 0xFF:
                meta_type = self._next_byte()
                length = self._next_byte()
                if meta_type == 0x2F and length == 0:
                    self._index = self._end
                    return None
                raise UnsupportedStatusError(status)
            if status >= 0xF0:
                raise UnsupportedStatusError(status)
            self._running_status = status
        elif self._running_status == 0:
            raise MalformedInputError(f"data byte 0x{status:02X} without running status")
        else:
            status = self._running_status

        data = [self._next_byte() for _ in range(_data_byte_count(status))]
        for byte in data:
            if byte & 0x80:
                raise MalformedInputError(f"data byte 0x{byte:02X} has the high bit set")

        delay_ms = int(delta * MS_PER_TICK)
        return delay_ms, mido.Message.from_bytes([status, *data])
