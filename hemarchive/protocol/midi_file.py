from __future__ import annotations

"""Writer for single-track Standard MIDI Files holding one preset archive.

Only channel voice messages are archived. Running status is used whenever the
status byte repeats.
"""

import math

from hemarchive.errors import OutOfOrderError, UnsupportedEventError
from hemarchive.protocol import varlen
from hemarchive.protocol.codes import MS_PER_TICK, TICKS_PER_BEAT
from hemarchive.protocol.midi_handler import MidiHandler


END_OF_TRACK = b"\x00\xff\x2f\x00"


class MidiFile(MidiHandler):
    def __init__(self) -> None:
        self._data = bytearray()
        self._running_status = 0
        self._last_tick = 0
        self._started = False

    def clear(self) -> None:
        self._data.clear()
        self._running_status = 0
        self._last_tick = 0
        self._started = False

    def finish(self) -> bytes:
        """Return the complete file and clear the writer."""

        result = bytearray()
        result += b"MThd"
        result += (6).to_bytes(4, "big")
        result += (0).to_bytes(2, "big")  # format
        result += (1).to_bytes(2, "big")  # tracks
        result += TICKS_PER_BEAT.to_bytes(2, "big")
        result += b"MTrk"
        result += len(self._data).to_bytes(4, "big")
        result += self._data
        result += END_OF_TRACK
        self.clear()
        return bytes(result)

    def _add_tick(self, ticks: int) -> None:
        if not self._started:
            self._started = True
            self._last_tick = ticks
            self._data += varlen.encode(0)
            return
        if ticks < self._last_tick:
            raise OutOfOrderError(f"event at {ticks} ms precedes previous event at {self._last_tick} ms")
        delta = math.floor((ticks - self._last_tick) / MS_PER_TICK)
        self._data += varlen.encode(delta)
        # Events less than one tick apart keep measuring from the last written
        # tick; once a non-zero delta is written its sub-tick remainder is dropped.
        if delta > 0:
            self._last_tick = ticks

    def _add_status(self, status: int) -> None:
        if status != self._running_status:
            self._running_status = status
            self._data.append(status)

    def _add_message(self, ticks: int, status: int, *data: int) -> None:
        self._add_tick(ticks)
        self._add_status(status)
        self._data.extend(b & 0x7F for b in data)

    def on_note_off(self, ticks: int, channel: int, note: int, velocity: int) -> None:
        self._add_message(ticks, 0x80 | channel, note, velocity)

    def on_note_on(self, ticks: int, channel: int, note: int, velocity: int) -> None:
        self._add_message(ticks, 0x90 | channel, note, velocity)

    def on_polyphonic_key_pressure(self, ticks: int, channel: int, note: int, pressure: int) -> None:
        self._add_message(ticks, 0xA0 | channel, note, pressure)

    def on_control_change(self, ticks: int, channel: int, cc: int, value: int) -> None:
        self._add_message(ticks, 0xB0 | channel, cc, value)

    def on_program_change(self, ticks: int, channel: int, program: int) -> None:
        self._add_message(ticks, 0xC0 | channel, program)

    def on_channel_pressure(self, ticks: int, channel: int, pressure: int) -> None:
        self._add_message(ticks, 0xD0 | channel, pressure)

    def on_pitch_bend_change(self, ticks: int, channel: int, bend: int) -> None:
        self._add_message(ticks, 0xE0 | channel, bend & 0x7F, (bend >> 7) & 0x7F)

    def on_system_exclusive(self, ticks: int, data: bytes) -> None:
        raise UnsupportedEventError("system exclusive messages cannot be archived")

    def on_midi_time_code(self, ticks: int, frame: int, values: int) -> None:
        raise UnsupportedEventError("MIDI time code cannot be archived")

    def on_song_position_pointer(self, ticks: int, beats: int) -> None:
        raise UnsupportedEventError("song position pointer cannot be archived")

    def on_song_select(self, ticks: int, song: int) -> None:
        raise UnsupportedEventError("song select cannot be archived")

    def on_tune_request(self, ticks: int) -> None:
        raise UnsupportedEventError("tune request cannot be archived")

    def on_timing_clock(self, ticks: int) -> None:
        raise UnsupportedEventError("timing clock cannot be archived")

    def on_start(self, ticks: int) -> None:
        raise UnsupportedEventError("start cannot be archived")

    def on_continue(self, ticks: int) -> None:
        raise UnsupportedEventError("continue cannot be archived")

    def on_stop(self, ticks: int) -> None:
        raise UnsupportedEventError("stop cannot be archived")

    def on_active_sensing(self, ticks: int) -> None:
        raise UnsupportedEventError("active sensing cannot be archived")

    def on_system_reset(self, ticks: int) -> None:
        raise UnsupportedEventError("system reset cannot be archived")
