from __future__ import annotations

from typing import Any, cast

import mido


PITCH_BEND_CENTER = 8192


class MidiHandler:
    """Receiver of decoded MIDI events.

    `ticks` is the event timestamp in milliseconds, `channel` is 0-based and
    pitch bend is the unsigned 14-bit value (8192 is centre). Every callback
    is a no-op here; subclasses override what they care about.
    """

    def on_note_off(self, ticks: int, channel: int, note: int, velocity: int) -> None:
        pass

    def on_note_on(self, ticks: int, channel: int, note: int, velocity: int) -> None:
        pass

    def on_polyphonic_key_pressure(self, ticks: int, channel: int, note: int, pressure: int) -> None:
        pass

    def on_control_change(self, ticks: int, channel: int, cc: int, value: int) -> None:
        pass

    def on_program_change(self, ticks: int, channel: int, program: int) -> None:
        pass

    def on_channel_pressure(self, ticks: int, channel: int, pressure: int) -> None:
        pass

    def on_pitch_bend_change(self, ticks: int, channel: int, bend: int) -> None:
        pass

    def on_system_exclusive(self, ticks: int, data: bytes) -> None:
        pass

    def on_midi_time_code(self, ticks: int, frame: int, values: int) -> None:
        pass

    def on_song_position_pointer(self, ticks: int, beats: int) -> None:
        pass

    def on_song_select(self, ticks: int, song: int) -> None:
        pass

    def on_tune_request(self, ticks: int) -> None:
        pass

    def on_timing_clock(self, ticks: int) -> None:
        pass

    def on_start(self, ticks: int) -> None:
        pass

    def on_continue(self, ticks: int) -> None:
        pass

    def on_stop(self, ticks: int) -> None:
        pass

    def on_active_sensing(self, ticks: int) -> None:
        pass

    def on_system_reset(self, ticks: int) -> None:
        pass


_SIMPLE_SYSTEM_EVENTS = {
    "tune_request": "on_tune_request",
    "clock": "on_timing_clock",
    "start": "on_start",
    "continue": "on_continue",
    "stop": "on_stop",
    "active_sensing": "on_active_sensing",
    "reset": "on_system_reset",
}


def dispatch_midi(handler: MidiHandler, message: mido.Message) -> None:
    """Route one mido message to the matching `handler` callback.

    The message's `time` attribute is used as the timestamp in ms.
    """

    msg = cast(Any, message)
    ticks = int(msg.time)
    kind = msg.type

    if kind == "note_off":
        handler.on_note_off(ticks, msg.channel, msg.note, msg.velocity)
    elif kind == "note_on":
        handler.on_note_on(ticks, msg.channel, msg.note, msg.velocity)
    elif kind == "polytouch":
        handler.on_polyphonic_key_pressure(ticks, msg.channel, msg.note, msg.value)
    elif kind == "control_change":
        handler.on_control_change(ticks, msg.channel, msg.control, msg.value)
    elif kind == "program_change":
        handler.on_program_change(ticks, msg.channel, msg.program)
    elif kind == "aftertouch":
        handler.on_channel_pressure(ticks, msg.channel, msg.value)
    elif kind == "pitchwheel":
        handler.on_pitch_bend_change(ticks, msg.channel, msg.pitch + PITCH_BEND_CENTER)
    elif kind == "sysex":
        handler.on_system_exclusive(ticks, bytes(msg.data))
    elif kind == "quarter_frame":
        handler.on_midi_time_code(ticks, msg.frame_type, msg.frame_value)
    elif kind == "songpos":
        handler.on_song_position_pointer(ticks, msg.pos)
    elif kind == "song_select":
        handler.on_song_select(ticks, msg.song)
    elif kind in _SIMPLE_SYSTEM_EVENTS:
        getattr(handler, _SIMPLE_SYSTEM_EVENTS[kind])(ticks)
