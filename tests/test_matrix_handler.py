"""Tests for the EaganMatrix protocol engine, driven with scripted device traffic."""

from __future__ import annotations

import logging

import mido
import pytest

from hemarchive.protocol import varlen
from hemarchive.protocol.gather import GatherMode
from hemarchive.protocol.matrix_handler import MatrixHandler
from hemarchive.protocol.midi_handler import dispatch_midi
from hemarchive.protocol.read_midi_file import ReadMidiFile
from hemarchive.protocol.state import Action, ArchiveState


CH15 = 14
CH16 = 15


def cc16(control, value, time=0):
    return mido.Message("control_change", channel=CH16, control=control, value=value, time=time)


def stream(kind, payload, time=0):
    messages = [cc16(56, kind, time)]
    messages += [mido.Message("aftertouch", channel=CH16, value=byte, time=time) for byte in payload]
    messages.append(cc16(56, 127, time))
    return messages


def named_preset(name, program, *, text="", time=0):
    messages = stream(0, name.encode("ascii"), time)
    if text:
        messages += stream(1, text.encode("ascii"), time)
    messages += [cc16(0, 0, time), cc16(32, 0, time)]
    messages.append(mido.Message("program_change", channel=CH16, program=program, time=time))
    return messages


def feed(handler, messages):
    for message in messages:
        dispatch_midi(handler, message)


class TestActions:
    def test_list_names_requests_names(self, transport):
        handler = MatrixHandler(transport)
        handler.start_action(Action.LIST_NAMES)

        quiet = transport.sent[:39]
        assert {(m.control, m.value) for m in quiet} == {(120, 0), (121, 0), (122, 0)}
        assert sorted({m.channel for m in quiet}) == list(range(13))
        assert transport.sent_ccs() == [(116, 85), (109, 32), (116, 85), (116, 85)]
        assert not handler.is_ready

    def test_save_current_requests_archive(self, transport):
        handler = MatrixHandler(transport)
        handler.start_action(Action.SAVE_CURRENT)
        assert transport.sent_ccs()[-1] == (110, 100)

    def test_load_sends_only_prelude(self, transport):
        handler = MatrixHandler(transport)
        handler.start_action(Action.LOAD)
        assert transport.sent_ccs() == [(116, 85)]

    def test_unsupported_action(self, transport):
        handler = MatrixHandler(transport)
        with pytest.raises(ValueError):
            handler.start_action(Action.MONITOR)

    def test_clear_walks_every_bank(self, transport):
        handler = MatrixHandler(transport)
        handler.start_action(Action.CLEAR)
        assert transport.sent_ccs()[-1] == (109, 115)

        for _ in range(7):
            feed(handler, [cc16(109, 26)])
            assert not handler.is_ready
        feed(handler, [cc16(109, 26)])

        assert handler.is_ready
        assert handler.state.next_bank_to_clear is None
        erased = [value for control, value in transport.sent_ccs() if control == 109]
        assert erased == list(range(115, 123))

    def test_idle_readies_load_only(self, transport):
        handler = MatrixHandler(transport)
        handler.start_action(Action.LIST_NAMES)
        handler.on_idle()
        assert not handler.is_ready

        handler.start_action(Action.LOAD)
        handler.on_idle()
        assert handler.is_ready


class TestCommands:
    def test_editor_present_alternates(self, transport):
        handler = MatrixHandler(transport)
        handler.editor_present()
        handler.editor_present()
        handler.editor_present()
        assert transport.sent_ccs() == [(116, 85), (116, 42), (116, 85)]

    def test_choose_preset(self, transport):
        handler = MatrixHandler(transport)
        handler.choose_preset(5)
        assert transport.sent_ccs() == [(0, 0), (32, 0)]
        assert transport.sent_programs(CH16) == [5]

    def test_set_slot_uses_channel_15(self, transport):
        handler = MatrixHandler(transport)
        handler.set_slot(5)
        assert transport.sent_programs(CH15) == [5]

    def test_edit_slot_selects_bank_126(self, transport):
        handler = MatrixHandler(transport)
        handler.choose_edit_slot()
        assert transport.sent_ccs() == [(0, 126), (32, 0)]
        assert transport.sent_programs(CH16) == [0]

    def test_send_string(self, transport):
        handler = MatrixHandler(transport)
        handler.send_string(0, "Hi")
        assert transport.sent_ccs() == [(56, 0), (56, 127)]
        assert [m.value for m in transport.sent if m.type == "aftertouch"] == [ord("H"), ord("i")]


class TestNames:
    def test_user_names_collected(self, transport):
        handler = MatrixHandler(transport)
        handler.start_action(Action.LIST_NAMES)

        feed(handler, [cc16(109, 54)])
        assert handler.state.in_preset_names
        feed(handler, named_preset("Cello", 3, text="C=ST_BO"))
        feed(handler, named_preset("-", 4))
        feed(handler, [cc16(109, 55)])

        assert handler.is_ready
        assert handler.state.names_seen == 2
        presets = handler.presets
        assert [(p.name, p.number, p.text) for p in presets] == [("Cello", 3, "C=ST_BO")]

    def test_presets_outside_names_are_logged(self, transport, caplog):
        handler = MatrixHandler(transport)
        with caplog.at_level(logging.INFO):
            feed(handler, named_preset("Cello", 3))
        assert handler.presets == []
        assert '"Cello"' in caplog.text


class TestStreams:
    def test_binary_stream_decoded(self, transport):
        handler = MatrixHandler(transport)
        payload = varlen.encode(0x01020304)
        feed(handler, stream(2, payload))
        assert handler.state.last_binary == b"\x01\x02\x03\x04"
        assert handler.state.gather_mode is GatherMode.NONE

    def test_unknown_binary_kind_warns(self, transport, caplog):
        handler = MatrixHandler(transport)
        with caplog.at_level(logging.WARNING):
            feed(handler, stream(50, b"\x05"))
        assert "Unrecognized binary data kind 50" in caplog.text
        assert handler.state.last_binary == b"\x00\x00\x00\x05"


class TestArchive:
    def test_archive_recorded_while_saving(self, transport):
        handler = MatrixHandler(transport)
        handler.start_action(Action.SAVE_CURRENT)

        feed(handler, [cc16(110, 120, 0)])
        assert handler.state.in_archive
        feed(
            handler,
            [
                mido.Message("control_change", channel=CH15, control=1, value=2, time=10),
                mido.Message("control_change", channel=CH15, control=3, value=4, time=20),
            ],
        )
        feed(handler, named_preset("Cello", 0, time=30))
        feed(handler, [cc16(110, 124, 40)])

        assert handler.is_ready
        assert not handler.state.in_archive
        assert [p.name for p in handler.presets] == ["Cello"]

        data = handler.get_archive_data()
        messages = [message for _, message in ReadMidiFile(data)]
        assert messages[0] == mido.Message("control_change", channel=CH15, control=1, value=2)
        assert mido.Message("control_change", channel=CH15, control=3, value=4) in messages

    def test_archive_ignored_when_not_saving(self, transport):
        handler = MatrixHandler(transport)
        handler.start_action(Action.LIST_NAMES)
        feed(handler, [cc16(110, 120), cc16(1, 1), cc16(110, 124)])
        assert not handler.is_ready
        assert not handler.state.in_archive
        assert list(ReadMidiFile(handler.get_archive_data())) == []

    @pytest.mark.parametrize(("value", "state"), [(5, ArchiveState.OK), (6, ArchiveState.FAIL)])
    def test_archive_result_during_load(self, transport, value, state):
        handler = MatrixHandler(transport)
        handler.start_action(Action.LOAD)
        feed(handler, [cc16(109, value)])
        assert handler.archive_state is state
        assert handler.is_ready

        handler.clear_archive_state()
        assert handler.archive_state is ArchiveState.UNKNOWN
