"""Tests for the event loop that drives one device action."""

from __future__ import annotations

import logging

import mido
import pytest

from hemarchive.app.preset_manager import PresetManager, make_stepper
from hemarchive.app.step_load import PresetLoader
from hemarchive.app.step_names import NameList
from hemarchive.app.step_save import Saver, SingleSaver
from hemarchive.app.stepper import NilStepper, WorkingStatus
from hemarchive.errors import TransportError
from hemarchive.protocol.midi_file import MidiFile
from hemarchive.protocol.state import Action


CH16 = 15


def cc16(control, value):
    return mido.Message("control_change", channel=CH16, control=control, value=value)


def name_listing(*names):
    messages = [cc16(109, 54)]
    for program, name in enumerate(names):
        messages.append(cc16(56, 0))
        messages += [mido.Message("aftertouch", channel=CH16, value=ord(ch)) for ch in name]
        messages.append(cc16(56, 127))
        messages.append(mido.Message("program_change", channel=CH16, program=program))
    messages.append(cc16(109, 55))
    return messages


class TestMakeStepper:
    def test_list_and_clear_need_no_path(self):
        assert isinstance(make_stepper(Action.LIST_NAMES, None), NameList)
        assert isinstance(make_stepper(Action.CLEAR, None), NilStepper)

    def test_save_steppers(self, tmp_path):
        assert isinstance(make_stepper(Action.SAVE_CURRENT, tmp_path), SingleSaver)
        assert isinstance(make_stepper(Action.SAVE, tmp_path), Saver)

    def test_load_reads_items(self, tmp_path):
        (tmp_path / "Cello.mid").write_bytes(MidiFile().finish())
        loader = make_stepper(Action.LOAD, tmp_path, pace_replay=False)
        assert isinstance(loader, PresetLoader)
        assert loader.current.name == "Cello"

    def test_path_required(self):
        with pytest.raises(ValueError):
            make_stepper(Action.SAVE, None)

    def test_non_device_action(self, tmp_path):
        with pytest.raises(ValueError):
            make_stepper(Action.MONITOR, tmp_path)


class TestPresetManager:
    def test_steps_when_messages_make_handler_ready(self, transport):
        manager = PresetManager(transport, Action.LIST_NAMES, NameList())
        manager.handler.start_action(Action.LIST_NAMES)

        statuses = [manager.handle_midi(message) for message in name_listing("Cello")]

        assert statuses[-1] is WorkingStatus.FINISHED
        assert set(statuses[:-1]) == {WorkingStatus.WORKING}

    def test_idle_does_not_step_until_ready(self, transport):
        manager = PresetManager(transport, Action.LIST_NAMES, NameList())
        manager.handler.start_action(Action.LIST_NAMES)
        assert manager.idle() is WorkingStatus.WORKING

    def test_run_lists_names_from_device(self, tmp_path, transport_factory):
        def device(message):
            if message.type == "control_change" and (message.control, message.value) == (109, 32):
                return name_listing("Cello", "Brass")
            return []

        transport = transport_factory(responder=device)
        manager = PresetManager(transport, Action.LIST_NAMES, NameList(tmp_path), heartbeat_s=0.05)

        manager.run()

        assert manager.status is WorkingStatus.FINISHED
        assert transport.closed
        assert (tmp_path / "UserPresets.txt").read_text(encoding="utf-8") == '2,"Brass.mid"\n1,"Cello.mid"\n'

    def test_reader_failure_propagates(self, transport_factory):
        class UnpluggedTransport(transport_factory):
            def receive_pending(self):
                raise TransportError("device unplugged")

        transport = UnpluggedTransport()
        manager = PresetManager(transport, Action.LIST_NAMES, NameList(), heartbeat_s=0.05)

        with pytest.raises(TransportError, match="unplugged"):
            manager.run()
        assert transport.closed

    def test_interrupt_is_reraised_after_cleanup(self, transport_factory, caplog):
        def device(message):
            raise KeyboardInterrupt

        transport = transport_factory(responder=device)
        manager = PresetManager(transport, Action.CLEAR, NilStepper(), heartbeat_s=0.05)

        with caplog.at_level(logging.INFO):
            with pytest.raises(KeyboardInterrupt):
                manager.run()
        assert transport.closed
        assert "Interrupted; clear did not finish" in caplog.text
