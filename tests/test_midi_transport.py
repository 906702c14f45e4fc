"""Tests for the MIDI port wrapper and transport."""

from __future__ import annotations

import logging

import mido
import pytest

from midi import HakenMidi, MidiPorts
from hemarchive.errors import TransportError
from hemarchive.transport.midi_transport import MidiTransport


class FakeMidi:
    def __init__(self, inputs, outputs):
        self.ports = MidiPorts(inputs=inputs, outputs=outputs)
        self.opened: tuple[str, str] | None = None
        self.sent: list[mido.Message] = []
        self.inbound: list[mido.Message] = []
        self.closed = False

    def list_ports(self):
        return self.ports

    def connect(self, input_name, output_name):
        self.opened = (input_name, output_name)

    def send(self, msg):
        self.sent.append(msg)

    def receive_pending(self):
        pending, self.inbound = self.inbound, []
        return pending

    def close(self):
        self.closed = True


@pytest.fixture
def midi():
    return FakeMidi(
        inputs=["Osmose 0", "ContinuuMini 1"],
        outputs=["Microsoft GS Wavetable Synth 0", "Osmose 2", "ContinuuMini 3"],
    )


class TestConnect:
    def test_connect_by_hint(self, midi):
        info = MidiTransport(midi).connect("Mini")
        assert midi.opened == ("ContinuuMini 1", "ContinuuMini 3")
        assert info.friendly_name == "ContinuuMini"

    def test_connect_first_device(self, midi):
        MidiTransport(midi).connect()
        assert midi.opened == ("Osmose 0", "Osmose 2")

    def test_no_device(self):
        with pytest.raises(TransportError):
            MidiTransport(FakeMidi(inputs=["Loopback"], outputs=["Loopback"])).connect()

    def test_close(self, midi):
        MidiTransport(midi).close()
        assert midi.closed


class TestMessages:
    def test_send_logs_bytes(self, midi, caplog):
        transport = MidiTransport(midi)
        with caplog.at_level(logging.DEBUG):
            transport.send_control_change(116, 85, channel=15)
        assert midi.sent == [mido.Message("control_change", channel=15, control=116, value=85)]
        assert "TX control_change: BF 74 55" in caplog.text

    def test_receive_pending(self, midi):
        midi.inbound.append(mido.Message("program_change", channel=15, program=2))
        assert [m.program for m in MidiTransport(midi).receive_pending()] == [2]

    @pytest.mark.parametrize(
        "call",
        [
            lambda t: t.send_control_change(128, 0),
            lambda t: t.send_control_change(1, -1),
            lambda t: t.send_control_change(1, 1, channel=16),
        ],
    )
    def test_range_checks(self, midi, call):
        with pytest.raises(ValueError):
            call(MidiTransport(midi))
        assert midi.sent == []


class TestHakenMidi:
    def test_send_requires_connection(self):
        port = HakenMidi()
        assert not port.connected
        with pytest.raises(TransportError):
            port.send(mido.Message("clock"))

    def test_receive_requires_connection(self):
        with pytest.raises(TransportError):
            HakenMidi().receive_pending()
