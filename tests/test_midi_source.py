"""Tests for the background MIDI reader."""

from __future__ import annotations

import queue
import time

import mido
import pytest

from hemarchive.errors import TransportError
from hemarchive.transport.midi_source import MidiSource


@pytest.fixture
def source_for():
    started: list[MidiSource] = []

    def make(transport):
        source = MidiSource(transport)
        started.append(source)
        return source

    yield make
    for source in started:
        source.stop()
        source.join()


class TestMidiSource:
    def test_messages_are_stamped_in_order(self, transport, source_for):
        first = mido.Message("control_change", channel=15, control=1, value=1)
        second = mido.Message("control_change", channel=15, control=1, value=2)
        transport.queue(first, second)

        source = source_for(transport)
        source.start()
        got = [source.messages.get(timeout=2), source.messages.get(timeout=2)]

        assert [m.value for m in got] == [1, 2]
        assert 0 <= got[0].time <= got[1].time
        assert first.time == 0

    def test_stop_ends_thread(self, transport, source_for):
        source = source_for(transport)
        source.start()
        source.stop()
        source.join()
        transport.queue(mido.Message("program_change", channel=15, program=3))
        time.sleep(0.02)
        with pytest.raises(queue.Empty):
            source.messages.get_nowait()

    def test_reader_error_is_kept(self, transport_factory, source_for):
        class Broken(transport_factory):
            def receive_pending(self):
                raise TransportError("gone")

        source = source_for(Broken())
        source.start()
        source.join()

        assert isinstance(source.error, TransportError)
