"""Shared fixtures: an in-memory stand-in for the MIDI transport."""

from __future__ import annotations

import threading
from collections.abc import Callable

import mido
import pytest


class FakeTransport:
    """Records outbound messages and serves queued inbound ones.

    `responder` is called for every sent message and may return messages
    that the fake instrument sends back.
    """

    def __init__(self, responder: Callable[[mido.Message], list[mido.Message]] | None = None) -> None:
        self.sent: list[mido.Message] = []
        self.closed = False
        self._pending: list[mido.Message] = []
        self._responder = responder
        self._lock = threading.Lock()

    def send(self, msg: mido.Message) -> None:
        self.sent.append(msg)
        if self._responder is not None:
            self.queue(*self._responder(msg))

    def send_control_change(self, control: int, value: int, channel: int = 0) -> None:
        self.send(mido.Message("control_change", control=control, value=value, channel=channel))

    def queue(self, *messages: mido.Message) -> None:
        with self._lock:
            self._pending.extend(messages)

    def receive_pending(self) -> list[mido.Message]:
        with self._lock:
            pending, self._pending = self._pending, []
        return pending

    def close(self) -> None:
        self.closed = True

    def sent_ccs(self, channel: int = 15) -> list[tuple[int, int]]:
        return [
            (m.control, m.value)
            for m in self.sent
            if m.type == "control_change" and m.channel == channel
        ]

    def sent_programs(self, channel: int) -> list[int]:
        return [m.program for m in self.sent if m.type == "program_change" and m.channel == channel]


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def transport_factory() -> type[FakeTransport]:
    return FakeTransport
