from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from typing import Any, cast

import mido

from hemarchive.errors import TransportError


@dataclass(frozen=True)
class MidiPorts:
    inputs: list[str]
    outputs: list[str]


class HakenMidi:
    """MIDI ports for talking to an EaganMatrix instrument.

    - Lists available MIDI ports.
    - Opens one input and one output port by name.
    - Sends and polls structured `mido.Message` objects.

    Port selection lives in `hemarchive.transport.acquire_device`; this class
    only owns the open ports.
    """

    def __init__(self, *, backend: str = "mido.backends.rtmidi") -> None:
        self.backend = backend

        # Ensure a backend that works on Windows. This is a no-op if already set.
        mido.set_backend(self.backend)

        self._out: Optional[mido.ports.BaseOutput] = None
        self._in: Optional[mido.ports.BaseInput] = None

    @property
    def connected(self) -> bool:
        return self._out is not None and self._in is not None

    def list_ports(self) -> MidiPorts:
        m = cast(Any, mido)
        return MidiPorts(inputs=m.get_input_names(), outputs=m.get_output_names())

    def connect(self, input_name: str, output_name: str) -> None:
        m = cast(Any, mido)
        try:
            self._in = m.open_input(input_name)
            self._out = m.open_output(output_name)
        except OSError as exc:
            self.close()
            raise TransportError(f"Unable to open MIDI ports {input_name!r}/{output_name!r}: {exc}") from exc

    def close(self) -> None:
        if self._in is not None:
            self._in.close()
            self._in = None
        if self._out is not None:
            self._out.close()
            self._out = None

    def send(self, msg: mido.Message) -> None:
        if self._out is None:
            raise TransportError("MIDI output not connected. Call connect() first.")
        self._out.send(msg)

    def receive_pending(self) -> list[mido.Message]:
        """Return any pending incoming MIDI messages."""
        if self._in is None:
            raise TransportError("MIDI input not connected. Call connect() first.")

        messages: list[mido.Message] = []
        while True:
            msg = self._in.poll()
            if msg is None:
                break
            messages.append(msg)
        return messages
