from __future__ import annotations

from dataclasses import dataclass
import logging

import mido

from midi import HakenMidi
from hemarchive.errors import TransportError
from hemarchive.protocol.hexdump import format_midi_bytes
from hemarchive.transport.acquire_device import get_haken_io, trim_port_tag


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConnectionInfo:
    input_name: str
    output_name: str

    @property
    def friendly_name(self) -> str:
        return trim_port_tag(self.input_name)


class MidiTransport:
    """Thin wrapper around `HakenMidi` with an app-friendly interface."""

    def __init__(self, midi: HakenMidi) -> None:
        self._midi = midi

    def connect(self, device_hint: str | None = None) -> ConnectionInfo:
        """Open the instrument best matching `device_hint` (or the first one found)."""

        ports = self._midi.list_ports()
        names = get_haken_io(ports.inputs, ports.outputs, device_hint)
        if names is None:
            raise TransportError(
                "Unable to find a suitable available device. "
                f"Available inputs: {ports.inputs}, outputs: {ports.outputs}"
            )
        input_name, output_name = names
        self._midi.connect(input_name, output_name)
        logger.info("Connected MIDI: input=%r output=%r", input_name, output_name)
        return ConnectionInfo(input_name=input_name, output_name=output_name)

    def close(self) -> None:
        logger.info("Closing MIDI transport")
        self._midi.close()

    def send(self, msg: mido.Message) -> None:
        logger.debug("TX %s: %s", msg.type, format_midi_bytes(msg.bytes()))
        self._midi.send(msg)

    def receive_pending(self) -> list[mido.Message]:
        messages = self._midi.receive_pending()
        for msg in messages:
            logger.debug("RX %s: %s", msg.type, format_midi_bytes(msg.bytes()))
        return messages

    def send_control_change(self, control: int, value: int, channel: int = 0) -> None:
        if control < 0 or control > 127:
            raise ValueError("control must be 0..127")
        if value < 0 or value > 127:
            raise ValueError("value must be 0..127")
        if channel < 0 or channel > 15:
            raise ValueError("channel must be 0..15")
        self.send(mido.Message("control_change", control=control, value=value, channel=channel))

