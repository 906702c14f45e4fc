from __future__ import annotations

"""Live decoding of everything an EaganMatrix instrument sends."""

import logging
import queue

from hemarchive.domain.categories import CategoryCodes
from hemarchive.domain.midi_names import continuum_cc_name, note_name, standard_cc_name
from hemarchive.domain.preset import NofN, PresetBuilder
from hemarchive.protocol.cc_text import cc_text
from hemarchive.protocol.codes import CHANNEL16, EDITOR_PRESENT_TICK, Cc16, DataStream, DownloadControl
from hemarchive.protocol.gather import DataKind, GatherMode, StreamGatherer, gather_mode_for
from hemarchive.protocol.hexdump import format_midi_bytes
from hemarchive.protocol.midi_handler import PITCH_BEND_CENTER, MidiHandler, dispatch_midi
from hemarchive.transport.midi_source import MidiSource


logger = logging.getLogger(__name__)

MATRIX_CHANNEL = 15
DEFAULT_BEND_RANGE = 96

LED_COLORS = {
    0: "Off",
    1: "Blue",
    2: "Red",
    3: "Bright Green",
    4: "Green",
    5: "White",
    6: "Yellow",
    7: "Purple",
    8: "Blue Green",
}

AES_RATES = {
    1: "non-standard",
    2: "44.1",
    3: "48.0",
    4: "88.2",
    5: "96.0",
    6: "176.4",
    7: "192.0",
}

_NOFN_VALUES = {
    DownloadControl.NOFN_SINGLE: NofN.SINGLE,
    DownloadControl.NOFN_DOUBLE: NofN.DOUBLE,
    DownloadControl.NOFN_TRIPLE: NofN.TRIPLE,
}


def mpe_pitch_bend(bend: int, lsb: int) -> int:
    """Signed 21-bit bend from the 14-bit value and its MPE+ cc87 extension."""
    return ((bend << 7) | lsb) - (PITCH_BEND_CENTER << 7)


class MidiMonitor(MidiHandler):
    """Logs one readable line per inbound event.

    Channels in log lines are 1-based, as the instrument's documentation
    numbers them. Channel 16 carries device management, channel 15 the
    matrix data (summarised as begin/end markers) and channel 1 the
    instrument's own controllers.
    """

    def __init__(self) -> None:
        self._gather_mode = GatherMode.NONE
        self._binary_kind = DataKind.UNKNOWN
        self._gatherer = StreamGatherer()
        self._builder = PresetBuilder()
        self._categories = CategoryCodes()
        self.firmware_version: int | None = None
        self.bend_range = DEFAULT_BEND_RANGE
        self.in_matrix = False
        self._cc87 = 0

    # -- channel voice ----------------------------------------------------

    def on_note_off(self, ticks: int, channel: int, note: int, velocity: int) -> None:
        logger.info("%6d| ch%-2d Note off %s (#%d) v=%d", ticks, channel + 1, note_name(note), note, velocity)
        self._cc87 = 0

    def on_note_on(self, ticks: int, channel: int, note: int, velocity: int) -> None:
        logger.info("%6d| ch%-2d Note on %s (#%d) v=%d", ticks, channel + 1, note_name(note), note, velocity)

    def on_polyphonic_key_pressure(self, ticks: int, channel: int, note: int, pressure: int) -> None:
        logger.info("%6d| ch%-2d Poly Key Pressure %d %d", ticks, channel + 1, note, pressure)

    def on_control_change(self, ticks: int, channel: int, cc: int, value: int) -> None:
        if cc == Cc16.MPE_LSB:
            self._cc87 = value

        if self.in_matrix and channel != MATRIX_CHANNEL - 1 and cc != Cc16.DATA_STREAM:
            logger.info("[End Matrix data]")
            self.in_matrix = False

        if channel == 0:
            self._log_cc(ticks, channel, cc, value, continuum_cc_name(cc))
        elif channel == MATRIX_CHANNEL - 1:
            if not self.in_matrix:
                logger.info("[Begin Matrix data (ch15)]")
                self.in_matrix = True
        elif channel == CHANNEL16:
            self._on_ch16_control_change(ticks, cc, value)
        else:
            self._log_cc(ticks, channel, cc, value, standard_cc_name(cc))

    def on_program_change(self, ticks: int, channel: int, program: int) -> None:
        logger.info("%6d| ch%-2d Program Change %d", ticks, channel + 1, program)
        if channel != CHANNEL16:
            return
        self._builder.set_number(program)
        preset = self._builder.finish()
        if preset is not None:
            logger.info("%s", preset.describe())
            friendly = self._categories.decode(preset.text)
            if friendly is not None:
                logger.info("  %s", friendly)

    def on_channel_pressure(self, ticks: int, channel: int, pressure: int) -> None:
        if channel == CHANNEL16:
            mode = self._gather_mode
            if mode is GatherMode.NAME:
                self._builder.name_add(chr(pressure))
            elif mode is GatherMode.TEXT:
                self._builder.text_add(chr(pressure))
            elif mode is GatherMode.CATEGORY:
                self._builder.category_add(chr(pressure))
            elif mode is GatherMode.BINARY:
                self._gatherer.add(pressure)
            else:
                logger.info("%6d| ch%-2d Channel Pressure %d", ticks, channel + 1, pressure)
            return

        z = ((pressure << 7) | self._cc87) / 1024.0
        self._cc87 = 0
        logger.info("%6d| ch%-2d Channel Pressure (Z) %.4f", ticks, channel + 1, z)

    def on_pitch_bend_change(self, ticks: int, channel: int, bend: int) -> None:
        # A zero range would come from a corrupt cc40; fall back to the default.
        bend_range = self.bend_range or DEFAULT_BEND_RANGE
        semitones = mpe_pitch_bend(bend, self._cc87) / bend_range
        self._cc87 = 0
        logger.info("%6d| ch%-2d Bend %.3f", ticks, channel + 1, semitones)

    # -- system -----------------------------------------------------------

    def on_system_exclusive(self, ticks: int, data: bytes) -> None:
        logger.info("%6d| SysEx %5d:[%s]", ticks, len(data), format_midi_bytes(data, max_len=None))

    def on_midi_time_code(self, ticks: int, frame: int, values: int) -> None:
        logger.info("%6d| MIDI time code frame=%d values=%d", ticks, frame, values)

    def on_song_position_pointer(self, ticks: int, beats: int) -> None:
        logger.info("%6d| Song Position %d beats", ticks, beats)

    def on_song_select(self, ticks: int, song: int) -> None:
        logger.info("%6d| Song Select %d", ticks, song)

    def on_tune_request(self, ticks: int) -> None:
        logger.info("%6d| Tune Request", ticks)

    def on_timing_clock(self, ticks: int) -> None:
        logger.info("%6d| Timing Clock", ticks)

    def on_start(self, ticks: int) -> None:
        logger.info("%6d| Start", ticks)

    def on_continue(self, ticks: int) -> None:
        logger.info("%6d| Continue", ticks)

    def on_stop(self, ticks: int) -> None:
        logger.info("%6d| Stop", ticks)

    def on_active_sensing(self, ticks: int) -> None:
        logger.info("%6d| Active Sensing", ticks)

    def on_system_reset(self, ticks: int) -> None:
        logger.info("%6d| System Reset", ticks)

    # -- channel 16 -------------------------------------------------------

    @staticmethod
    def _log_cc(ticks: int, channel: int, cc: int, value: int, name: str) -> None:
        logger.info("%6d| ch%-2d cc%-3d [%s] %d", ticks, channel + 1, cc, name, value)

    def _on_ch16_control_change(self, ticks: int, cc: int, value: int) -> None:
        self._log_cc(ticks, CHANNEL16, cc, value, continuum_cc_name(cc))

        if cc == Cc16.BANK_SELECT:
            self._builder.set_bank_hi(value)
        elif cc == Cc16.PRESET_GROUP:
            self._builder.set_bank_lo(value)
        elif cc == Cc16.BEND_RANGE:
            self.bend_range = value
            described = str(value) if 1 <= value <= 96 else f"MPE+ ch1 {value - 96}"
            logger.info("%6d| ch%-2d cc%-3d [Pitch bend range] %s", ticks, CHANNEL16 + 1, cc, described)
        elif cc == Cc16.DATA_STREAM:
            self._on_data_stream(value)
        elif cc == Cc16.FIRMWARE_VERSION_HI:
            self.firmware_version = value
        elif cc == Cc16.FIRMWARE_VERSION_LO:
            self.firmware_version = ((self.firmware_version or 0) << 7) | value
            logger.info("Firmware version: %d", self.firmware_version)
        elif cc == Cc16.DOWNLOAD_CONTROL and value in _NOFN_VALUES:
            self._builder.set_nofn(_NOFN_VALUES[value])
        elif cc in (Cc16.DOWNLOAD_CONTROL, Cc16.DOWNLOAD_INFO):
            message = cc_text(cc, value)
            if message is not None:
                logger.info("%s", message)
        elif cc == Cc16.DEVICE_STATUS:
            self._on_device_status(value)
        elif cc == Cc16.DSP_PERCENT:
            logger.info("DSP %d %d%%", value >> 5, (value & 0x1F) * 4)

    def _on_device_status(self, value: int) -> None:
        logger.info("[LED %s]", LED_COLORS.get(value & 0x0F, "?"))
        aes = (value & 0x70) >> 4
        if aes:
            logger.info("[AES %s kHz]", AES_RATES.get(aes, "?"))

    def _on_data_stream(self, value: int) -> None:
        if value == DataStream.END:
            if self._gather_mode is GatherMode.BINARY:
                data = self._gatherer.flush()
                logger.info(
                    "Binary data %s: %d [%s]",
                    self._binary_kind.label,
                    len(data),
                    format_midi_bytes(data, max_len=None),
                )
            self._binary_kind = DataKind.UNKNOWN
            self._gather_mode = GatherMode.NONE
            return

        self._binary_kind = DataKind.from_byte(value)
        self._gather_mode = gather_mode_for(self._binary_kind)
        if self._gather_mode is GatherMode.BINARY:
            if self._binary_kind is DataKind.UNKNOWN:
                logger.info("?Binary data %d", value)
            self._gatherer.start(False)


def run_monitor(transport, *, heartbeat_s: float = 1.0) -> None:
    """Log inbound MIDI from a connected transport until Ctrl-C.

    Asks the instrument for detailed output, the user preset names and
    change notifications, then polls its status whenever the line has been
    quiet for `heartbeat_s`.
    """

    monitor = MidiMonitor()
    source = MidiSource(transport)
    source.start()
    try:
        logger.info("[Enabling detailed MIDI output]")
        transport.send_control_change(Cc16.EDITOR_PRESENT, EDITOR_PRESENT_TICK, channel=CHANNEL16)
        logger.info("[Request User preset names]")
        transport.send_control_change(Cc16.DOWNLOAD_CONTROL, DownloadControl.REQUEST_USER_NAMES, channel=CHANNEL16)
        logger.info("[Request updates when presets change]")
        transport.send_control_change(Cc16.SEND_UPDATES, 1, channel=CHANNEL16)

        while True:
            if source.error is not None:
                raise source.error
            try:
                message = source.messages.get(timeout=heartbeat_s)
            except queue.Empty:
                logger.info("[Poll device status, DSP]")
                transport.send_control_change(Cc16.EDITOR_PRESENT, EDITOR_PRESENT_TICK, channel=CHANNEL16)
                continue
            dispatch_midi(monitor, message)
    except KeyboardInterrupt:
        logger.info("Monitor stopped")
    finally:
        source.stop()
        source.join()
        transport.close()
