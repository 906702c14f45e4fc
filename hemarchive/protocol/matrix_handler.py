from __future__ import annotations

import logging
from typing import Protocol

import mido

from hemarchive.domain.preset import ContinuumPreset, NofN, PresetBuilder
from hemarchive.protocol.codes import (
    CHANNEL15,
    CHANNEL16,
    EDITOR_PRESENT_TICK,
    EDITOR_PRESENT_TOCK,
    USER_BANK_COUNT,
    Cc16,
    DataStream,
    DownloadControl,
    DownloadInfo,
)
from hemarchive.protocol.gather import DataKind, GatherMode, StreamGatherer, gather_mode_for
from hemarchive.protocol.midi_file import MidiFile
from hemarchive.protocol.midi_handler import MidiHandler
from hemarchive.protocol.state import Action, ArchiveState, EngineState


class MessageSink(Protocol):
    def send(self, message: mido.Message) -> None: ...


_NOFN_VALUES = {
    DownloadControl.NOFN_SINGLE: NofN.SINGLE,
    DownloadControl.NOFN_DOUBLE: NofN.DOUBLE,
    DownloadControl.NOFN_TRIPLE: NofN.TRIPLE,
}

_BEGIN_NAMES = (
    DownloadControl.BEGIN_USER_NAMES,
    DownloadControl.BEGIN_SYSTEM_NAMES,
)
_END_NAMES = (
    DownloadControl.END_USER_NAMES,
    DownloadControl.END_SYSTEM_NAMES,
)

# A listed name of "-" marks an unused slot.
EMPTY_SLOT_NAME = "-"


class MatrixHandler(MidiHandler):
    """Protocol engine for an EaganMatrix instrument.

    Owns the outbound port for one run. Inbound events update `state` and
    collect presets; the active stepper issues commands through the methods
    below and waits for `state.ready`.
    """

    def __init__(self, output: MessageSink) -> None:
        self._output = output
        self.state = EngineState()

        self._builder = PresetBuilder()
        self._gatherer = StreamGatherer()
        self._midi_file = MidiFile()
        self._presets: list[ContinuumPreset] = []
        self._binary_code = 0
        self._tick_tock = True

        self._logger = logging.getLogger(self.__class__.__name__)

    # -- state accessors used by steppers ---------------------------------

    @property
    def is_ready(self) -> bool:
        return self.state.ready

    def unready(self) -> None:
        self.state.ready = False

    @property
    def archive_state(self) -> ArchiveState:
        return self.state.archive_state

    def clear_archive_state(self) -> None:
        self.state.archive_state = ArchiveState.UNKNOWN

    @property
    def presets(self) -> list[ContinuumPreset]:
        return list(self._presets)

    def clear_presets(self) -> None:
        self._presets.clear()

    def get_archive_data(self) -> bytes:
        """The archived preset as a MIDI file; clears the archive buffer."""
        return self._midi_file.finish()

    def on_idle(self) -> None:
        # Loading is paced by idle ticks rather than by acknowledgements.
        if self.state.action is Action.LOAD:
            self.state.ready = True

    # -- actions ----------------------------------------------------------

    def start_action(self, action: Action) -> None:
        if action is Action.LIST_NAMES:
            self._action_prelude(action)
            self.request_names()
            # Editor present makes the device send End of Preset Names.
            self.send_cc(CHANNEL16, Cc16.EDITOR_PRESENT, EDITOR_PRESENT_TICK)
        elif action is Action.SAVE_CURRENT:
            self._action_prelude(action)
            self.request_archive_current()
        elif action is Action.SAVE:
            self._action_prelude(action)
            self.request_names()
        elif action is Action.LOAD:
            self._action_prelude(action)
        elif action is Action.CLEAR:
            self._action_prelude(action)
            self.clear_bank(0)
            self.state.next_bank_to_clear = 1
        else:
            raise ValueError(f"{action.value} is not a device action")

    def _action_prelude(self, action: Action) -> None:
        self.state.reset_for(action)
        self._presets.clear()
        self.transmit_quiet()
        self.send_cc(CHANNEL16, Cc16.EDITOR_PRESENT, EDITOR_PRESENT_TICK)

    # -- outbound commands ------------------------------------------------

    def send_message(self, message: mido.Message) -> None:
        self._output.send(message)

    def send_cc(self, channel: int, cc: int, value: int) -> None:
        self._output.send(mido.Message("control_change", channel=channel, control=cc, value=value))

    def _send_program_change(self, channel: int, program: int) -> None:
        self._output.send(mido.Message("program_change", channel=channel, program=program))

    def editor_present(self) -> None:
        value = EDITOR_PRESENT_TICK if self._tick_tock else EDITOR_PRESENT_TOCK
        self._tick_tock = not self._tick_tock
        self.send_cc(CHANNEL16, Cc16.EDITOR_PRESENT, value)

    def choose_edit_slot(self) -> None:
        self.send_cc(CHANNEL16, Cc16.BANK_SELECT, 126)
        self.send_cc(CHANNEL16, Cc16.PRESET_GROUP, 0)
        self._send_program_change(CHANNEL16, 0)

    def set_edit_slot(self) -> None:
        self.send_cc(CHANNEL16, Cc16.BANK_SELECT, 126)
        self.send_cc(CHANNEL16, Cc16.PRESET_GROUP, 0)
        self._send_program_change(CHANNEL15, 1)

    def choose_preset(self, index: int) -> None:
        """Select user preset `index` (0-based program number)."""
        self.send_cc(CHANNEL16, Cc16.BANK_SELECT, 0)
        self.send_cc(CHANNEL16, Cc16.PRESET_GROUP, 0)
        self._send_program_change(CHANNEL16, index)

    def set_slot(self, index: int) -> None:
        """Store the edit buffer to user preset `index` (0-based)."""
        self.send_cc(CHANNEL16, Cc16.BANK_SELECT, 0)
        self.send_cc(CHANNEL16, Cc16.PRESET_GROUP, 0)
        self._send_program_change(CHANNEL15, index)

    def clear_bank(self, bank: int) -> None:
        """Erase user bank `bank` (0-based, 0..7)."""
        self._logger.info("[>Clearing preset bank %d]", bank)
        self.send_cc(CHANNEL16, Cc16.DOWNLOAD_CONTROL, DownloadControl.CLEAR_BANK_BASE + bank)

    def request_names(self) -> None:
        self._logger.info("[>Request names]")
        self.send_cc(CHANNEL16, Cc16.DOWNLOAD_CONTROL, DownloadControl.REQUEST_USER_NAMES)
        self.editor_present()

    def request_archive_current(self) -> None:
        self._logger.info("[>Archive active preset]")
        self.send_cc(CHANNEL16, Cc16.DOWNLOAD_INFO, DownloadInfo.ARCHIVE_CURRENT)

    def retrieve_archive(self) -> None:
        self.send_cc(CHANNEL16, Cc16.DOWNLOAD_INFO, DownloadInfo.RETRIEVE_ARCHIVE)

    def save_to_flash(self) -> None:
        self.send_cc(CHANNEL16, Cc16.DOWNLOAD_CONTROL, DownloadControl.SAVE_TO_FLASH)

    def send_string(self, kind: int, text: str) -> None:
        """Send `text` as a data stream of kind `kind`, one byte per pressure message."""

        self.send_cc(CHANNEL16, Cc16.DATA_STREAM, kind)
        for byte in text.encode("ascii", errors="replace"):
            self._output.send(mido.Message("aftertouch", channel=CHANNEL16, value=byte & 0x7F))
        self.send_cc(CHANNEL16, Cc16.DATA_STREAM, DataStream.END)

    def transmit_quiet(self) -> None:
        for channel in range(13):
            for cc in (Cc16.ALL_SOUND_OFF, Cc16.RESET_ALL, Cc16.LOCAL_CONTROL):
                self.send_cc(channel, cc, 0)

    # -- inbound events ---------------------------------------------------

    def on_control_change(self, ticks: int, channel: int, cc: int, value: int) -> None:
        if self.state.in_archive:
            self._midi_file.on_control_change(ticks, channel, cc, value)
        if channel == CHANNEL16:
            self._on_ch16_control_change(cc, value)

    def on_program_change(self, ticks: int, channel: int, program: int) -> None:
        if self.state.in_archive:
            self._midi_file.on_program_change(ticks, channel, program)
        if channel != CHANNEL16:
            return

        state = self.state
        self._builder.set_number(program)
        preset = self._builder.finish()
        if preset is not None:
            if state.in_preset_names:
                state.names_seen += 1
                if preset.name != EMPTY_SLOT_NAME:
                    self._presets.append(preset)
            elif state.in_archive and state.action.is_saving:
                self._presets.append(preset)
            else:
                self._logger.info("%s", preset.describe())
        if state.action is Action.LOAD and len(self._presets) == 2:
            state.ready = True

    def on_channel_pressure(self, ticks: int, channel: int, pressure: int) -> None:
        if self.state.in_archive:
            self._midi_file.on_channel_pressure(ticks, channel, pressure)
        if channel != CHANNEL16:
            return

        mode = self.state.gather_mode
        if mode is GatherMode.NAME:
            self._builder.name_add(chr(pressure))
        elif mode is GatherMode.TEXT:
            self._builder.text_add(chr(pressure))
        elif mode is GatherMode.CATEGORY:
            self._builder.category_add(chr(pressure))
        elif mode is GatherMode.BINARY:
            self._gatherer.add(pressure)

    def _on_ch16_control_change(self, cc: int, value: int) -> None:
        if cc == Cc16.BANK_SELECT:
            self._builder.set_bank_hi(value)
        elif cc == Cc16.PRESET_GROUP:
            self._builder.set_bank_lo(value)
        elif cc == Cc16.DATA_STREAM:
            self._on_data_stream(value)
        elif cc == Cc16.DOWNLOAD_CONTROL:
            self._on_download_control(value)
        elif cc == Cc16.DOWNLOAD_INFO:
            self._on_download_info(value)

    def _on_data_stream(self, value: int) -> None:
        state = self.state
        if value == DataStream.END:
            if state.gather_mode is GatherMode.BINARY:
                state.last_binary = self._gatherer.flush()
                if state.binary_kind is DataKind.UNKNOWN:
                    self._logger.warning(
                        "Unrecognized binary data kind %d (%d bytes)", self._binary_code, len(state.last_binary)
                    )
                else:
                    self._logger.debug(
                        "Binary data %s: %d bytes", state.binary_kind.label, len(state.last_binary)
                    )
            state.gather_mode = GatherMode.NONE
            state.binary_kind = DataKind.UNKNOWN
            return

        self._binary_code = value
        state.binary_kind = DataKind.from_byte(value)
        state.gather_mode = gather_mode_for(state.binary_kind)
        if state.gather_mode is GatherMode.BINARY:
            self._gatherer.start(False)

    def _on_download_control(self, value: int) -> None:
        state = self.state
        if value == DownloadControl.ARCHIVE_OK:
            state.archive_state = ArchiveState.OK
            if state.action is Action.LOAD:
                self._logger.info(">>ArchiveOk")
                state.ready = True
        elif value == DownloadControl.ARCHIVE_FAIL:
            state.archive_state = ArchiveState.FAIL
            if state.action is Action.LOAD:
                self._logger.info(">>ArchiveFail")
                state.ready = True
        elif value == DownloadControl.DSP_DONE:
            if state.action is Action.CLEAR:
                self._clear_next_bank()
        elif value in _BEGIN_NAMES:
            self._logger.info("[---- Begin preset names ----]")
            state.in_preset_names = True
            state.names_seen = 0
        elif value in _END_NAMES:
            self._logger.info("[---- End preset names ----]")
            state.in_preset_names = False
            state.ready = True
        elif value in _NOFN_VALUES:
            self._builder.set_nofn(_NOFN_VALUES[value])

    def _clear_next_bank(self) -> None:
        state = self.state
        bank = state.next_bank_to_clear
        if bank is not None and bank < USER_BANK_COUNT:
            self.clear_bank(bank)
            state.next_bank_to_clear = bank + 1
        else:
            state.next_bank_to_clear = None
            state.ready = True

    def _on_download_info(self, value: int) -> None:
        state = self.state
        if value == DownloadInfo.BEGIN_ARCHIVE:
            self._logger.info("[---- Begin archive ----]")
            if state.action.is_saving:
                state.in_archive = True
                self._midi_file.clear()
        elif value == DownloadInfo.END_ARCHIVE:
            self._logger.info("[---- End archive ----]")
            if state.action.is_saving:
                state.in_archive = False
                state.ready = True
