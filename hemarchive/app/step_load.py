from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from hemarchive.app.stepper import WorkingStatus
from hemarchive.domain.preset_listing import DEFAULT_LISTING_NAME, read_preset_listing
from hemarchive.errors import ArchiveIncompleteError
from hemarchive.protocol.codes import DataStream
from hemarchive.protocol.matrix_handler import MatrixHandler
from hemarchive.protocol.read_midi_file import ReadMidiFile, is_midi_header
from hemarchive.protocol.state import ArchiveState


logger = logging.getLogger(__name__)

EDIT_SLOT = 0


@dataclass(frozen=True)
class LoadItem:
    """One preset file bound for a slot (0 is the editing slot, 1-128 user presets)."""

    slot: int
    name: str
    data: bytes


def _preset_name(filename: str) -> str:
    return filename[: -len(".mid")] if filename.lower().endswith(".mid") else filename


def _items_from_listing(listing: Path) -> list[LoadItem]:
    folder = listing.parent
    items: list[LoadItem] = []
    for preset in read_preset_listing(listing):
        filename = preset.name if preset.name.lower().endswith(".mid") else f"{preset.name}.mid"
        items.append(
            LoadItem(slot=preset.number, name=_preset_name(filename), data=(folder / filename).read_bytes())
        )
    return items


def build_load_items(path: Path | str, listing_name: str = DEFAULT_LISTING_NAME) -> list[LoadItem]:
    """Presets to load from `path`.

    - a .mid file goes to the editing slot
    - any other file is read as a listing, with the .mid files beside it
    - a folder uses its listing if present, otherwise every .mid file in
      name order, numbered from slot 1
    """

    path = Path(path)
    if path.is_file():
        data = path.read_bytes()
        if is_midi_header(data):
            return [LoadItem(slot=EDIT_SLOT, name=path.stem, data=data)]
        return _items_from_listing(path)

    listing = path / listing_name
    if listing.is_file():
        return _items_from_listing(listing)

    files = sorted(p for p in path.iterdir() if p.is_file() and p.suffix.lower() == ".mid")
    return [
        LoadItem(slot=index, name=p.stem, data=p.read_bytes())
        for index, p in enumerate(files, start=1)
    ]


class SendState(Enum):
    START = "start"
    PROLOGUE = "prologue"
    MATRIX = "matrix"
    NAME = "name"
    SAVE = "save"
    FINISH = "finish"


def busy_wait(ms: float) -> None:
    # Sleeping here can stall inbound delivery, so spin instead.
    deadline = time.perf_counter() + ms / 1000.0
    while time.perf_counter() < deadline:
        pass


class PresetLoader:
    """Load presets into their slots, highest slot first.

    Per preset: select the slot, ask the device to retrieve an archive, replay
    the stored MIDI, then on archive-ok send the name, commit the slot and
    save to flash.
    """

    def __init__(self, items: list[LoadItem], *, pace: bool = True) -> None:
        self._items = sorted(items, key=lambda item: item.slot, reverse=True)
        self._pace = pace
        self._index = 0
        self.state = SendState.START
        self._replayed = False
        self.failed: list[LoadItem] = []

    @property
    def current(self) -> LoadItem | None:
        if self._index < len(self._items):
            return self._items[self._index]
        return None

    def step(self, handler: MatrixHandler) -> WorkingStatus:
        item = self.current
        if item is None:
            return WorkingStatus.FINISHED
        if self._step_item(handler, item) is WorkingStatus.WORKING:
            return WorkingStatus.WORKING

        self._index += 1
        self.state = SendState.START
        if self.current is not None:
            return WorkingStatus.WORKING
        if self.failed:
            names = ", ".join(repr(item.name) for item in self.failed)
            raise ArchiveIncompleteError(f"The instrument rejected {len(self.failed)} preset(s): {names}")
        return WorkingStatus.FINISHED

    def _step_item(self, handler: MatrixHandler, item: LoadItem) -> WorkingStatus:
        if self.state is SendState.START:
            logger.info(">>Starting preset load of %r into slot %d", item.name, item.slot)
            if item.slot == EDIT_SLOT:
                handler.choose_edit_slot()
            else:
                handler.choose_preset(item.slot - 1)
            handler.editor_present()
            self.state = SendState.PROLOGUE
            return WorkingStatus.WORKING

        if self.state is SendState.PROLOGUE:
            logger.info(">>Sending preset data")
            handler.clear_archive_state()
            handler.retrieve_archive()
            self._replayed = False
            self.state = SendState.MATRIX
            return WorkingStatus.WORKING

        if self.state is SendState.MATRIX:
            if not self._replayed:
                self._replay(handler, item)
                self._replayed = True

            archive_state = handler.archive_state
            if archive_state is ArchiveState.OK:
                self.state = SendState.NAME
                handler.unready()
            elif archive_state is ArchiveState.FAIL:
                # TODO: confirm with Haken whether a failed archive should be retried.
                logger.error("Preset loading failed for %r (slot %d); skipping it", item.name, item.slot)
                self.failed.append(item)
                self.state = SendState.FINISH
                handler.unready()
            return WorkingStatus.WORKING

        if self.state is SendState.NAME:
            logger.info('>>Sending "%s" to slot %d', item.name, item.slot)
            handler.clear_presets()
            handler.send_string(DataStream.NAME, item.name)
            if item.slot == EDIT_SLOT:
                handler.set_edit_slot()
            else:
                handler.set_slot(item.slot - 1)
            self.state = SendState.SAVE
            handler.unready()
            return WorkingStatus.WORKING

        if self.state is SendState.SAVE:
            logger.info(">>Save to flash")
            handler.save_to_flash()
            handler.editor_present()
            self.state = SendState.FINISH
            handler.unready()
            return WorkingStatus.WORKING

        return WorkingStatus.FINISHED

    def _replay(self, handler: MatrixHandler, item: LoadItem) -> None:
        for delay_ms, message in ReadMidiFile(item.data):
            if self._pace and delay_ms > 0:
                busy_wait(delay_ms)
            handler.send_message(message)
