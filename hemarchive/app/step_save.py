from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from hemarchive.app.stepper import WorkingStatus
from hemarchive.domain.preset import ContinuumPreset, make_preset_filename
from hemarchive.domain.preset_listing import DEFAULT_LISTING_NAME, save_preset_listing
from hemarchive.protocol.matrix_handler import MatrixHandler
from hemarchive.protocol.state import Action


logger = logging.getLogger(__name__)


def save_preset(path: Path, action: Action, handler: MatrixHandler, preset: ContinuumPreset) -> Path:
    """Write the handler's archived preset to disk and return the file written.

    - folder: a file named after the preset goes in it
    - save-all with a file path: the path is the listing, so use its folder
    - save-current with a file path: that exact file
    """

    data = handler.get_archive_data()
    target = Path(path)
    if target.is_dir():
        target = target / make_preset_filename(preset.name, data)
    elif action is Action.SAVE:
        target = target.parent / make_preset_filename(preset.name, data)
    target.write_bytes(data)
    logger.info("Saved preset '%s'", target)
    return target


class SingleSaver:
    """Save the archive of the current editing slot."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def step(self, handler: MatrixHandler) -> WorkingStatus:
        presets = handler.presets
        if presets:
            preset = presets[0]
        else:
            logger.warning("Archive carried no preset name; saving it anonymously")
            preset = ContinuumPreset(name="")
        save_preset(self._path, Action.SAVE_CURRENT, handler, preset)
        return WorkingStatus.FINISHED


class SaveState(Enum):
    START = "start"
    GATHER_LIST = "gather-list"
    COLLECT_PRESET = "collect-preset"
    SAVE_PRESET = "save-preset"
    FINISH = "finish"


class Saver:
    """Save every user preset, then the listing that names them."""

    def __init__(self, path: Path, listing_name: str = DEFAULT_LISTING_NAME) -> None:
        self._path = path
        self._listing_name = listing_name
        self.save_state = SaveState.START
        self._working_preset = 0
        self._presets: list[ContinuumPreset] = []
        self._filenames: dict[int, str] = {}

    def step(self, handler: MatrixHandler) -> WorkingStatus:
        if self.save_state is SaveState.START:
            logger.info("Gathering user presets...")
            self.save_state = SaveState.GATHER_LIST
            self._working_preset = 0
            self._filenames = {}
            return WorkingStatus.WORKING

        if self.save_state is SaveState.GATHER_LIST:
            self._presets = handler.presets
            for preset in self._presets:
                logger.info("%s", preset.name)
            self.save_state = SaveState.COLLECT_PRESET
            if not self._presets:
                logger.info("No user presets found")
                return WorkingStatus.FINISHED
            return WorkingStatus.WORKING

        if self.save_state is SaveState.COLLECT_PRESET:
            preset = self._presets[self._working_preset]
            logger.info("Collecting %s...", preset.name)
            handler.choose_preset(preset.number)
            handler.start_action(Action.SAVE_CURRENT)
            self.save_state = SaveState.SAVE_PRESET
            return WorkingStatus.WORKING

        if self.save_state is SaveState.SAVE_PRESET:
            preset = self._presets[self._working_preset]
            self._filenames[preset.number] = save_preset(self._path, Action.SAVE, handler, preset).name
            self._working_preset += 1
            if self._working_preset >= len(self._presets):
                self.save_state = SaveState.FINISH
            else:
                self.save_state = SaveState.COLLECT_PRESET
            return WorkingStatus.WORKING

        save_preset_listing(self._presets, self._path, self._listing_name, self._filenames)
        self.save_state = SaveState.START
        return WorkingStatus.FINISHED
