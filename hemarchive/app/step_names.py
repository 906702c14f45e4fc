from __future__ import annotations

import logging
from pathlib import Path

from hemarchive.app.stepper import WorkingStatus
from hemarchive.domain.categories import CategoryCodes
from hemarchive.domain.preset_listing import DEFAULT_LISTING_NAME, save_preset_listing
from hemarchive.protocol.matrix_handler import MatrixHandler


logger = logging.getLogger(__name__)


class NameList:
    """Print the user preset names and, given a path, write the listing file."""

    def __init__(self, path: Path | None = None, listing_name: str = DEFAULT_LISTING_NAME) -> None:
        self._path = path
        self._listing_name = listing_name
        self._categories = CategoryCodes()

    def step(self, handler: MatrixHandler) -> WorkingStatus:
        presets = handler.presets
        if not presets:
            logger.info("No user presets found")
            return WorkingStatus.FINISHED

        for preset in presets:
            logger.info("%s", preset.describe())
            friendly = self._categories.decode(preset.text)
            if friendly is not None:
                logger.info("  %s", friendly)
        if self._path is not None:
            save_preset_listing(presets, self._path, self._listing_name)
        return WorkingStatus.FINISHED
