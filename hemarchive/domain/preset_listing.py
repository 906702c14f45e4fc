from __future__ import annotations

"""Preset list files, in the Haken Editor group-list format.

Each line is `<slot>,"<name>.mid"` with slots numbered 1 to 128.
"""

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path

from hemarchive.domain.preset import ContinuumPreset, PresetBuilder


logger = logging.getLogger(__name__)

DEFAULT_LISTING_NAME = "UserPresets.txt"
MAX_SLOT = 128


def listing_path(path: Path | str, listing_name: str = DEFAULT_LISTING_NAME) -> Path:
    path = Path(path)
    return path / listing_name if path.is_dir() else path


def format_preset_listing(
    presets: Sequence[ContinuumPreset],
    filenames: Mapping[int, str] | None = None,
) -> str:
    """Listing text; presets arrive highest slot first, so write them reversed.

    `filenames` maps a preset number to the file actually written for it, which
    differs from the preset name when the name was anonymized.
    """

    filenames = filenames or {}
    lines = []
    for preset in reversed(presets):
        filename = filenames.get(preset.number, f"{preset.name}.mid")
        lines.append(f'{1 + preset.number},"{filename}"\n')
    return "".join(lines)


def save_preset_listing(
    presets: Sequence[ContinuumPreset],
    path: Path | str,
    listing_name: str = DEFAULT_LISTING_NAME,
    filenames: Mapping[int, str] | None = None,
) -> Path:
    """Write the listing to `path`, or to `path/listing_name` for a folder."""

    target = listing_path(path, listing_name)
    target.write_text(format_preset_listing(presets, filenames), encoding="utf-8")
    logger.info("Saved preset list: '%s'", target)
    return target


def parse_preset_listing(text: str) -> list[ContinuumPreset]:
    """Parse listing lines, stopping quietly at the first malformed one.

    The Haken Editor behaves the same way, so a damaged tail is not an error.
    The returned presets carry the slot number (1-based) in `number`.
    """

    presets: list[ContinuumPreset] = []
    builder = PresetBuilder()
    for line in text.splitlines():
        builder.start()
        pieces = line.split(",")
        try:
            slot = int(pieces[0].strip())
        except ValueError:
            break
        if slot < 0 or slot > MAX_SLOT or len(pieces) < 2:
            break
        builder.set_number(slot)
        builder.add_name_chars(pieces[1].strip(' \t"'))
        preset = builder.finish()
        if preset is None:
            break
        presets.append(preset)
    return presets


def read_preset_listing(path: Path | str) -> list[ContinuumPreset]:
    return parse_preset_listing(Path(path).read_text(encoding="utf-8"))
