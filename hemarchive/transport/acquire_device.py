from __future__ import annotations

"""Pick an EaganMatrix instrument among the connected MIDI ports.

With no hint the first Haken device wins. With a hint, port names are
normalized and ranked by edit distance to the hint.
"""

import string
from collections.abc import Sequence
from enum import Enum


RANK_WIDTH = 33
RANK_FILLER = "~"
SUBSTRING_BONUS = 5


class HakenDeviceKind(Enum):
    CONTINUUM = "Continuum"
    CONTINUUMINI = "ContinuuMini"
    EAGANMATRIX_MODULE = "EaganMatrix Module"
    OSMOSE = "Osmose"
    NOT_HAKEN = "Not a Haken device"

    @classmethod
    def identify(cls, name: str) -> HakenDeviceKind:
        if len(name) < 6:
            return cls.NOT_HAKEN
        # "Continuum" is not a substring of "ContinuuMini", so order is safe.
        if "Continuum" in name:
            return cls.CONTINUUM
        if "ContinuuMini" in name:
            return cls.CONTINUUMINI
        if "EaganMatrix" in name:
            return cls.EAGANMATRIX_MODULE
        if "Osmose" in name:
            return cls.OSMOSE
        return cls.NOT_HAKEN


def trim_port_tag(name: str) -> str:
    """Drop a trailing port index decoration such as ' [2]' or ' 1'."""
    return name.rstrip("[]0123456789").rstrip()


def rank_name(name: str) -> str:
    """Normalize a port name for comparison with a user hint.

    The port tag is trimmed, leading digits and spaces are skipped, letters
    and digits kept, and runs of spaces fold to one. Everything else is
    dropped. The result is padded so short names don't win on length alone.
    """

    ranked: list[str] = []
    leading = True
    is_space = False
    for ch in trim_port_tag(name):
        if ch == " ":
            if not leading and not is_space:
                ranked.append(ch)
                is_space = True
        elif ch in string.digits:
            if not leading:
                ranked.append(ch)
            is_space = False
        elif ch in string.ascii_letters:
            leading = False
            is_space = False
            ranked.append(ch)
    return "".join(ranked).ljust(RANK_WIDTH, RANK_FILLER)


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance, single-row version."""

    if not a:
        return len(b)
    if not b:
        return len(a)
    row = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        diagonal = row[0]
        row[0] = i
        for j, cb in enumerate(b, start=1):
            above = row[j]
            row[j] = min(
                row[j] + 1,
                row[j - 1] + 1,
                diagonal + (0 if ca == cb else 1),
            )
            diagonal = above
    return row[-1]


def score_name(name: str, hint: str) -> int:
    ranked = rank_name(name)
    score = edit_distance(hint, ranked)
    if hint in ranked:
        score -= SUBSTRING_BONUS
    return score


def select_device(names: Sequence[str], hint: str) -> str | None:
    """Best match for `hint` among `names`; ties keep the earliest name."""

    best: str | None = None
    best_score = 0
    for name in names:
        score = score_name(name, hint)
        if best is None or score < best_score:
            best = name
            best_score = score
    return best


def first_haken_device(names: Sequence[str]) -> str | None:
    return next(
        (n for n in names if HakenDeviceKind.identify(trim_port_tag(n)) is not HakenDeviceKind.NOT_HAKEN),
        None,
    )


def haken_devices(names: Sequence[str]) -> list[str]:
    return [n for n in names if HakenDeviceKind.identify(trim_port_tag(n)) is not HakenDeviceKind.NOT_HAKEN]


def choose_device(names: Sequence[str], hint: str | None) -> str | None:
    if not hint:
        return first_haken_device(names)
    return select_device(haken_devices(names), hint)


def get_haken_io(
    inputs: Sequence[str], outputs: Sequence[str], hint: str | None = None
) -> tuple[str, str] | None:
    """Matching `(input, output)` port names, or None.

    The output is chosen by matching the chosen input's friendly name, so
    both directions belong to the same instrument.
    """

    input_name = choose_device(inputs, hint)
    if input_name is None:
        return None
    output_name = choose_device(outputs, trim_port_tag(input_name))
    if output_name is None:
        return None
    return input_name, output_name
