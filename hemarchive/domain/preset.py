from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from enum import Enum


logger = logging.getLogger(__name__)


class NofN(Enum):
    """Whether a preset is the first part of a dual or triple combination."""

    SINGLE = 1
    DOUBLE = 2
    TRIPLE = 3


@dataclass(frozen=True)
class ContinuumPreset:
    name: str
    text: str = ""
    category: str = ""
    # Address: bank select (cc0), preset group (cc32) and program change.
    bank_hi: int = 0
    bank_lo: int = 0
    number: int = 0
    nofn: NofN = NofN.SINGLE

    @property
    def index(self) -> int:
        return (self.bank_lo << 7) | self.number

    @property
    def bank_kind(self) -> str:
        if self.bank_hi == 0:
            return "User preset"
        if self.bank_hi == 126:
            return "Current editing slot"
        if self.bank_hi == 127:
            return "System preset"
        return "cat-code"

    def describe(self) -> str:
        combination = {
            NofN.SINGLE: "",
            NofN.DOUBLE: "first of 2 ",
            NofN.TRIPLE: "first of 3 ",
        }[self.nofn]
        return (
            f"Preset: [{self.bank_hi}-{self.bank_lo}-{self.number} {self.bank_kind} {self.index}] "
            f'"{self.name}" {combination}{self.text}'
        )


class PresetBuilder:
    """Collects one preset's fields as they stream in.

    Characters arrive one at a time, bank hi/lo from CCs, and the program
    change that supplies `number` ends the preset.
    """

    def __init__(self) -> None:
        self.start()

    def start(self) -> None:
        self.name = ""
        self.text = ""
        self.category = ""
        self.bank_hi = 0
        self.bank_lo = 0
        self.number: int | None = None
        self.nofn = NofN.SINGLE

    def name_add(self, ch: str) -> None:
        self.name += ch

    def text_add(self, ch: str) -> None:
        self.text += ch

    def category_add(self, ch: str) -> None:
        self.category += ch

    def add_name_chars(self, name: str) -> None:
        for ch in name:
            self.name_add(ch)

    def set_bank_hi(self, value: int) -> None:
        self.bank_hi = value

    def set_bank_lo(self, value: int) -> None:
        self.bank_lo = value

    def set_number(self, value: int) -> None:
        self.number = value

    def set_nofn(self, nofn: NofN) -> None:
        self.nofn = nofn

    def finish(self) -> ContinuumPreset | None:
        """Snapshot the preset and reset; None if the number or name is missing."""

        if self.number is None or not self.name:
            self.start()
            return None
        preset = ContinuumPreset(
            name=self.name,
            text=self.text,
            category=self.category,
            bank_hi=self.bank_hi,
            bank_lo=self.bank_lo,
            number=self.number,
            nofn=self.nofn,
        )
        self.start()
        return preset


def is_empty_preset_name(name: str) -> bool:
    return name == "" or name == "Empty" or name.startswith("Empty.")


def short_hash(data: bytes) -> int:
    """32-bit hash of `data`: a 64-bit digest folded onto itself."""

    digest = int.from_bytes(hashlib.blake2b(data, digest_size=8).digest(), "big")
    return (digest >> 32) ^ (digest & 0xFFFFFFFF)


def make_preset_filename(name: str, data: bytes) -> str:
    if is_empty_preset_name(name):
        logger.info("Renaming Empty or un-named preset")
        return f"anon-{short_hash(data):08x}.mid"
    return f"{name}.mid"
