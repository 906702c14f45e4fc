from __future__ import annotations

"""Preset category codes.

A preset's text carries tags such as `C=ST_BR_WA`: two-letter codes for its
category, type, character, matrix and setting. The table mirrors the Haken
Editor's category collection.
"""

from dataclasses import dataclass
from enum import Enum


class PresetGroup(Enum):
    CATEGORY = "category"
    TYPE = "type"
    CHARACTER = "character"
    MATRIX = "matrix"
    SETTING = "setting"


@dataclass(frozen=True)
class PresetMeta:
    code: str
    group: PresetGroup
    index: int
    name: str


def _group(group: PresetGroup, first_index: int, entries: list[tuple[str, str]]) -> list[PresetMeta]:
    return [
        PresetMeta(code=code, group=group, index=first_index + i, name=name)
        for i, (code, name) in enumerate(entries)
    ]


CATEGORY_CODES: tuple[PresetMeta, ...] = tuple(
    _group(
        PresetGroup.CATEGORY,
        1,
        [
            ("ST", "Strings"),
            ("WI", "Winds"),
            ("VO", "Vocal"),
            ("KY", "Keyboard"),
            ("CL", "Classic"),
            ("OT", "Other"),
            ("PE", "Percussion"),
            ("PT", "Tuned Perc"),
            ("PR", "Processor"),
            ("DO", "Drone"),
            ("MD", "Midi"),
            ("CV", "Control Voltage"),
            ("UT", "Utility"),
        ],
    )
    + _group(
        PresetGroup.TYPE,
        0,
        [
            ("AT", "Atonal"),
            ("BA", "Bass"),
            ("BO", "Bowed"),
            ("BR", "Brass"),
            ("DP", "Demo Preset"),
            ("EP", "Elec Piano"),
            ("FL", "Flute"),
            ("LE", "Lead"),
            ("OR", "Organ"),
            ("PA", "Pad"),
            ("PL", "Plucked"),
            ("RD", "Double Reed"),
            ("RS", "Single Reed"),
            ("SU", "Struck"),
        ],
    )
    + _group(
        PresetGroup.CHARACTER,
        0,
        [
            ("AC", "Acoustic"),
            ("AG", "Aggressive"),
            ("AI", "Airy"),
            ("AN", "Analog"),
            ("AR", "Arpeggio"),
            ("BG", "Big"),
            ("BI", "Bright"),
            ("CH", "Chords"),
            ("CN", "Clean"),
            ("DA", "Dark"),
            ("DI", "Digital"),
            ("DT", "Distorted"),
            ("DY", "Dry"),
            ("EC", "Echo"),
            ("EL", "Electric"),
            ("EN", "Ensemble"),
            ("EV", "Evolving"),
            ("FM", "FM"),
            ("HY", "Hybrid"),
            ("IC", "Icy"),
            ("IN", "Intimate"),
            ("LF", "Lo-fi"),
            ("LP", "Looping"),
            ("LY", "Layered"),
            ("MO", "Morphing"),
            ("MT", "Metallic"),
            ("NA", "Nature"),
            ("NO", "Noise"),
            ("RN", "Random"),
            ("RV", "Reverberant"),
            ("SD", "Snd Design"),
            ("SE", "Stereo"),
            ("SH", "Shaking"),
            ("SI", "Simple"),
            ("SO", "Soft"),
            ("SR", "Strumming"),
            ("SY", "Synthetic"),
            ("WA", "Warm"),
            ("WO", "Woody"),
        ],
    )
    + _group(
        PresetGroup.MATRIX,
        0,
        [
            ("AD", "Additive"),
            ("BB", "BiqBank"),
            ("BH", "BiqGraph"),
            ("BM", "BiqMouth"),
            ("CM", "Cutoff Mod"),
            ("DF", "Formula Delay"),
            ("DM", "Micro Delay"),
            ("DS", "Sum Delay"),
            ("DV", "Voice Delay"),
            ("HM", "HarMan"),
            ("KI", "Kinetic"),
            ("MM", "ModMan"),
            ("OJ", "Osc Jenny"),
            ("OP", "Osc Phase"),
            ("OS", "Osc DSF"),
            ("SB", "SineBank"),
            ("SS", "SineSpray"),
            ("WB", "WaveBank"),
        ],
    )
    + _group(
        PresetGroup.SETTING,
        0,
        [
            ("C1", "Channel 1"),
            ("EM", "Ext Midi Clk"),
            ("MI", "Mono Interval"),
            ("PO", "Portamento"),
            ("RO", "Rounding"),
            ("SP", "Split Voice"),
            ("SV", "Single Voice"),
            ("TA", "Touch Area"),
        ],
    )
)


def category_list(text: str) -> list[str]:
    """Codes found after each `C=` marker, in order of appearance."""

    codes: list[str] = []
    for section in text.replace("\n", " ").split(" "):
        start = section.find("C=")
        if start >= 0:
            codes.extend(section[start + 2 :].split("_"))
    return codes


class CategoryCodes:
    def __init__(self, entries: tuple[PresetMeta, ...] = CATEGORY_CODES) -> None:
        self._by_code = {meta.code: meta for meta in entries}

    def get(self, code: str) -> PresetMeta | None:
        return self._by_code.get(code)

    def get_by_category_name(self, name: str) -> PresetMeta | None:
        return next(
            (m for m in self._by_code.values() if m.group is PresetGroup.CATEGORY and m.name == name),
            None,
        )

    def get_by_category_code(self, code: str) -> PresetMeta | None:
        meta = self._by_code.get(code)
        if meta is not None and meta.group is PresetGroup.CATEGORY:
            return meta
        return None

    def decode(self, text: str) -> str | None:
        """Human-readable summary of the codes in `text`.

        Example: `{category:"Strings", type:["Brass"]}`. Each group appears
        once, in the order it is first seen; unknown codes are ignored.
        """

        if len(text) < 4:
            return None

        groups: dict[PresetGroup, list[str]] = {}
        for code in category_list(text):
            meta = self._by_code.get(code)
            if meta is None:
                continue
            names = groups.setdefault(meta.group, [])
            if meta.name not in names:
                names.append(meta.name)

        parts: list[str] = []
        for group, names in groups.items():
            quoted = ", ".join(f'"{name}"' for name in names)
            if group is PresetGroup.CATEGORY:
                parts.append(f"{group.value}:{quoted}")
            else:
                parts.append(f"{group.value}:[{quoted}]")
        return "{" + ", ".join(parts) + "}"
