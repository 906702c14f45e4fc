from __future__ import annotations

"""Display names for notes and controllers, used by the MIDI monitor."""

NOTE_NAMES = ("C", "C♯", "D", "E♭", "E", "F", "F♯", "G", "A♭", "A", "B♭", "B")


def note_name(note: int) -> str:
    """E.g. 60 -> 'C5' (octave numbering starts at 0 for note 0)."""
    return f"{NOTE_NAMES[note % 12]}{note // 12}"


CONTINUUM_CC_NAMES: dict[int, str] = {
    0: "Bank Select MSB",
    8: "Octave shift",
    9: "Mono switch",
    10: "Fine tune",
    11: "Expression?",
    12: "i",
    13: "ii",
    14: "iii",
    15: "iv",
    16: "v",
    17: "vi",
    18: "Post Master level",
    19: "Audio input level",
    20: "R-1",
    21: "R-2",
    22: "R-3",
    23: "R-4",
    24: "R-Mix",
    25: "Round rate",
    26: "Pre Master level",
    27: "Output attenuation",
    28: "Round initial",
    29: "Pedal Jack 1",
    30: "Pedal Jack 2",
    31: "Preset advance",
    32: "Bank LSB",
    33: "Action/AES",
    34: "Algorithm",
    35: "Program #",
    36: "Routing",
    37: "Pedal type",
    38: "Data LSB (logs, custom tuning, ...)",
    39: "Polyphony",
    40: "Pitch bend range (semitones)",
    41: "Y cc",
    42: "Z cc",
    43: "Note handling",
    44: "Middle C position",
    45: "Split point (note number)",
    46: "Mono function",
    47: "Recirculator column",
    48: "Mono Interval",
    49: "Note Priority",
    51: "Tuning: 0 default, 1-50 n-tone equal, 60-71 just",
    52: "Pedal 1 cc",
    53: "Pedal 2 cc",
    54: "Pedal octave shift amount",
    55: "Setting Preservation",
    56: "Data Stream <type> (127 = end)",
    59: "Dim menu",
    60: "Touch center",
    61: "Reverse pitch",
    62: "Recirculator type",
    63: "CVC configuration",
    64: "Sustain",
    65: "Rounding override",
    66: "Sos 1",
    67: "Headphone level",
    68: "Line level",
    69: "Sos 2",
    70: "Actuation",
    71: "Total traditional polyphony",
    72: "Total DSP polyphony",
    73: "Total CVC polyphony",
    75: "Stress test",
    76: "Pedal 1 min",
    77: "Pedal 1 max",
    78: "Pedal 2 min",
    79: "Pedal 2 max",
    80: "Q Bias (obsolete)",
    81: "(old) Compression rate",
    82: "(old) Compression time",
    83: "Tilt EQ",
    84: "EQ Freq",
    85: "EQ Mix",
    90: "Compressor Threshold",
    91: "Compressor Attack",
    92: "Compressor Ratio",
    93: "Compressor Mix",
    98: "MPE+ lo NRPN select",
    99: "MPE+ hi NRPN select",
    100: "MPE lo RPN select",
    101: "MPE hi RPN select",
    102: "Firmware version hi",
    103: "Firmware version lo",
    104: "Hardware/CVC hi",
    105: "CVC mid",
    106: "CVC lo",
    107: "SNBN a",
    109: "Editor message",
    110: "HE<>Device info",
    111: "Device status",
    113: "SNBN b",
    114: "DSP %",
    115: "Log dump",
    116: "Haken editor presence",
    117: "Loopback detect",
    118: "Editor reply",
    119: "archive no-op",
    120: "All sound off",
    122: "CRC 0 7'",
    123: "CRC 1 7'",
    124: "CRC 2 7'",
    125: "CRC 3 7'",
    126: "CRC 5 4'",
    127: "MPE Polyphony",
}


def continuum_cc_name(cc: int) -> str:
    return CONTINUUM_CC_NAMES.get(cc, "(available)")


_STANDARD_MSB_NAMES = {
    0: "Bank Select",
    1: "Mod Wheel",
    2: "Breath",
    4: "Pedal",
    5: "Portamento Time",
    6: "Data Entry",
    7: "Volume",
    8: "Balance",
    10: "Pan",
    11: "Expression",
    12: "Effect 1",
    13: "Effect 2",
    16: "General",
    17: "General",
    18: "General",
    19: "General",
}

_STANDARD_NAMES = {
    64: "Damper pedal (sustain)",
    65: "Portamento on/off",
    66: "Sostenuto on/off",
    67: "Soft Pedal on/off",
    68: "Legato footswitch",
    69: "Hold 2",
    70: "Sound 1 (sound variation)",
    71: "Sound 2 (timbre/harmonic intensity/resonance)",
    72: "Sound 3 (release time)",
    73: "Sound 4 (attack time)",
    74: "Sound 5 (brightness)",
    75: "Sound 6",
    76: "Sound 7",
    77: "Sound 8",
    78: "Sound 9",
    79: "Sound 10",
    80: "Generic on/off (decay)",
    81: "Generic on/off (HPF freq)",
    82: "Generic on/off",
    83: "Generic on/off",
    84: "Portamento",
    87: "Multipurpose LSB",
    88: "Hi-res velocity prefix",
    91: "Effect 1 depth (reverb)",
    92: "Effect 2 depth (tremolo)",
    93: "Effect 3 depth (chorus)",
    94: "Effect 4 depth (detune)",
    95: "Effect 5 depth (phaser)",
    96: "Data increment (+1)",
    97: "Data decrement (-1)",
    98: "NRPN LSB",
    99: "NRPN MSB",
    100: "RPN LSB",
    101: "RPN MSB",
    120: "All sound off",
    121: "Reset all",
    122: "Local on/off",
    123: "All notes off",
    124: "Omni mode off",
    125: "Omni mode on",
    126: "Mono (#channels, 0=all)",
    127: "Poly mode",
}


def standard_cc_name(cc: int) -> str:
    """General MIDI controller name; cc32-63 are the LSBs of cc0-31."""

    if 0 <= cc < 32:
        return f"{_STANDARD_MSB_NAMES.get(cc, '(undefined)')} MSB"
    if 32 <= cc < 64:
        msb = cc - 32
        return f"cc{msb:02d} {_STANDARD_MSB_NAMES.get(msb, '(undefined)')} LSB"
    if cc in _STANDARD_NAMES:
        return _STANDARD_NAMES[cc]
    if 0 <= cc <= 127:
        return "(undefined)"
    return "(invalid cc)"
