from __future__ import annotations

"""Text for Download Control (cc109) and Download Info (cc110) values."""

from hemarchive.protocol.codes import Cc16


DOWNLOAD_CONTROL_TEXT: dict[int, str] = {
    0: "[Reboot device]",
    1: "[Download failed, try again]",
    2: "[Download in progress]",
    4: "[Data download completed]",
    5: "[End of Preset Group]",
    6: "[Archive failed, try again]",
    7: "[Query Kenton]",
    8: "[End of Archive Retrieve]",
    9: "[Reduce Gain]",
    10: "[Reduce Polyphony]",
    11: "[Factory Calibration In Progress]",
    12: "[ERASE]",
    13: "[AES Sync Failure]",
    14: "[Turn On or Disconnect CVC]",
    15: "[Firmware version mismatch]",
    16: "[Config to MIDI]",
    17: "[Begin firmware download]",
    18: "[Begin data download]",
    19: "[done with firmware 21364 download]",
    20: "[End data download]",
    21: "[MIDI loopback detected]",
    24: "[begin CEE config send txDsp (from daisy=1 to 2,3)]",
    25: "[end CEE config send txDsp (from daisy=1 to 2,3)]",
    # Handshake at the end of the txDsp preset-sending process.
    26: "[---- Begin preset ----]",
    27: "[config send txDsp failure - could try again?]",
    28: "[after Update File 1 reboot, do Update]",
    29: "[Yellow LED for archive create]",
    30: "[HE->Dev: begin Midi stress test]",
    31: "[HE<-Dev: error in Midi rx sequence]",
    32: "[HE->Dev: preset names to Midi, then current config]",
    33: "[old preset needs manually-implemented update]",
    34: "[Reset Calibration]",
    35: "[Refine Calibration]",
    36: "[full midi transmission rate]",
    37: "[one-third midi transmission rate]",
    38: "[one-twentieth midi transmission rate]",
    39: "[---- Begin system presets ----]",
    40: "[---- End system presets ----]",
    41: "[Factory Calibration]",
    42: "[ready for update after recovery boot]",
    43: "[done with firmware 21489 download, burn user flash]",
    44: "[reboot after Firmware File 1]",
    45: "[toggle Slim Continuum surface alignment mode]",
    46: "[add currently-playing finger to Trim array]",
    47: "[remove trim point closest to currently-playing finger]",
    48: "[remove all trim data]",
    49: "[---- Begin system presets ----]",
    50: "[exit Combination Preset mode]",
    51: "[store calib/global/userPresets to continuuMini factory setup]",
    52: "[to prev sysPreset]",
    53: "[to next sysPreset]",
    54: "[---- Begin Preset Names ----]",
    55: "[---- End Preset Names ----]",
    56: "[save Combi preset to same slot or to disk]",
    60: "[Remake QSPI data]",
    63: "[Usb-Midi out from Mini did not get Ack]",
    64: "[Midi rx queue overflow]",
    65: "[Midi tx queue overflow]",
    66: "[Midi rx syntax error]",
    67: "[Midi rx bad bit widths]",
    68: "[serial sensors errors]",
    69: "[output has nan]",
    70: "[CEE comm glitch]",
    71: "[End ContinuuMini firmware]",
    72: "[end scrolling ascii log via Midi]",
    73: "[daisy=0,1 scrolling ascii log via Midi]",
    74: "[daisy=2 scrolling ascii log via Midi]",
    75: "[daisy=3 scrolling ascii log via Midi]",
    76: "[factory only]",
    77: "[factory only]",
    78: "[factory only]",
    88: "[numDecMat| decrement numeric matrix point]",
    89: "[numIncMat| increment numeric matrix point]",
    90: "[mendDisco| mend discontinuity at note (outlier to Sensor Map)]",
    91: "[rebootRecov| reboot in Recovery Mode]",
    92: "[stageUp]",
    93: "[stageDown]",
    94: "[stageDownOk1]",
    95: "[stageDownOk2]",
    96: "[stageDownOk3]",
    97: "[stageDownFail1]",
    98: "[stageDownFail2]",
    99: "[stageDownFail3]",
    100: "[rebootUser|]",
    101: "[gridToFlash|]",
    102: "[Mend divided note]",
    103: "[startUpdF2| <-HE: beginning of Update File 2]",
    104: "[Preset not first in a combination]",
    105: "[Preset first in a dual combination]",
    106: "[Preset first in triple combination]",
}

DOWNLOAD_INFO_TEXT: dict[int, str] = {
    0: "[profileEnd]",
    100: "[Save preset 0]",
    118: "Download in progress. Please wait",
    119: "[archiveNop]",
    120: "[edRecordArchive]",
    121: "[cfRetrieveArch]",
    123: "[archiveEof]",
    124: "[archiveToFile]",
    125: "[Finalizing]",
    126: "[Initializing]",
    127: "[Profile is being generated. Please wait.]",
}


def cc_text(cc: int, value: int) -> str | None:
    """Describe a cc109/cc110 value, or None when it has no text."""

    if cc == Cc16.DOWNLOAD_CONTROL:
        if 80 <= value <= 87:
            return f"[Download tuning grid {1 + value - 80}]"
        if 107 <= value <= 114:
            return f"[Demo assortment to group {1 + value - 107}]"
        if 115 <= value <= 122:
            return f"[Erase group {1 + value - 115}]"
        return DOWNLOAD_CONTROL_TEXT.get(value)
    if cc == Cc16.DOWNLOAD_INFO:
        if 1 <= value <= 99:
            return f"{value}%"
        if 101 <= value <= 116:
            return f"[Save preset {1 + value - 101}]"
        return DOWNLOAD_INFO_TEXT.get(value)
    return None
