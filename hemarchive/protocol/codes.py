from __future__ import annotations

"""EaganMatrix MIDI protocol constants.

Channel numbers are 0-based as mido uses them; the instrument's management
channel is MIDI channel 16 (index 15). Keep protocol constants here so the
rest of the codebase doesn't duplicate them.
"""

CHANNEL15 = 14
CHANNEL16 = 15

# 500000 us per beat at 96 ticks per beat, expressed in ms per tick.
TICKS_PER_BEAT = 96
MS_PER_TICK = 500000 / TICKS_PER_BEAT / 1000


class Cc16:
    """Controller numbers on the management channel."""

    BANK_SELECT = 0
    PRESET_GROUP = 32
    BEND_RANGE = 40
    SEND_UPDATES = 55
    DATA_STREAM = 56
    MPE_LSB = 87
    FIRMWARE_VERSION_HI = 102
    FIRMWARE_VERSION_LO = 103
    DOWNLOAD_CONTROL = 109
    DOWNLOAD_INFO = 110
    DEVICE_STATUS = 111
    DSP_PERCENT = 114
    EDITOR_PRESENT = 116

    ALL_SOUND_OFF = 120
    RESET_ALL = 121
    LOCAL_CONTROL = 122


class DataStream:
    """Values of `Cc16.DATA_STREAM`; anything below END names a stream kind."""

    NAME = 0
    TEXT = 1
    CATEGORY = 8
    END = 127


class DownloadControl:
    """Values of `Cc16.DOWNLOAD_CONTROL`."""

    ARCHIVE_OK = 5
    ARCHIVE_FAIL = 6
    SAVE_TO_FLASH = 8
    DSP_DONE = 26
    REQUEST_USER_NAMES = 32
    END_SYSTEM_NAMES = 40
    BEGIN_SYSTEM_NAMES = 49
    BEGIN_USER_NAMES = 54
    END_USER_NAMES = 55
    NOFN_SINGLE = 104
    NOFN_DOUBLE = 105
    NOFN_TRIPLE = 106
    CLEAR_BANK_BASE = 115


class DownloadInfo:
    """Values of `Cc16.DOWNLOAD_INFO`."""

    ARCHIVE_CURRENT = 100
    BEGIN_ARCHIVE = 120
    RETRIEVE_ARCHIVE = 121
    END_ARCHIVE = 124


# The instrument expects the editor-present heartbeat to alternate.
EDITOR_PRESENT_TICK = 85
EDITOR_PRESENT_TOCK = 42

USER_BANK_COUNT = 8
