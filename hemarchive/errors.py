"""Error types raised by the archive codec, the protocol engine and the transport.

Filesystem failures are not wrapped: they surface as the built-in `OSError`.
"""

from __future__ import annotations


class HemArchiveError(Exception):
    """Base class for every error this package raises on purpose."""


class MalformedInputError(HemArchiveError, ValueError):
    """Bytes or values that cannot be decoded or encoded."""


class OutOfRangeError(MalformedInputError):
    """A value does not fit in a MIDI variable-length quantity."""


class IncompleteValueError(MalformedInputError):
    """A variable-length value was read while more bytes were still expected."""


class NotAMidiFileError(MalformedInputError):
    """The data does not start with an `MThd` header."""


class ExpectedTrackChunkError(MalformedInputError):
    """The header is not followed by an `MTrk` chunk."""


class OutOfOrderError(MalformedInputError):
    """An event was recorded with a timestamp earlier than the previous one."""


class UnsupportedEventError(HemArchiveError, ValueError):
    """A MIDI event that cannot live inside a preset archive."""


class UnsupportedStatusError(UnsupportedEventError):
    """A status byte other than a channel voice message or end-of-track."""

    def __init__(self, status: int) -> None:
        super().__init__(f"Unsupported MIDI status 0x{status:02X} in preset archive")
        self.status = status


class ArchiveIncompleteError(HemArchiveError):
    """The instrument reported that an archive transfer failed."""


class TransportError(HemArchiveError, RuntimeError):
    """Sending to or receiving from the MIDI device failed."""
