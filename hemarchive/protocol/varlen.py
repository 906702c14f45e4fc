from __future__ import annotations

"""MIDI variable-length quantities.

A value is written as big-endian 7-bit groups; every byte but the last has
its high bit set. Values are limited to 28 bits (four bytes).
"""

from hemarchive.errors import IncompleteValueError, MalformedInputError, OutOfRangeError


MAX_VALUE = 0x0FFFFFFF


def encode(value: int) -> bytes:
    """Encode `value` as 1 to 4 bytes."""

    if value < 0 or value > MAX_VALUE:
        raise OutOfRangeError(f"value out of range for MIDI variable-length value: {value}")

    groups = [value & 0x7F]
    value >>= 7
    while value:
        groups.append(0x80 | (value & 0x7F))
        value >>= 7
    return bytes(reversed(groups))


class VarLenDecoder:
    """Incremental decoder fed one byte at a time."""

    def __init__(self) -> None:
        self._value = 0
        self._pending = True
        self._partial = False

    @property
    def is_pending(self) -> bool:
        return self._pending

    @property
    def has_partial(self) -> bool:
        """True when bytes were fed since the last start/finish."""
        return self._partial

    def start(self) -> None:
        self._value = 0
        self._pending = True
        self._partial = False

    def add_byte(self, byte: int) -> bool:
        """Feed one byte. Returns True while another byte is still expected."""

        if not self._pending:
            raise MalformedInputError("variable-length value already complete; call finish() first")
        # Accumulate as a 32-bit register, like the device does.
        self._value = ((self._value << 7) | (byte & 0x7F)) & 0xFFFFFFFF
        self._partial = True
        self._pending = bool(byte & 0x80)
        return self._pending

    def finish(self) -> int:
        if self._pending:
            raise IncompleteValueError("need more data for MIDI variable-length value")
        result = self._value
        self.start()
        return result


def decode(data: bytes) -> tuple[int, int]:
    """Decode one value from the start of `data`.

    Returns `(value, bytes_consumed)`.
    """

    decoder = VarLenDecoder()
    for index, byte in enumerate(data):
        if not decoder.add_byte(byte):
            return decoder.finish(), index + 1
    raise IncompleteValueError("truncated MIDI variable-length value")
