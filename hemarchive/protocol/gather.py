from __future__ import annotations

"""Reassembly of the instrument's out-of-band data streams.

The instrument sends names, text and binary blobs one byte per Channel
Pressure message on the management channel, framed by Data Stream CCs.
Binary blobs are packed as variable-length values, each carrying 32 bits.
"""

from enum import Enum, IntEnum

from hemarchive.protocol.varlen import VarLenDecoder


class GatherMode(Enum):
    NONE = "none"
    NAME = "name"
    TEXT = "text"
    CATEGORY = "category"
    BINARY = "binary"


class DataKind(IntEnum):
    NAME = 0
    CONTROL_TEXT = 1
    GRAPH = 2
    GRAPH_OFFSET_1 = 3
    GRAPH_OFFSET_2 = 4
    GRAPH_T0 = 5
    GRAPH_T1 = 6
    LOG = 7
    CATEGORY = 8
    DEMO_ASSORT = 9
    FLOAT = 10
    KINETIC = 11
    BIQUAD_SINE = 12
    SYSTEM = 13
    CONVOLUTION = 14
    UNKNOWN = 255

    @classmethod
    def from_byte(cls, raw: int) -> DataKind:
        """Map a Data Stream value to its kind; unlisted values are UNKNOWN."""
        if 0 <= raw <= cls.CONVOLUTION:
            return cls(raw)
        return cls.UNKNOWN

    @property
    def label(self) -> str:
        return _DATA_KIND_LABELS[self]


_DATA_KIND_LABELS: dict[DataKind, str] = {
    DataKind.NAME: "Name",
    DataKind.CONTROL_TEXT: "Control Text",
    DataKind.GRAPH: "Graph",
    DataKind.GRAPH_OFFSET_1: "Graph Offset 1",
    DataKind.GRAPH_OFFSET_2: "Graph Offset 2",
    DataKind.GRAPH_T0: "Graph T0",
    DataKind.GRAPH_T1: "Graph T1",
    DataKind.LOG: "Log",
    DataKind.CATEGORY: "Category",
    DataKind.DEMO_ASSORT: "Demo Assortment",
    DataKind.FLOAT: "Float",
    DataKind.KINETIC: "Kinetic",
    DataKind.BIQUAD_SINE: "Biquad Sine",
    DataKind.SYSTEM: "System",
    DataKind.CONVOLUTION: "Convolution",
    DataKind.UNKNOWN: "Unknown",
}


def gather_mode_for(kind: DataKind) -> GatherMode:
    if kind is DataKind.NAME:
        return GatherMode.NAME
    if kind is DataKind.CONTROL_TEXT:
        return GatherMode.TEXT
    if kind is DataKind.CATEGORY:
        return GatherMode.CATEGORY
    return GatherMode.BINARY


class StreamGatherer:
    """Accumulates one data stream.

    In unencoded mode bytes are kept as they arrive. Otherwise they are fed to
    a variable-length decoder and each completed value is appended as four
    big-endian bytes.
    """

    def __init__(self) -> None:
        self._unencoded = True
        self._data = bytearray()
        self._decoder = VarLenDecoder()

    @property
    def unencoded(self) -> bool:
        return self._unencoded

    def start(self, already_unencoded: bool) -> None:
        self._unencoded = already_unencoded
        self._data.clear()
        self._decoder.start()

    def add(self, byte: int) -> None:
        if self._unencoded:
            self._data.append(byte & 0xFF)
            return
        if not self._decoder.add_byte(byte):
            self._append_value(self._decoder.finish())

    def flush(self) -> bytes:
        """Return the gathered bytes and reset to unencoded mode."""

        if not self._unencoded and self._decoder.has_partial:
            # Zero-pad the unfinished value.
            self._decoder.add_byte(0)
            self._append_value(self._decoder.finish())
        result = bytes(self._data)
        self.start(True)
        return result

    def _append_value(self, value: int) -> None:
        self._data.extend(value.to_bytes(4, "big"))
