from __future__ import annotations


def format_midi_bytes(data: bytes | bytearray | list[int], *, max_len: int | None = 64) -> str:
    """Format bytes as space-separated hex, truncated for logs unless `max_len` is None."""

    raw = bytes(data)
    truncated = raw if max_len is None else raw[:max_len]
    hex_part = " ".join(f"{b:02X}" for b in truncated)
    if max_len is not None and len(raw) > max_len:
        return f"{hex_part} ...(+{len(raw) - max_len} bytes)"
    return hex_part
