"""Single-byte XOR checksum appended to every framed message."""

from __future__ import annotations


def xor_checksum(data: bytes) -> int:
    """Return the XOR of every byte in ``data``.

    The accumulator starts at 0, so empty input yields 0.
    """
    checksum = 0
    for byte in data:
        checksum ^= byte
    return checksum
