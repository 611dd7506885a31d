"""COBS frame builder with an appended XOR checksum.

Frame layout::

    +----------+-----------------+----------+-----------------+-----+----------+
    | Overhead | Literal bytes   | Overhead | Literal bytes   | ... | Sentinel |
    | 1 byte   | overhead - 1    | 1 byte   | overhead - 1    |     | 0x00     |
    +----------+-----------------+----------+-----------------+-----+----------+

- The stuffed message is the payload followed by its XOR checksum byte.
- Overhead: 1-255, the distance to the next overhead byte or the sentinel.
  A value below 0xFF means a 0x00 byte followed the block in the message
  (unless it is the last block, which borders the sentinel).
- Sentinel: 0x00, appears exactly once, as the final byte.
"""

from __future__ import annotations

from ..utils.checksum import xor_checksum

SENTINEL = 0x00
MAX_BLOCK_SIZE = 0xFF
MAX_BLOCK_DATA = MAX_BLOCK_SIZE - 1  # 254 literal bytes in a full block
MAX_FRAME_SIZE = 1024  # ceiling used to detect stream desynchronization


def encoded_length(message_size: int) -> int:
    """Upper bound on the encoded size of a ``message_size``-byte message.

    ``message_size`` counts the checksum byte. The bound is exact when the
    message contains no 0x00 bytes.
    """
    # +2: the first block's overhead byte and the terminating sentinel
    return message_size + message_size // MAX_BLOCK_DATA + 2


def encode_message(payload: bytes) -> bytes:
    """Checksum and COBS-encode ``payload`` into a sentinel-terminated frame.

    Never fails; size limits are the caller's concern (see
    :func:`check_payload_size`).

    Args:
        payload: Arbitrary bytes, 0x00 included.

    Returns:
        The encoded frame, ending in exactly one 0x00 byte.
    """
    message = bytes(payload) + bytes([xor_checksum(payload)])

    out = bytearray()
    overhead_idx = 0
    out.append(0)  # placeholder for the first overhead byte
    overhead = 1

    for byte in message:
        if byte != SENTINEL:
            out.append(byte)
            overhead += 1

        if byte == SENTINEL or overhead == MAX_BLOCK_SIZE:
            out[overhead_idx] = overhead
            overhead_idx = len(out)
            out.append(0)
            overhead = 1

    out[overhead_idx] = overhead
    out.append(SENTINEL)
    return bytes(out)


def check_payload_size(payload: bytes, max_frame_size: int = MAX_FRAME_SIZE) -> None:
    """Raise ``ValueError`` if ``payload`` plus its checksum exceeds the ceiling.

    This is the gate a sender applies before transmission; the encoder
    itself never clamps.
    """
    if len(payload) + 1 > max_frame_size:
        raise ValueError(
            f"Payload of {len(payload)} bytes exceeds the maximum frame size "
            f"of {max_frame_size} (payload + 1 checksum byte)"
        )


def build_frame(payload: bytes, max_frame_size: int = MAX_FRAME_SIZE) -> bytes:
    """Check ``payload`` against the frame ceiling, then encode it.

    Raises:
        ValueError: If the payload is too large for ``max_frame_size``.
    """
    check_payload_size(payload, max_frame_size)
    return encode_message(payload)
