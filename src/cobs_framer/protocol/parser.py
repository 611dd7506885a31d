"""COBS frame decoding and checksum validation."""

from __future__ import annotations

import logging
from enum import Enum

from ..models.report import BlockInfo, FrameReport
from ..utils.checksum import xor_checksum
from .framing import MAX_BLOCK_SIZE, SENTINEL

logger = logging.getLogger(__name__)


class DecodeState(Enum):
    """Position of the decoder within a block."""

    AWAIT_OVERHEAD = "await_overhead"
    COPY_LITERALS = "copy_literals"


def _unstuff(frame: bytes) -> bytearray:
    """Reverse the byte stuffing of ``frame``, keeping the checksum byte.

    Scanning stops at the first sentinel read in place of an overhead
    byte, or at the end of input.
    """
    output = bytearray()
    state = DecodeState.AWAIT_OVERHEAD
    remaining = 0
    previous_overhead: int | None = None

    for byte in frame:
        if state is DecodeState.COPY_LITERALS:
            output.append(byte)
            remaining -= 1
            if remaining == 0:
                state = DecodeState.AWAIT_OVERHEAD
            continue

        if byte == SENTINEL:
            break

        # A short block was closed by a 0x00 in the message; restore it.
        if previous_overhead is not None and previous_overhead != MAX_BLOCK_SIZE:
            output.append(SENTINEL)

        previous_overhead = byte
        remaining = byte - 1
        if remaining:
            state = DecodeState.COPY_LITERALS

    return output


class COBSParser:
    """Decodes frames and holds the last checksum-verified payload.

    One parser per logical stream. Calls on the same instance must not
    overlap; separate instances share nothing.

    Usage::

        parser = COBSParser()
        if parser.decode_message(frame):
            handle(parser.message)
    """

    def __init__(self) -> None:
        self._message: bytes | None = None

    @property
    def message(self) -> bytes:
        """The last validated payload, or ``b""`` if none has been decoded."""
        return self._message if self._message is not None else b""

    @property
    def has_message(self) -> bool:
        return self._message is not None

    def decode_message(self, frame: bytes) -> bool:
        """Decode ``frame`` and validate its checksum.

        On success the payload replaces :attr:`message`. On failure the
        stored message is left untouched.

        Args:
            frame: A candidate frame, normally ending in the 0x00 sentinel.

        Returns:
            ``True`` if the frame decoded to a payload with a matching
            checksum, ``False`` otherwise.
        """
        output = _unstuff(frame)

        # A valid message always carries at least the checksum byte
        if not output:
            logger.debug("Rejected frame of %d bytes: no decoded content", len(frame))
            return False

        received = output[-1]
        payload = bytes(output[:-1])
        expected = xor_checksum(payload)
        if expected != received:
            logger.debug(
                "Rejected frame of %d bytes: checksum 0x%02X, expected 0x%02X",
                len(frame),
                received,
                expected,
            )
            return False

        self._message = payload
        logger.debug("Decoded %d-byte payload", len(payload))
        return True

    def clear(self) -> None:
        """Forget the stored message."""
        self._message = None


def parse_frame(frame: bytes) -> bytes | None:
    """Decode a single frame with a throwaway parser.

    Returns:
        The validated payload, or ``None`` if decoding failed.
    """
    parser = COBSParser()
    if parser.decode_message(frame):
        return parser.message
    return None


def inspect_frame(frame: bytes) -> FrameReport:
    """Describe the block structure of ``frame`` without validating it."""
    blocks: list[BlockInfo] = []
    state = DecodeState.AWAIT_OVERHEAD
    remaining = 0
    literal_count = 0
    terminated = False
    consumed = 0

    for byte in frame:
        consumed += 1
        if state is DecodeState.COPY_LITERALS:
            literal_count += 1
            remaining -= 1
            if remaining == 0:
                state = DecodeState.AWAIT_OVERHEAD
                blocks[-1].literal_count = literal_count
            continue

        if byte == SENTINEL:
            terminated = True
            break

        blocks.append(BlockInfo(overhead=byte))
        literal_count = 0
        remaining = byte - 1
        if remaining:
            state = DecodeState.COPY_LITERALS

    if state is DecodeState.COPY_LITERALS:
        blocks[-1].literal_count = literal_count

    for block in blocks[:-1]:
        block.sentinel_follows = block.overhead != MAX_BLOCK_SIZE

    return FrameReport(
        length=len(frame),
        blocks=blocks,
        terminated=terminated,
        truncated=state is DecodeState.COPY_LITERALS,
        trailing_bytes=len(frame) - consumed,
    )
