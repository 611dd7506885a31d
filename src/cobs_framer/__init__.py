"""COBS framing with a single-byte XOR checksum."""

from .protocol.framing import (
    MAX_FRAME_SIZE,
    SENTINEL,
    build_frame,
    check_payload_size,
    encode_message,
    encoded_length,
)
from .protocol.parser import COBSParser, inspect_frame, parse_frame
from .utils.checksum import xor_checksum

__version__ = "0.1.0"
