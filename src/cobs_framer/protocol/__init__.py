"""Protocol layer: COBS framing, checksum validation, and frame inspection."""

from .framing import build_frame, encode_message
from .parser import COBSParser, inspect_frame, parse_frame
