"""MCP server entry point for the COBS framer.

Exposes encode/decode tools, a wire-format resource, and a diagnostic
prompt via the Model Context Protocol using the official Python MCP SDK
with stdio transport.
"""

from __future__ import annotations

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .models.settings import FramerSettings
from .protocol.framing import (
    check_payload_size,
    encode_message,
    encoded_length,
)
from .protocol.parser import COBSParser, inspect_frame as _inspect_frame
from .utils.checksum import xor_checksum

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "cobs-framer",
    instructions="Encode and decode COBS frames with an XOR checksum",
)

# One decoder for the single logical stream this server handles
_parser = COBSParser()
_settings = FramerSettings()


def _parse_hex(text: str) -> bytes:
    """Parse a hex string, ignoring whitespace and an optional 0x prefix."""
    cleaned = "".join(text.split())
    if cleaned[:2].lower() == "0x":
        cleaned = cleaned[2:]
    return bytes.fromhex(cleaned)


# ─── ENCODING TOOLS ──────────────────────────────────────────────────

@mcp.tool()
def encode_payload(payload_hex: str, enforce_limit: bool = True) -> dict[str, Any]:
    """Encode a payload into a sentinel-terminated COBS frame.

    Args:
        payload_hex: Payload bytes as hex (e.g. "11 22 00 33").
        enforce_limit: Reject payloads larger than the configured
            maximum frame size (default True).
    """
    try:
        payload = _parse_hex(payload_hex)
    except ValueError as e:
        return {"error": f"Invalid hex payload: {e}"}

    if enforce_limit:
        try:
            check_payload_size(payload, _settings.max_frame_size)
        except ValueError as e:
            return {"error": str(e)}

    frame = encode_message(payload)
    logger.info("Encoded %d-byte payload into %d-byte frame", len(payload), len(frame))
    return {
        "frame_hex": frame.hex(" "),
        "frame_length": len(frame),
        "payload_length": len(payload),
        "checksum": f"0x{xor_checksum(payload):02X}",
        "max_length": encoded_length(len(payload) + 1),
    }


@mcp.tool()
def compute_checksum(data_hex: str) -> dict[str, Any]:
    """Compute the XOR checksum of the given bytes.

    Args:
        data_hex: Bytes as hex.
    """
    try:
        data = _parse_hex(data_hex)
    except ValueError as e:
        return {"error": f"Invalid hex data: {e}"}
    checksum = xor_checksum(data)
    return {"checksum": checksum, "checksum_hex": f"0x{checksum:02X}"}


# ─── DECODING TOOLS ──────────────────────────────────────────────────

@mcp.tool()
def decode_frame(frame_hex: str) -> dict[str, Any]:
    """Decode a COBS frame and validate its checksum.

    On success the payload becomes the last validated message.

    Args:
        frame_hex: Frame bytes as hex, normally ending in 00.
    """
    try:
        frame = _parse_hex(frame_hex)
    except ValueError as e:
        return {"error": f"Invalid hex frame: {e}"}

    if not _parser.decode_message(frame):
        logger.info("Rejected %d-byte frame", len(frame))
        return {"valid": False, "frame_length": len(frame)}

    payload = _parser.message
    return {
        "valid": True,
        "frame_length": len(frame),
        "payload_hex": payload.hex(" "),
        "payload_length": len(payload),
    }


@mcp.tool()
def get_last_message() -> dict[str, Any]:
    """Return the most recent payload that passed checksum validation."""
    if not _parser.has_message:
        return {"available": False}
    payload = _parser.message
    return {
        "available": True,
        "payload_hex": payload.hex(" "),
        "payload_length": len(payload),
    }


@mcp.tool()
def reset_decoder() -> dict[str, bool]:
    """Discard the last validated message."""
    _parser.clear()
    return {"reset": True}


@mcp.tool()
def inspect_frame(frame_hex: str) -> dict[str, Any]:
    """Walk a frame's block structure without validating the checksum.

    Args:
        frame_hex: Frame bytes as hex.
    """
    try:
        frame = _parse_hex(frame_hex)
    except ValueError as e:
        return {"error": f"Invalid hex frame: {e}"}
    return _inspect_frame(frame).to_dict()


# ─── SETTINGS TOOLS ──────────────────────────────────────────────────

@mcp.tool()
def get_settings() -> dict[str, Any]:
    """Return the current framer settings."""
    return _settings.to_dict()


@mcp.tool()
def set_max_frame_size(size: int) -> dict[str, Any]:
    """Change the maximum frame size ceiling applied to outgoing payloads.

    Args:
        size: New ceiling in bytes (at least 3).
    """
    global _settings
    try:
        _settings = FramerSettings.from_dict({"max_frame_size": size})
    except ValueError as e:
        return {"error": str(e)}
    logger.info("Maximum frame size set to %d", size)
    return _settings.to_dict()


# ─── RESOURCES ───────────────────────────────────────────────────────

@mcp.resource("cobs://wire-format")
def wire_format() -> str:
    """Description of the frame layout."""
    return """COBS frame with XOR checksum

message  = payload ++ [xor of all payload bytes]
frame    = block+ ++ [0x00]
block    = [overhead] ++ (overhead - 1) literal bytes, none equal to 0x00

- overhead 0xFF: full block of 254 literals, no 0x00 follows it
- overhead < 0xFF: a 0x00 followed this block in the message,
  except for the last block, which borders the terminating 0x00
- 0x00 appears exactly once per frame, as its last byte
- receivers resynchronize by discarding input up to the next 0x00"""


# ─── PROMPTS ─────────────────────────────────────────────────────────

@mcp.prompt()
def diagnose_frame(frame_hex: str) -> str:
    """Investigate why a received frame fails to decode.

    Args:
        frame_hex: The frame bytes as hex.
    """
    return f"""A received frame failed validation: {frame_hex}

Use inspect_frame to walk its block structure, then consider:
- Whether the frame ends in a single 00 sentinel
- Whether any block is truncated (fewer literals than its overhead byte announces)
- Whether bytes follow the sentinel (two frames merged, or lost sync)
- Whether the checksum mismatch points to a single corrupted byte

Use compute_checksum on the recovered payload to compare against the
trailing checksum byte, and decode_frame to retry once repaired."""


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
