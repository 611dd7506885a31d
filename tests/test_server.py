"""Tests for the MCP tool surface."""

from __future__ import annotations

import sys
from unittest.mock import MagicMock, patch


def _get_server_module():
    """Import server module with FastMCP mocked to avoid init issues."""
    mock_fastmcp_cls = MagicMock()
    mock_fastmcp_instance = MagicMock()
    # Make the @mcp.tool() decorator a no-op that returns the function unchanged
    mock_fastmcp_instance.tool.return_value = lambda fn: fn
    mock_fastmcp_instance.resource.return_value = lambda fn: fn
    mock_fastmcp_instance.prompt.return_value = lambda fn: fn
    mock_fastmcp_cls.return_value = mock_fastmcp_instance

    with patch.dict(sys.modules, {}):
        with patch("mcp.server.fastmcp.FastMCP", mock_fastmcp_cls):
            # Remove cached server module so it re-imports with our mock
            sys.modules.pop("cobs_framer.server", None)
            import cobs_framer.server as server_mod

    return server_mod


def test_encode_payload():
    server = _get_server_module()
    result = server.encode_payload("11 00 22")
    assert result["frame_hex"] == "02 11 03 22 33 00"
    assert result["frame_length"] == 6
    assert result["checksum"] == "0x33"


def test_encode_payload_invalid_hex():
    server = _get_server_module()
    assert "error" in server.encode_payload("zz")


def test_encode_payload_respects_ceiling():
    server = _get_server_module()
    server.set_max_frame_size(4)
    assert "error" in server.encode_payload("01 02 03 04")
    assert "frame_hex" in server.encode_payload("01 02 03 04", enforce_limit=False)


def test_decode_frame_success_updates_last_message():
    server = _get_server_module()
    assert server.get_last_message() == {"available": False}

    result = server.decode_frame("0x0211032233 00")
    assert result["valid"] is True
    assert result["payload_hex"] == "11 00 22"

    last = server.get_last_message()
    assert last["available"] is True
    assert last["payload_hex"] == "11 00 22"


def test_decode_frame_failure_keeps_last_message():
    server = _get_server_module()
    server.decode_frame("03 01 01 00")
    result = server.decode_frame("03 01 02 00")
    assert result == {"valid": False, "frame_length": 4}
    assert server.get_last_message()["payload_hex"] == "01"


def test_reset_decoder():
    server = _get_server_module()
    server.decode_frame("01 01 00")
    assert server.get_last_message()["available"] is True
    server.reset_decoder()
    assert server.get_last_message() == {"available": False}


def test_compute_checksum():
    server = _get_server_module()
    assert server.compute_checksum("10 20 30 40") == {"checksum": 0x40, "checksum_hex": "0x40"}


def test_inspect_frame_tool():
    server = _get_server_module()
    result = server.inspect_frame("02 11 03 22 33 00")
    assert [b["overhead"] for b in result["blocks"]] == [2, 3]
    assert result["terminated"] is True
    assert result["decoded_size"] == 4


def test_settings_tools():
    server = _get_server_module()
    assert server.get_settings()["max_frame_size"] == 1024
    assert server.set_max_frame_size(128)["max_frame_size"] == 128
    assert "error" in server.set_max_frame_size(1)
    assert server.get_settings()["max_frame_size"] == 128


def test_wire_format_resource():
    server = _get_server_module()
    assert "0xFF" in server.wire_format()


def test_diagnose_prompt_mentions_frame():
    server = _get_server_module()
    assert "03 01 02 00" in server.diagnose_frame("03 01 02 00")
