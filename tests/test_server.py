"""Tests for the MCP tools."""

from __future__ import annotations

import json
import sys
from unittest.mock import MagicMock, patch

from hacklet_mcp.protocol.commands import Command
from hacklet_mcp.session import Dongle

from helpers import FakeTransport, boot_sequence_replies, samples_reply, status_reply


def _get_server_module():
    """Import server module with FastMCP mocked to avoid init issues."""
    mock_fastmcp_cls = MagicMock()
    mock_fastmcp_instance = MagicMock()
    # Make the @mcp.tool() decorator a no-op that returns the function unchanged
    mock_fastmcp_instance.tool.return_value = lambda fn: fn
    mock_fastmcp_instance.resource.return_value = lambda fn: fn
    mock_fastmcp_cls.return_value = mock_fastmcp_instance

    with patch("mcp.server.fastmcp.FastMCP", mock_fastmcp_cls):
        # Remove cached server module so it re-imports with our mock
        sys.modules.pop("hacklet_mcp.server", None)
        import hacklet_mcp.server as server_mod

    return server_mod


def test_request_samples_tool():
    server = _get_server_module()
    transport = FakeTransport(
        boot_sequence_replies()
        + [status_reply(Command.SAMPLES), samples_reply(0x0001, 0x0002, 42, [5, 6])]
    )

    with patch.object(server, "_make_dongle", return_value=Dongle(transport_factory=transport)):
        result = server.request_samples(0x0001, 0x0002, port="/dev/ttyUSB7")

    assert result["samples"] == [5, 6]
    assert result["timestamp"] == 42
    assert transport.config.port == "/dev/ttyUSB7"
    assert transport.close_count == 1

    cached = json.loads(server.resource_cached_samples())
    assert cached["samples"] == [result]


def test_select_network_tool():
    server = _get_server_module()
    transport = FakeTransport(
        boot_sequence_replies() + [status_reply(Command.HANDSHAKE_REPLY)]
    )

    with patch.object(server, "_make_dongle", return_value=Dongle(transport_factory=transport)):
        result = server.select_network(0x7A4B)

    assert result == {"status": 0, "network_id": "0x7A4B"}


def test_tool_reports_dongle_errors():
    """A transport failure becomes an error result, not an exception."""
    server = _get_server_module()
    transport = FakeTransport([])

    with patch.object(server, "_make_dongle", return_value=Dongle(transport_factory=transport)):
        result = server.select_network(1)

    assert "error" in result
    assert transport.close_count == 1


def test_tool_validates_identifiers():
    server = _get_server_module()
    mock_dongle = MagicMock()

    with patch.object(server, "_make_dongle", return_value=mock_dongle):
        assert server.select_network(0x10000) == {
            "error": "network_id must be 0x0000-0xFFFF, got 65536"
        }
        assert server.request_samples(1, -1) == {
            "error": "channel_id must be 0x0000-0xFFFF, got -1"
        }

    mock_dongle.run_session.assert_not_called()


def test_server_builds_real_fastmcp():
    """The installed mcp release still provides FastMCP and its decorators."""
    from mcp.server.fastmcp import FastMCP

    sys.modules.pop("hacklet_mcp.server", None)
    import hacklet_mcp.server as server_mod

    assert isinstance(server_mod.mcp, FastMCP)
    assert callable(server_mod.main)
