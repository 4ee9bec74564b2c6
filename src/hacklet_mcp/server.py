"""MCP server entry point for the Hacklet dongle.

Exposes tools and resources via the Model Context Protocol using the
official Python MCP SDK with stdio transport. Every tool call runs one
complete session: boot, lock, request, close.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .errors import DongleError
from .protocol.commands import check_identifier
from .session import Dongle
from .transport.serial_connection import DEFAULT_PORT, SerialConfig

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "hacklet",
    instructions="MCP server for the Modlet USB dongle",
)

# Last samples read, keyed by (network_id, channel_id)
_sample_cache: dict[tuple[int, int], dict[str, Any]] = {}


def _make_dongle() -> Dongle:
    return Dongle(logger=logging.getLogger("hacklet_mcp.trace"))


# ─── DONGLE TOOLS ─────────────────────────────────────────────────────

@mcp.tool()
def select_network(network_id: int, port: str = DEFAULT_PORT) -> dict[str, Any]:
    """Boot the dongle and select a network.

    Args:
        network_id: 2-byte network identifier (0-65535).
        port: Serial device of the dongle.
    """
    try:
        check_identifier("network_id", network_id)
    except ValueError as e:
        return {"error": str(e)}

    dongle = _make_dongle()
    try:
        response = dongle.run_session(
            lambda session: session.select_network(network_id),
            SerialConfig(port=port),
        )
    except DongleError as e:
        logger.warning("select_network failed: %s", e)
        return {"error": str(e)}

    result = response.to_dict()
    result["network_id"] = f"0x{network_id:04X}"
    return result


@mcp.tool()
def request_samples(
    network_id: int,
    channel_id: int,
    port: str = DEFAULT_PORT,
) -> dict[str, Any]:
    """Boot the dongle and read the samples stored on a channel.

    Args:
        network_id: 2-byte network identifier (0-65535).
        channel_id: 2-byte channel identifier (0-65535).
        port: Serial device of the dongle.
    """
    try:
        check_identifier("network_id", network_id)
        check_identifier("channel_id", channel_id)
    except ValueError as e:
        return {"error": str(e)}

    dongle = _make_dongle()
    try:
        response = dongle.run_session(
            lambda session: session.request_samples(network_id, channel_id),
            SerialConfig(port=port),
        )
    except DongleError as e:
        logger.warning("request_samples failed: %s", e)
        return {"error": str(e)}

    result = response.to_dict()
    _sample_cache[(network_id, channel_id)] = result
    return result


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("hacklet://samples/cached")
def resource_cached_samples() -> str:
    """Samples from the most recent read of each channel."""
    entries = [_sample_cache[key] for key in sorted(_sample_cache)]
    return json.dumps({"samples": entries})


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
