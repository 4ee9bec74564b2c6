"""Driver and MCP server for the Modlet USB dongle."""

__version__ = "0.1.0"
