"""Slack MCP gateway: Slack Web API operations exposed as MCP tools."""

__version__ = "0.3.0"

__all__ = ["__version__"]
