"""Exceptions raised while setting up an agent run."""

from __future__ import annotations


class AgentProxyError(Exception):
    """Base class for errors raised by this service."""


class ConfigError(AgentProxyError):
    """Raised when server configuration is invalid or missing."""


class ToolAssemblyError(AgentProxyError):
    """Raised when the tool list for a request cannot be built."""


class UnknownToolError(ToolAssemblyError):
    """Raised when a tool name matches no known tool source."""

    def __init__(self, names: list[str]):
        self.names = names
        super().__init__(f"Unknown tool(s): {', '.join(names)}")
