"""Agent tools — per-request assembly from three sources.

- search: one web search tool, chosen by the configured SearchEngine
- custom: the collection supplied by the route (image generation, http_get)
- registry: named factories from the generic tool registry
"""

from __future__ import annotations

import logging

from langchain_core.tools import BaseTool

from agent_proxy.config import SearchEngine, Settings, ToolDedup
from agent_proxy.errors import UnknownToolError

from .custom import ToolContext, build_custom_tools
from .registry import TOOL_REGISTRY, create_registry_tool, validate_registry_names
from .search import build_search_tool

logger = logging.getLogger(__name__)

WEB_SEARCH = "web-search"

__all__ = [
    "WEB_SEARCH",
    "TOOL_REGISTRY",
    "ToolContext",
    "assemble_tools",
    "build_custom_tools",
    "build_search_tool",
    "create_registry_tool",
    "validate_registry_names",
]


def assemble_tools(
    use_tools: list[str],
    *,
    search_engine: SearchEngine,
    settings: Settings,
    custom_tools: list[BaseTool],
    dedup: ToolDedup = ToolDedup.FIRST,
    strict: bool = False,
) -> list[BaseTool]:
    """Build the tool list for one request.

    Sources are visited in the order search, custom, registry. With
    ToolDedup.FIRST a name already assembled is skipped.
    """
    requested = set(use_tools)
    matched: set[str] = set()
    candidates: list[BaseTool] = []

    if WEB_SEARCH in requested:
        candidates.append(build_search_tool(search_engine, settings))
        matched.add(WEB_SEARCH)

    for tool in custom_tools:
        if tool is not None and tool.name in requested:
            candidates.append(tool)
            matched.add(tool.name)

    for name in use_tools:
        if name in settings.registry_tools and name in TOOL_REGISTRY:
            candidates.append(create_registry_tool(name))
            matched.add(name)

    unmatched = [name for name in use_tools if name not in matched]
    if unmatched:
        if strict:
            raise UnknownToolError(unmatched)
        logger.warning("Ignoring unknown tool(s): %s", ", ".join(unmatched))

    if dedup is ToolDedup.NONE:
        tools = candidates
    else:
        tools = []
        seen: set[str] = set()
        for tool in candidates:
            if tool.name in seen:
                logger.debug("Skipping duplicate tool %s", tool.name)
                continue
            seen.add(tool.name)
            tools.append(tool)

    logger.info("Assembled tools: %s", [t.name for t in tools])
    return tools
