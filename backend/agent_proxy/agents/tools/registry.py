"""Generic tool registry: a typed mapping from tool name to factory.

Only names listed here can be enabled; `validate_registry_names` runs at
startup so a typo in configuration stops the server instead of silently
dropping the tool.
"""

from __future__ import annotations

from collections.abc import Callable

from langchain_core.tools import BaseTool

from agent_proxy.errors import UnknownToolError

ToolFactory = Callable[[], BaseTool]


def _wikipedia() -> BaseTool:
    from langchain_community.tools import WikipediaQueryRun
    from langchain_community.utilities import WikipediaAPIWrapper

    return WikipediaQueryRun(api_wrapper=WikipediaAPIWrapper())


def _arxiv() -> BaseTool:
    from langchain_community.tools import ArxivQueryRun
    from langchain_community.utilities import ArxivAPIWrapper

    return ArxivQueryRun(api_wrapper=ArxivAPIWrapper())


def _pubmed() -> BaseTool:
    from langchain_community.tools import PubmedQueryRun

    return PubmedQueryRun()


TOOL_REGISTRY: dict[str, ToolFactory] = {
    "wikipedia": _wikipedia,
    "arxiv": _arxiv,
    "pubmed": _pubmed,
}


def validate_registry_names(names: list[str]) -> None:
    unknown = [name for name in names if name not in TOOL_REGISTRY]
    if unknown:
        raise UnknownToolError(unknown)


def create_registry_tool(name: str) -> BaseTool:
    return TOOL_REGISTRY[name]()
