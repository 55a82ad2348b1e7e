"""Web search tools — one per SearchEngine.

The engine is resolved once from settings at startup and passed in here.
Provider packages are imported inside each factory so a server only needs
the package for the engine it actually uses.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import httpx
from bs4 import BeautifulSoup
from langchain_core.tools import BaseTool, Tool

from agent_proxy.config import SearchEngine, Settings
from agent_proxy.errors import ConfigError

logger = logging.getLogger(__name__)

SEARCH_DESCRIPTION = (
    "a search engine. useful for when you need to answer questions about "
    "current events. input should be a search query."
)

BAIDU_SEARCH_URL = "https://www.baidu.com/s"
BAIDU_MAX_RESULTS = 5

def parse_baidu_results(page: str, limit: int = BAIDU_MAX_RESULTS) -> list[dict]:
    """Extract {title, link, snippet} from each `div.c-container` result."""
    soup = BeautifulSoup(page, "html.parser")
    results = []
    for container in soup.select("div.c-container"):
        anchor = container.select_one("h3 a") or container.find("a", href=True)
        if anchor is None or not anchor.get("href"):
            continue
        abstract = container.select_one(".c-abstract")
        results.append({
            "title": anchor.get_text(strip=True),
            "link": anchor["href"],
            "snippet": abstract.get_text(" ", strip=True) if abstract else "",
        })
        if len(results) >= limit:
            break
    return results


async def baidu_search(query: str) -> str:
    async with httpx.AsyncClient(timeout=10.0, follow_redirects=True) as client:
        response = await client.get(
            BAIDU_SEARCH_URL,
            params={"wd": query},
            headers={"User-Agent": "Mozilla/5.0"},
        )
        response.raise_for_status()
    results = parse_baidu_results(response.text)
    if not results:
        return "No good search result found"
    return "\n\n".join(
        f"{r['title']}\n{r['link']}\n{r['snippet']}".rstrip() for r in results
    )


def _build_duckduckgo(settings: Settings) -> BaseTool:
    from langchain_community.tools import DuckDuckGoSearchRun

    return DuckDuckGoSearchRun()


def _build_google(settings: Settings) -> BaseTool:
    from langchain_community.tools import GoogleSearchRun
    from langchain_community.utilities import GoogleSearchAPIWrapper

    if not (settings.google_api_key and settings.google_cse_id):
        raise ConfigError("Google search needs GOOGLE_API_KEY and GOOGLE_CSE_ID")
    return GoogleSearchRun(
        api_wrapper=GoogleSearchAPIWrapper(
            google_api_key=settings.google_api_key,
            google_cse_id=settings.google_cse_id,
        )
    )


def _build_baidu(settings: Settings) -> BaseTool:
    return Tool(
        name="baidu_search",
        description=SEARCH_DESCRIPTION,
        func=None,
        coroutine=baidu_search,
    )


def _build_bing(settings: Settings) -> BaseTool:
    from langchain_community.tools.bing_search import BingSearchRun
    from langchain_community.utilities import BingSearchAPIWrapper

    return BingSearchRun(
        name="bing_search",
        api_wrapper=BingSearchAPIWrapper(
            bing_subscription_key=settings.bing_search_api_key,
            bing_search_url="https://api.bing.microsoft.com/v7.0/search",
        ),
    )


def _build_serpapi(settings: Settings) -> BaseTool:
    from langchain_community.utilities import SerpAPIWrapper

    serpapi = SerpAPIWrapper(serpapi_api_key=settings.serpapi_api_key)
    return Tool(
        name="google_search",
        description=SEARCH_DESCRIPTION,
        func=serpapi.run,
        coroutine=serpapi.arun,
    )


SEARCH_TOOL_FACTORIES: dict[SearchEngine, Callable[[Settings], BaseTool]] = {
    SearchEngine.DUCKDUCKGO: _build_duckduckgo,
    SearchEngine.GOOGLE: _build_google,
    SearchEngine.BAIDU: _build_baidu,
    SearchEngine.BING: _build_bing,
    SearchEngine.SERPAPI: _build_serpapi,
}


def build_search_tool(engine: SearchEngine, settings: Settings) -> BaseTool:
    tool = SEARCH_TOOL_FACTORIES[engine](settings)
    logger.debug("Search tool for %s: %s", engine.value, tool.name)
    return tool
