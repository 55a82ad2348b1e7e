"""Application configuration via pydantic-settings.

Reads from environment variables and .env file.
"""

from __future__ import annotations

import hashlib
from enum import Enum

from pydantic_settings import BaseSettings, SettingsConfigDict

# Tokens carrying this prefix are access codes, not provider keys
ACCESS_CODE_PREFIX = "nk-"

DEFAULT_BASE_URL = "https://api.openai.com/v1"
API_VERSION_SUFFIX = "/v1"


class SearchEngine(str, Enum):
    DUCKDUCKGO = "duckduckgo"
    GOOGLE = "google"
    BAIDU = "baidu"
    BING = "bing"
    SERPAPI = "serpapi"


class ToolDedup(str, Enum):
    """How to treat a tool name offered by more than one tool source."""

    FIRST = "first"  # keep the first one assembled
    NONE = "none"  # keep every copy


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Provider
    openai_api_key: str = ""
    base_url: str = ""

    # Access control
    code: str = ""
    hide_user_api_key: bool = False

    # Search
    choose_search_engine: str = ""
    bing_search_api_key: str = ""
    serpapi_api_key: str = ""
    google_api_key: str = ""
    google_cse_id: str = ""

    # Tools
    registry_tools: list[str] = ["wikipedia", "arxiv", "pubmed"]
    tool_dedup: ToolDedup = ToolDedup.FIRST
    strict_tool_names: bool = False
    http_get_max_chars: int = 4000

    # Server
    frontend_url: str = "http://localhost:3000"
    log_level: str = "INFO"

    @property
    def openai_configured(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def access_codes(self) -> set[str]:
        """md5 digests of the configured access codes."""
        return {
            hashlib.md5(c.strip().encode("utf-8")).hexdigest()
            for c in self.code.split(",")
            if c.strip()
        }

    @property
    def need_code(self) -> bool:
        return bool(self.access_codes)

    @property
    def search_engine(self) -> SearchEngine:
        """Effective search engine. Provider keys outrank the selector."""
        if self.serpapi_api_key:
            return SearchEngine.SERPAPI
        if self.bing_search_api_key:
            return SearchEngine.BING
        if self.choose_search_engine == SearchEngine.GOOGLE.value:
            return SearchEngine.GOOGLE
        if self.choose_search_engine == SearchEngine.BAIDU.value:
            return SearchEngine.BAIDU
        return SearchEngine.DUCKDUCKGO


settings = Settings()
