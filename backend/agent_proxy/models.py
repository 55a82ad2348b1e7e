"""Pydantic models — the wire contract between the agent endpoint and clients.

Field aliases follow the camelCase names the chat frontend sends and expects,
so every model here accepts and emits those aliases.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class RequestMessage(BaseModel):
    """One prior chat message."""
    role: str
    content: str


class ChatRequest(BaseModel):
    """Body of POST /api/langchain/tool/agent/nodejs.

    Immutable for the lifetime of one request.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    messages: list[RequestMessage] = Field(min_length=1)
    model: str
    stream: bool = True
    temperature: float = 1.0
    top_p: float = 1.0
    presence_penalty: float = 0.0
    frequency_penalty: float = 0.0
    base_url: str | None = Field(default=None, alias="baseUrl")
    api_key: str | None = Field(default=None, alias="apiKey")
    max_iterations: int = Field(default=10, ge=1, alias="maxIterations")
    return_intermediate_steps: bool = Field(
        default=False, alias="returnIntermediateSteps"
    )
    use_tools: list[str | None] = Field(default_factory=list, alias="useTools")

    @property
    def tool_names(self) -> list[str]:
        """Requested tool names with empty entries dropped."""
        return [name for name in self.use_tools if name]


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------

class ResponseEnvelope(BaseModel):
    """data for every streamed frame"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    is_success: bool = True
    message: str = ""
    is_tool_message: bool = False
    tool_name: str | None = None

    @classmethod
    def failure(cls, message: str) -> ResponseEnvelope:
        return cls(is_success=False, message=message)

    @classmethod
    def tool_message(cls, tool_name: str, message: str) -> ResponseEnvelope:
        return cls(is_tool_message=True, tool_name=tool_name, message=message)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


class AuthFailure(BaseModel):
    """401 response body."""
    error: bool = True
    msg: str


class HealthResponse(BaseModel):
    """GET /api/health response."""
    status: Literal["ok", "degraded"]
    version: str = "0.1.0"
    openai_configured: bool
    search_engine: str
