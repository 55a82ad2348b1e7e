"""Shared test fixtures."""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator, Awaitable, Callable
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from langchain_core.agents import AgentAction

from agent_proxy.config import Settings
from agent_proxy.main import app
from agent_proxy.sse_bridge import StreamBridge


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def make_settings(**overrides) -> Settings:
    """Settings isolated from the host environment's optional features."""
    values = {
        "openai_api_key": "sk-server",
        "base_url": "",
        "code": "",
        "hide_user_api_key": False,
        "choose_search_engine": "",
        "bing_search_api_key": "",
        "serpapi_api_key": "",
        "strict_tool_names": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


async def drain(bridge: StreamBridge) -> list[dict]:
    """Read a closed bridge to the end and decode every frame."""
    frames = []
    async for chunk in bridge.reader():
        frames.extend(parse_sse_data(chunk.decode("utf-8")))
    return frames


def parse_sse_data(raw: str) -> list[dict]:
    """Decode the JSON payload of every `data:` line in raw SSE text."""
    return [
        json.loads(line[len("data:"):].strip())
        for line in raw.splitlines()
        if line.startswith("data:")
    ]


# ---------------------------------------------------------------------------
# Fake agent — replays LangChain callback events instead of calling a model
# ---------------------------------------------------------------------------

RunScript = Callable[[object], Awaitable[None]]


def make_run_script(
    tokens: tuple[str, ...] = ("Hello", " from", " the agent!"),
    actions: tuple[tuple[str, object], ...] = (),
    error: Exception | None = None,
) -> RunScript:
    """Build a callback sequence shaped like an AgentExecutor run."""

    async def script(handler) -> None:
        root = uuid4()
        for tool, tool_input in actions:
            await handler.on_agent_action(
                AgentAction(tool=tool, tool_input=tool_input, log=""),
                run_id=uuid4(),
                parent_run_id=root,
            )
        for token in tokens:
            await handler.on_llm_new_token(token, run_id=uuid4(), parent_run_id=root)
        if error is not None:
            await handler.on_llm_error(error, run_id=uuid4(), parent_run_id=root)
            await handler.on_chain_error(error, run_id=root)
            raise error
        # nested chain end first, as LangChain emits for inner runnables
        await handler.on_chain_end({}, run_id=uuid4(), parent_run_id=root)
        await handler.on_chain_end({"output": "".join(tokens)}, run_id=root)

    return script


class FakeAgent:
    """Stands in for the executor; `ainvoke` drives the attached handler."""

    def __init__(self, script: RunScript):
        self.script = script
        self.inputs: dict | None = None

    async def ainvoke(self, inputs: dict, config: dict | None = None):
        self.inputs = inputs
        handler = config["callbacks"][0]
        await self.script(handler)
        return {"output": ""}


@pytest.fixture
def mock_agent():
    """Patch the agent route so no model or tool is ever called.

    Usage:
        def test_x(mock_agent):
            mock_agent["set_script"](make_run_script(tokens=("Hi",)))
    """
    state = {"agent": FakeAgent(make_run_script())}
    build_agent = MagicMock(side_effect=lambda llm, tools, request: state["agent"])

    def set_script(script: RunScript) -> None:
        state["agent"] = FakeAgent(script)

    test_settings = make_settings()

    with patch("agent_proxy.routes.agent.settings", test_settings), \
            patch("agent_proxy.routes.agent.build_llm") as build_llm, \
            patch("agent_proxy.routes.agent.build_agent", build_agent):
        yield {
            "settings": test_settings,
            "build_llm": build_llm,
            "build_agent": build_agent,
            "set_script": set_script,
            "agent": lambda: state["agent"],
        }
