"""Tests for Pydantic models — verify contracts serialize correctly."""

import json

import pytest
from pydantic import ValidationError

from agent_proxy.models import AuthFailure, ChatRequest, HealthResponse, ResponseEnvelope


class TestChatRequest:
    def test_minimal_request(self):
        req = ChatRequest.model_validate(
            {"messages": [{"role": "user", "content": "Hi"}], "model": "gpt-4o"}
        )
        assert req.stream is True
        assert req.max_iterations == 10
        assert req.return_intermediate_steps is False
        assert req.use_tools == []
        assert req.base_url is None

    def test_camel_case_aliases(self):
        req = ChatRequest.model_validate({
            "messages": [{"role": "user", "content": "Hi"}],
            "model": "gpt-4o",
            "baseUrl": "https://x.example",
            "apiKey": "sk-x",
            "maxIterations": 4,
            "returnIntermediateSteps": True,
            "useTools": ["web-search", None, ""],
        })
        assert req.base_url == "https://x.example"
        assert req.api_key == "sk-x"
        assert req.max_iterations == 4
        assert req.return_intermediate_steps is True
        assert req.tool_names == ["web-search"]

    def test_requires_a_message(self):
        with pytest.raises(ValidationError):
            ChatRequest.model_validate({"messages": [], "model": "gpt-4o"})

    def test_is_immutable(self):
        req = ChatRequest.model_validate(
            {"messages": [{"role": "user", "content": "Hi"}], "model": "gpt-4o"}
        )
        with pytest.raises(ValidationError):
            req.model = "other"


class TestResponseEnvelope:
    def test_defaults(self):
        data = json.loads(ResponseEnvelope(message="tok").to_json())
        assert data == {"isSuccess": True, "message": "tok", "isToolMessage": False}

    def test_failure(self):
        env = ResponseEnvelope.failure("boom")
        assert env.is_success is False
        assert env.is_tool_message is False

    def test_json_round_trip(self):
        env = ResponseEnvelope.tool_message("search", '{"q": "x"}')
        assert ResponseEnvelope.model_validate_json(env.to_json()) == env


class TestAuthFailure:
    def test_shape(self):
        assert AuthFailure(msg="wrong access code").model_dump() == {
            "error": True,
            "msg": "wrong access code",
        }


class TestHealthResponse:
    def test_ok_status(self):
        h = HealthResponse(status="ok", openai_configured=True, search_engine="duckduckgo")
        assert h.version == "0.1.0"
