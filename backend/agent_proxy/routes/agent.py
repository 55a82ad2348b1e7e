"""Tool agent endpoint — GET/POST /api/langchain/tool/agent/nodejs → SSE stream.

Setup (auth, body parsing, credentials, tools, executor) happens before the
response is returned; failures there produce a plain JSON error. The agent
itself runs in the background and reaches the client only through the
StreamBridge.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import AsyncIterator

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response
from sse_starlette.sse import EventSourceResponse

from agent_proxy.agents import (
    StreamingCallbackHandler,
    build_agent,
    build_chat_history,
    build_inputs,
    build_llm,
    drive_agent,
    run_registry,
)
from agent_proxy.agents.tools import ToolContext, assemble_tools, build_custom_tools
from agent_proxy.auth import check_auth
from agent_proxy.config import settings
from agent_proxy.credentials import parse_bearer_token, resolve_credentials
from agent_proxy.models import AuthFailure, ChatRequest
from agent_proxy.sse_bridge import FRAME_SEP, StreamBridge

logger = logging.getLogger(__name__)

AGENT_ROUTE = "/api/langchain/tool/agent/nodejs"
# Seconds between keep-alive comments. Long enough that a run never sees one,
# so the body carries nothing but data frames.
PING_INTERVAL = 3600

router = APIRouter()


async def _relay(
    reader: AsyncIterator[bytes],
    bridge: StreamBridge,
    run_id: str,
) -> AsyncIterator[bytes]:
    """Forward frames to the response; cancel the run if the client leaves."""
    try:
        async for frame in reader:
            yield frame
    finally:
        if not bridge.closed:
            logger.info("Client disconnected before run %s finished", run_id)
            run_registry.cancel(run_id)


@router.options(AGENT_ROUTE)
async def agent_options() -> JSONResponse:
    return JSONResponse({"body": "OK"})


@router.api_route(AGENT_ROUTE, methods=["GET", "POST"])
async def agent(request: Request) -> Response:
    """Run the tool agent and stream its output.

    Frames are `data: <ResponseEnvelope json>`; the stream ends when the run
    completes or fails.
    """
    authorization = request.headers.get("Authorization")
    auth = check_auth(authorization, settings)
    if auth.error:
        return JSONResponse(AuthFailure(msg=auth.msg).model_dump(), status_code=401)

    try:
        body = ChatRequest.model_validate(await request.json())
        credentials = resolve_credentials(
            parse_bearer_token(authorization), body.base_url, settings
        )

        bridge = StreamBridge()
        handler = StreamingCallbackHandler(
            bridge, return_intermediate_steps=body.return_intermediate_steps
        )
        custom_tools = build_custom_tools(
            ToolContext(
                api_key=credentials.api_key,
                base_url=credentials.base_url,
                emit=handler.emit,
                http_get_max_chars=settings.http_get_max_chars,
            )
        )
        tools = assemble_tools(
            body.tool_names,
            search_engine=settings.search_engine,
            settings=settings,
            custom_tools=custom_tools,
            dedup=settings.tool_dedup,
            strict=settings.strict_tool_names,
        )

        history = build_chat_history(body.messages[:-1])
        llm = build_llm(body, credentials)
        executor = build_agent(llm, tools, body)
        inputs = build_inputs(body, history)
    except Exception as e:
        logger.exception("Agent setup failed")
        return JSONResponse({"error": str(e)}, status_code=500)

    run_id = str(uuid.uuid4())
    reader = bridge.reader()
    run_registry.spawn(run_id, drive_agent(executor, inputs, handler))
    return EventSourceResponse(
        _relay(reader, bridge, run_id),
        media_type="text/event-stream",
        sep=FRAME_SEP,
        ping=PING_INTERVAL,
    )
