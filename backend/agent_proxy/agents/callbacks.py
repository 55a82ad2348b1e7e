"""Callback adapter — turns LangChain run events into streamed envelopes.

One handler is attached to exactly one agent run. It moves from open to
closed exactly once: either on root chain end (close only) or on the first
error (failure envelope, then close). After that every event is ignored.
"""

from __future__ import annotations

import json
import logging
from typing import Any
from uuid import UUID

from langchain_core.agents import AgentAction
from langchain_core.callbacks import AsyncCallbackHandler

from agent_proxy.models import ResponseEnvelope
from agent_proxy.sse_bridge import StreamBridge

logger = logging.getLogger(__name__)


def _error_text(error: BaseException) -> str:
    return str(error) or type(error).__name__


class StreamingCallbackHandler(AsyncCallbackHandler):
    """Writes tokens, tool actions and terminal errors to a StreamBridge.

    Tool start/end, LLM start, chain start and agent finish keep the base
    class no-ops.
    """

    def __init__(
        self,
        bridge: StreamBridge,
        return_intermediate_steps: bool = False,
    ) -> None:
        self.bridge = bridge
        self.return_intermediate_steps = return_intermediate_steps
        self._terminated = False

    @property
    def terminated(self) -> bool:
        return self._terminated

    async def _send(self, envelope: ResponseEnvelope) -> None:
        if self._terminated:
            return
        await self.bridge.send(envelope)

    async def _terminate(self, error_message: str | None = None) -> bool:
        """Run the single terminal action. Returns False if already done."""
        if self._terminated:
            return False
        self._terminated = True
        if error_message is not None:
            await self.bridge.send(ResponseEnvelope.failure(error_message))
        self.bridge.close()
        return True

    # -- public hooks used by tools and the run supervisor --------------------

    async def emit(self, message: str) -> None:
        """Push a success envelope from outside the callback flow."""
        await self._send(ResponseEnvelope(message=message))

    async def fail(self, error: BaseException) -> None:
        await self._terminate(_error_text(error))

    async def finish(self) -> None:
        await self._terminate()

    # -- LangChain callbacks --------------------------------------------------

    async def on_llm_new_token(
        self,
        token: str,
        *,
        run_id: UUID,
        parent_run_id: UUID | None = None,
        **kwargs: Any,
    ) -> None:
        if token:
            await self._send(ResponseEnvelope(message=token))

    async def on_llm_error(
        self,
        error: BaseException,
        *,
        run_id: UUID,
        parent_run_id: UUID | None = None,
        **kwargs: Any,
    ) -> None:
        logger.error("LLM error in run %s: %s", run_id, error)
        await self._terminate(_error_text(error))

    async def on_chain_error(
        self,
        error: BaseException,
        *,
        run_id: UUID,
        parent_run_id: UUID | None = None,
        **kwargs: Any,
    ) -> None:
        logger.error("Chain error in run %s: %s", run_id, error)
        await self._terminate(_error_text(error))

    async def on_chain_end(
        self,
        outputs: dict[str, Any],
        *,
        run_id: UUID,
        parent_run_id: UUID | None = None,
        **kwargs: Any,
    ) -> None:
        # Nested chains end many times per run; only the root closes
        if parent_run_id is not None:
            return
        logger.info("Chain %s ended", run_id)
        await self._terminate()

    async def on_agent_action(
        self,
        action: AgentAction,
        *,
        run_id: UUID,
        parent_run_id: UUID | None = None,
        **kwargs: Any,
    ) -> None:
        try:
            if not self.return_intermediate_steps:
                return
            await self._send(
                ResponseEnvelope.tool_message(
                    tool_name=action.tool,
                    message=json.dumps(action.tool_input, ensure_ascii=False),
                )
            )
        except Exception as e:
            logger.exception("Failed to stream agent action")
            await self._terminate(_error_text(e))
