"""Background agent runs — supervised tasks that outlive the request handler.

The agent route returns its streaming response before the agent has produced
anything, so each run lives in its own asyncio.Task tracked here. The task is
only kept alive by the server's event loop: this assumes a long-lived ASGI
process (uvicorn) whose loop keeps running after the handler returns. A host
that tears down work once the handler returns would truncate the stream.

Runs end on their own, when the client disconnects (`cancel`), or on server
shutdown (`shutdown`).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

from langchain_core.runnables import Runnable

from .callbacks import StreamingCallbackHandler

logger = logging.getLogger(__name__)


async def drive_agent(
    agent: Runnable,
    inputs: dict[str, Any],
    handler: StreamingCallbackHandler,
) -> None:
    """Run the agent with the handler attached; always leaves the stream closed."""
    try:
        await agent.ainvoke(inputs, config={"callbacks": [handler]})
    except Exception as exc:
        logger.error("Agent run failed: %s", exc)
        await handler.fail(exc)
    finally:
        await handler.finish()


class AgentRunRegistry:
    """Tracks in-flight agent runs by id."""

    def __init__(self) -> None:
        self._runs: dict[str, asyncio.Task[None]] = {}

    def __len__(self) -> int:
        return len(self._runs)

    def __contains__(self, run_id: object) -> bool:
        return run_id in self._runs

    def spawn(
        self, run_id: str, coro: Coroutine[Any, Any, None]
    ) -> asyncio.Task[None]:
        """Start a run in the background without waiting for it."""
        task = asyncio.create_task(coro, name=f"agent-run-{run_id}")
        self._runs[run_id] = task
        task.add_done_callback(lambda t: self._finished(run_id, t))
        logger.info("Agent run %s started", run_id)
        return task

    def _finished(self, run_id: str, task: asyncio.Task[None]) -> None:
        self._runs.pop(run_id, None)
        if task.cancelled():
            logger.info("Agent run %s cancelled", run_id)
        elif task.exception() is not None:
            logger.error("Agent run %s crashed: %s", run_id, task.exception())
        else:
            logger.info("Agent run %s finished", run_id)

    def cancel(self, run_id: str) -> bool:
        """Request cancellation of a run. Returns False if it is not running."""
        task = self._runs.get(run_id)
        if task is None or task.done():
            return False
        return task.cancel()

    async def shutdown(self, timeout: float = 10.0) -> None:
        """Cancel every in-flight run. Called on server shutdown."""
        tasks = list(self._runs.values())
        if not tasks:
            return
        logger.info("Cancelling %d agent run(s)", len(tasks))
        for task in tasks:
            task.cancel()
        _, pending = await asyncio.wait(tasks, timeout=timeout)
        if pending:
            logger.warning("%d agent run(s) did not stop in time", len(pending))


run_registry = AgentRunRegistry()
