"""SSE bridge — a byte stream pair between agent callbacks and the HTTP response.

The writable side is driven by callback handlers while the agent runs in the
background. The readable side is handed to the HTTP response exactly once,
before anything is written, so the response can be returned immediately.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator

from sse_starlette.sse import ServerSentEvent

from agent_proxy.models import ResponseEnvelope

logger = logging.getLogger(__name__)

FRAME_SEP = "\n"

_EOF = object()  # Marks end of the stream


def encode_frame(envelope: ResponseEnvelope) -> bytes:
    """Serialize an envelope to a `data: <json>\\n\\n` frame."""
    return ServerSentEvent(data=envelope.to_json(), sep=FRAME_SEP).encode()


class StreamBridge:
    """Writable/readable pair backing one streaming response.

    `write` after `close` is a no-op, and `close` is idempotent.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[bytes | object] = asyncio.Queue()
        self._closed = False
        self._reader_taken = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def write(self, data: bytes) -> bool:
        """Queue bytes for the consumer. Returns False once closed."""
        if self._closed:
            logger.debug("Dropping %d bytes written after close", len(data))
            return False
        self._queue.put_nowait(data)
        # Let the consumer run before the next write
        await asyncio.sleep(0)
        return True

    async def send(self, envelope: ResponseEnvelope) -> bool:
        return await self.write(encode_frame(envelope))

    def close(self) -> bool:
        """Signal end-of-stream. Returns True only on the first call."""
        if self._closed:
            return False
        self._closed = True
        self._queue.put_nowait(_EOF)
        return True

    def reader(self) -> AsyncIterator[bytes]:
        """Return the readable side. May only be taken once."""
        if self._reader_taken:
            raise RuntimeError("Stream reader already taken")
        self._reader_taken = True
        return self._read()

    async def _read(self) -> AsyncIterator[bytes]:
        while True:
            item = await self._queue.get()
            if item is _EOF:
                break
            yield item
