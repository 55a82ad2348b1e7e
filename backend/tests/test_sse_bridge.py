"""Tests for the SSE bridge — frame encoding and the close contract."""

from __future__ import annotations

import asyncio
import json

import pytest

from agent_proxy.models import ResponseEnvelope
from agent_proxy.sse_bridge import StreamBridge, encode_frame

from tests.conftest import drain


class TestEncodeFrame:
    def test_data_frame_format(self):
        frame = encode_frame(ResponseEnvelope(message="hi"))
        assert frame == (
            b'data: {"isSuccess":true,"message":"hi","isToolMessage":false}\n\n'
        )

    def test_tool_envelope_includes_tool_name(self):
        frame = encode_frame(ResponseEnvelope.tool_message("calc", '{"x": 1}'))
        payload = json.loads(frame.decode()[len("data: "):])
        assert payload == {
            "isSuccess": True,
            "message": '{"x": 1}',
            "isToolMessage": True,
            "toolName": "calc",
        }

    def test_multiline_message_stays_one_data_line(self):
        envelope = ResponseEnvelope(message="line one\nline two")
        frame = encode_frame(envelope).decode()

        assert frame.count("data: ") == 1
        restored = ResponseEnvelope.model_validate_json(frame[len("data: "):].strip())
        assert restored == envelope

    def test_unicode_round_trips(self):
        envelope = ResponseEnvelope(message="héllo 世界 🚀")
        restored = json.loads(encode_frame(envelope).decode()[len("data: "):])
        assert restored["message"] == "héllo 世界 🚀"


class TestStreamBridge:
    async def test_writes_then_close(self):
        bridge = StreamBridge()
        await bridge.send(ResponseEnvelope(message="a"))
        await bridge.send(ResponseEnvelope(message="b"))
        bridge.close()

        frames = await drain(bridge)
        assert [f["message"] for f in frames] == ["a", "b"]

    async def test_write_after_close_is_noop(self):
        bridge = StreamBridge()
        bridge.close()

        assert await bridge.write(b"data: late\n\n") is False
        assert await drain(bridge) == []

    async def test_close_is_idempotent(self):
        bridge = StreamBridge()
        assert bridge.close() is True
        assert bridge.close() is False
        assert bridge.closed

    async def test_reader_taken_once(self):
        bridge = StreamBridge()
        bridge.reader()
        with pytest.raises(RuntimeError):
            bridge.reader()

    async def test_reader_waits_for_producer(self):
        bridge = StreamBridge()
        reader = bridge.reader()

        async def produce():
            await asyncio.sleep(0.01)
            await bridge.write(b"x")
            bridge.close()

        producer = asyncio.create_task(produce())
        chunks = [chunk async for chunk in reader]
        await producer

        assert chunks == [b"x"]
