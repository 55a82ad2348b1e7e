"""Agent layer — LangChain tool-calling agent streamed through callbacks.

The route builds a StreamBridge and a StreamingCallbackHandler, assembles the
tools and the executor from here, then hands the run to `run_registry`.
"""

from __future__ import annotations

from .callbacks import StreamingCallbackHandler
from .executor import build_agent, build_chat_history, build_inputs, build_llm
from .runs import AgentRunRegistry, drive_agent, run_registry

__all__ = [
    "AgentRunRegistry",
    "StreamingCallbackHandler",
    "build_agent",
    "build_chat_history",
    "build_inputs",
    "build_llm",
    "drive_agent",
    "run_registry",
]
