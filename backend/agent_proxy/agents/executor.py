"""Builds the LLM, conversation memory and tool-calling executor for one request."""

from __future__ import annotations

import logging
from typing import Any

from langchain.agents import AgentExecutor, create_openai_tools_agent
from langchain_core.chat_history import InMemoryChatMessageHistory
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder
from langchain_core.runnables import Runnable
from langchain_core.tools import BaseTool
from langchain_openai import ChatOpenAI

from agent_proxy.credentials import Credentials
from agent_proxy.models import ChatRequest, RequestMessage

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a helpful AI assistant."

_ROLE_MESSAGES: dict[str, type[BaseMessage]] = {
    "system": SystemMessage,
    "user": HumanMessage,
    "assistant": AIMessage,
}


def build_chat_history(messages: list[RequestMessage]) -> InMemoryChatMessageHistory:
    """Conversation memory from prior messages. Unknown roles are skipped."""
    history = InMemoryChatMessageHistory()
    for message in messages:
        message_cls = _ROLE_MESSAGES.get(message.role)
        if message_cls is None:
            logger.debug("Skipping message with role %r", message.role)
            continue
        history.add_message(message_cls(content=message.content))
    return history


def build_llm(request: ChatRequest, credentials: Credentials) -> ChatOpenAI:
    return ChatOpenAI(
        model=request.model,
        api_key=credentials.api_key,
        base_url=credentials.base_url,
        temperature=request.temperature,
        top_p=request.top_p,
        presence_penalty=request.presence_penalty,
        frequency_penalty=request.frequency_penalty,
        streaming=request.stream,
    )


def _prompt(with_scratchpad: bool) -> ChatPromptTemplate:
    messages: list[Any] = [
        ("system", SYSTEM_PROMPT),
        MessagesPlaceholder("chat_history"),
        ("human", "{input}"),
    ]
    if with_scratchpad:
        messages.append(MessagesPlaceholder("agent_scratchpad"))
    return ChatPromptTemplate.from_messages(messages)


def build_agent(
    llm: ChatOpenAI,
    tools: list[BaseTool],
    request: ChatRequest,
) -> Runnable:
    """Tool-calling executor, or a plain chat chain when there are no tools.

    Providers reject an empty tool list, so the tool-less case skips the
    agent loop entirely.
    """
    if not tools:
        return _prompt(with_scratchpad=False) | llm | StrOutputParser()

    agent = create_openai_tools_agent(llm, tools, _prompt(with_scratchpad=True))
    return AgentExecutor(
        agent=agent,
        tools=tools,
        max_iterations=request.max_iterations,
        return_intermediate_steps=request.return_intermediate_steps,
    )


def build_inputs(
    request: ChatRequest,
    history: InMemoryChatMessageHistory,
) -> dict[str, Any]:
    return {
        "input": request.messages[-1].content,
        "chat_history": history.messages,
    }
