"""Custom tool collection supplied by the agent route.

These tools are bound to the request's credentials and may push their own
output straight into the response stream through `ToolContext.emit`.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx
from langchain_core.tools import BaseTool, StructuredTool
from openai import AsyncOpenAI

logger = logging.getLogger(__name__)

IMAGE_MODEL = "dall-e-3"
IMAGE_SIZE = "1024x1024"


@dataclass(frozen=True)
class ToolContext:
    api_key: str
    base_url: str
    emit: Callable[[str], Awaitable[None]]
    http_get_max_chars: int = 4000


def _image_generator(ctx: ToolContext) -> BaseTool:
    async def generate_image(prompt: str) -> str:
        """Create an image from a detailed English prompt and return its URL."""
        client = AsyncOpenAI(api_key=ctx.api_key, base_url=ctx.base_url)
        result = await client.images.generate(
            model=IMAGE_MODEL,
            prompt=prompt,
            n=1,
            size=IMAGE_SIZE,
        )
        url = result.data[0].url
        if not url:
            return "No image was generated"
        await ctx.emit(f"![image]({url})")
        return url

    return StructuredTool.from_function(
        coroutine=generate_image,
        name="dalle_image_generator",
        description=(
            "useful for when you need to generate an image. input should be "
            "a detailed prompt describing the image, in English. the image is "
            "shown to the user automatically; do not repeat the url."
        ),
    )


def _http_get(ctx: ToolContext) -> BaseTool:
    async def http_get(url: str) -> str:
        """Fetch a web page and return its text."""
        try:
            async with httpx.AsyncClient(timeout=15.0, follow_redirects=True) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("http_get failed for %s: %s", url, e)
            return f"Network error: {e}"
        return response.text[: ctx.http_get_max_chars]

    return StructuredTool.from_function(
        coroutine=http_get,
        name="http_get",
        description=(
            "a portal to the internet. use this when you need to get specific "
            "content from a website. input should be a url."
        ),
    )


def build_custom_tools(ctx: ToolContext) -> list[BaseTool]:
    return [_image_generator(ctx), _http_get(ctx)]
