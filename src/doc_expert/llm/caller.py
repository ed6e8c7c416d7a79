"""Timeout-bounded calls to the text-generation backend."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from doc_expert.errors import UpstreamError, UpstreamMalformedResponse, UpstreamTimeout
from doc_expert.obs.tracing import Timer

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class ChatModel(Protocol):
    """The slice of a LangChain chat model the caller depends on."""

    async def ainvoke(self, input: list[BaseMessage], **kwargs: Any) -> Any: ...


class ResilientCaller:
    """Runs one generation request under a hard deadline and validates the reply.

    There is exactly one attempt per call; retrying is left to the caller. When
    the deadline passes, the in-flight `ainvoke` task is cancelled, which stops
    waiting locally but cannot guarantee the provider aborts the request.
    """

    def __init__(self, llm: ChatModel, *, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        self.llm = llm
        self.timeout_seconds = timeout_seconds

    async def invoke(self, prompt: str, context: str, system_prompt: str = "") -> str:
        messages: list[BaseMessage] = []
        if system_prompt:
            messages.append(SystemMessage(content=system_prompt))
        messages.append(HumanMessage(content=prompt))

        logger.debug("Making generation request for %s", context)
        with Timer() as timer:
            try:
                response = await asyncio.wait_for(
                    self.llm.ainvoke(messages), timeout=self.timeout_seconds
                )
            except asyncio.TimeoutError as exc:
                logger.warning("Generation request timed out for %s", context)
                raise UpstreamTimeout(context, self.timeout_seconds) from exc
            except Exception as exc:
                logger.warning("Generation request failed for %s: %s", context, exc)
                raise UpstreamError(
                    f"Generation request failed for {context}: {exc}", context=context
                ) from exc
        logger.debug("Received response for %s in %.0fms", context, timer.elapsed_ms)
        return extract_text(response, context)


def extract_text(response: Any, context: str) -> str:
    """Return the text of the first content block or raise.

    A message whose content is a plain string is treated as a single text block.
    """

    content = getattr(response, "content", response)
    if isinstance(content, str):
        blocks: list[Any] = [content] if content else []
    elif isinstance(content, list):
        blocks = content
    else:
        blocks = []

    if not blocks:
        raise UpstreamMalformedResponse(context, "response contained no content")

    first = blocks[0]
    if isinstance(first, str):
        text = first
    elif isinstance(first, dict) and first.get("type") == "text":
        text = first.get("text")
    else:
        text = None

    if not isinstance(text, str) or not text:
        raise UpstreamMalformedResponse(context, "first content block is not non-empty text")
    return text
