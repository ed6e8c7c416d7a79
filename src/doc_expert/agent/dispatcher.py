"""Protocol-facing dispatch of tool listing and tool calls."""

from __future__ import annotations

import logging
from time import perf_counter
from typing import Any

from doc_expert.agent.description import ServiceDescriptionCache
from doc_expert.agent.registry import ToolRegistry

logger = logging.getLogger(__name__)

FALLBACK_SUFFIX = " using the API documentation"


class ToolDispatcher:
    """Implements the two MCP verbs on top of the tool registry."""

    def __init__(self, registry: ToolRegistry, descriptions: ServiceDescriptionCache) -> None:
        self.registry = registry
        self.descriptions = descriptions

    async def list_tools(self) -> dict[str, Any]:
        if self.descriptions.get() is None:
            logger.info("Initializing service description...")
        description = await self.descriptions.ensure()
        suffix = f" for {description.lower()}" if description else FALLBACK_SUFFIX
        return {
            "tools": [
                {
                    "name": spec.name,
                    "description": f"{spec.description}{suffix}",
                    "inputSchema": spec.input_schema(),
                }
                for spec in self.registry.specs()
            ]
        }

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> dict[str, Any]:
        """Run a tool and wrap its text as MCP content.

        Raises:
            UnknownTool: ``name`` is not registered.
            InvalidArguments: ``arguments`` do not match the tool's schema.
        """

        logger.info("Received %s request with arguments: %r", name, arguments)
        start = perf_counter()
        try:
            output = await self.registry.execute(name, arguments)
        except Exception as exc:
            elapsed_ms = (perf_counter() - start) * 1000.0
            logger.warning("Request %s failed after %.0fms: %s", name, elapsed_ms, exc)
            raise
        elapsed_ms = (perf_counter() - start) * 1000.0
        if output.failed:
            logger.warning("%s returned an error payload: %s", name, output.text)
        logger.info("Request %s completed in %.0fms", name, elapsed_ms)
        return {"content": [{"type": "text", "text": output.text}]}
