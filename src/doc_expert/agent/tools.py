"""The two documentation-expert tools."""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from doc_expert.agent.prompts import ContextAssembler
from doc_expert.agent.registry import ToolRegistry, ToolSpec
from doc_expert.errors import UpstreamError
from doc_expert.ingest.store import DocumentationStore
from doc_expert.llm.caller import ResilientCaller
from doc_expert.obs.tracing import Timer
from doc_expert.types import ToolOutput

logger = logging.getLogger(__name__)

CREATE_QUERY = "create-query"
DOCUMENTATION = "documentation"


class QueryToolInput(BaseModel):
    request: str = Field(
        min_length=1,
        description="Natural language request for the query you want to generate",
    )


class DocumentationToolInput(BaseModel):
    request: str = Field(
        min_length=1,
        description="Natural language question about the API documentation",
    )


def register_expert_tools(
    registry: ToolRegistry,
    store: DocumentationStore,
    assembler: ContextAssembler,
    caller: ResilientCaller,
) -> None:
    """Register `create-query` and `documentation`.

    Both tools read the store snapshot once per call, so a concurrent reload
    cannot mix documentation from one load with prompt fragments from another.
    Backend failures are answered with an ``Error: ...`` text payload instead of
    raising, since MCP clients of these tools expect text content.
    """

    async def _create_query(input_data: QueryToolInput) -> ToolOutput:
        request = input_data.request
        context = f'query request: "{request}"'
        snapshot = store.snapshot()
        logger.info("Starting query generation for: %r", request)
        with Timer() as timer:
            try:
                text = await caller.invoke(
                    assembler.query_prompt(snapshot, request),
                    context,
                    system_prompt=snapshot.fragments.system_prompt,
                )
            except UpstreamError as exc:
                logger.warning("Query generation failed: %s", exc)
                return ToolOutput(
                    text=f'Error: Unable to generate query for request: "{request}"',
                    failed=True,
                )
        logger.info("Query generation finished in %.0fms", timer.elapsed_ms)
        return ToolOutput(text=text)

    async def _documentation(input_data: DocumentationToolInput) -> ToolOutput:
        request = input_data.request
        context = f'documentation request: "{request}"'
        snapshot = store.snapshot()
        logger.info("Starting documentation request for: %r", request)
        with Timer() as timer:
            try:
                text = await caller.invoke(
                    assembler.documentation_prompt(snapshot, request),
                    context,
                    system_prompt=snapshot.fragments.system_prompt,
                )
            except UpstreamError as exc:
                logger.warning("Documentation request failed: %s", exc)
                return ToolOutput(
                    text=f'Error: Unable to process documentation request: "{request}"',
                    failed=True,
                )
        logger.info("Documentation request finished in %.0fms", timer.elapsed_ms)
        return ToolOutput(text=text)

    registry.register(
        ToolSpec(
            name=CREATE_QUERY,
            description="Generate a query",
            args_schema=QueryToolInput,
            handler=_create_query,
        )
    )
    registry.register(
        ToolSpec(
            name=DOCUMENTATION,
            description="Get information about",
            args_schema=DocumentationToolInput,
            handler=_documentation,
        )
    )
