"""Prompt templates for query generation, documentation answers and analysis."""

from __future__ import annotations

from enum import Enum

from langchain_core.prompts import PromptTemplate

from doc_expert.types import DocumentationSnapshot

NO_DOCUMENTATION = "No documentation available."

_QUERY_TEMPLATE = PromptTemplate.from_template(
    """Given this API documentation:

{documentation}

{context_block}Generate a query for this request: "{request}"

Please return ONLY the query, with no additional explanation or context."""
)

_DOCUMENTATION_TEMPLATE = PromptTemplate.from_template(
    """Given this API documentation:

{documentation}

{context_block}Answer this question about the documentation: "{request}"

Please provide a clear, concise response based solely on the provided documentation and context."""
)

_DESCRIPTION_TEMPLATE = PromptTemplate.from_template(
    """Analyze this API documentation and provide a concise 1-2 sentence description of what this API/service is about and what it does.

Documentation:
{documentation}

{context_block}Your response should be direct and focused on the core functionality, suitable for use in an API tool description."""
)


class PromptKind(str, Enum):
    QUERY = "query-generation"
    DOCUMENTATION = "documentation-answer"
    DESCRIPTION = "description-analysis"


class ContextAssembler:
    """Renders the user prompt for one operation from a documentation snapshot.

    Output depends only on the snapshot and the request, so the same inputs
    always produce the same prompt.
    """

    def build(
        self,
        kind: PromptKind,
        snapshot: DocumentationSnapshot,
        request: str | None = None,
    ) -> str:
        documentation = snapshot.all_documentation() or NO_DOCUMENTATION
        fragments = snapshot.fragments

        if kind is PromptKind.DESCRIPTION:
            return _DESCRIPTION_TEMPLATE.format(
                documentation=documentation,
                context_block=_block("Additional Context", fragments.tool_metadata),
            )

        if request is None:
            raise ValueError(f"{kind.value} prompts require a request")
        if kind is PromptKind.QUERY:
            return _QUERY_TEMPLATE.format(
                documentation=documentation,
                context_block=_block("Additional Query Context", fragments.query_metadata),
                request=request,
            )
        return _DOCUMENTATION_TEMPLATE.format(
            documentation=documentation,
            context_block=_block("Additional Context", fragments.query_metadata),
            request=request,
        )

    def query_prompt(self, snapshot: DocumentationSnapshot, request: str) -> str:
        return self.build(PromptKind.QUERY, snapshot, request)

    def documentation_prompt(self, snapshot: DocumentationSnapshot, request: str) -> str:
        return self.build(PromptKind.DOCUMENTATION, snapshot, request)

    def description_prompt(self, snapshot: DocumentationSnapshot) -> str:
        return self.build(PromptKind.DESCRIPTION, snapshot)


def _block(title: str, body: str) -> str:
    if not body:
        return ""
    return f"{title}:\n{body}\n\n"
