"""Shared domain models."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class DocumentationEntry:
    """One documentation file loaded from the corpus."""

    name: str
    content: str


@dataclass(frozen=True, slots=True)
class PromptFragments:
    """Optional prompt augmentations; an empty string means absent."""

    system_prompt: str = ""
    tool_metadata: str = ""
    query_metadata: str = ""


@dataclass(frozen=True, slots=True)
class DocumentationSnapshot:
    """Everything one load cycle produced, replaced wholesale on reload."""

    entries: tuple[DocumentationEntry, ...] = ()
    fragments: PromptFragments = field(default_factory=PromptFragments)

    def all_documentation(self) -> str:
        return "\n\n".join(entry.content for entry in self.entries)

    def names(self) -> list[str]:
        return [entry.name for entry in self.entries]

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(slots=True)
class ToolTrace:
    """Trace record for an executed tool call."""

    name: str
    input_payload: dict[str, Any]
    output_preview: str
    latency_ms: float
    status: str = "ok"
    trace_id: str = field(default_factory=lambda: str(uuid.uuid4()))


@dataclass(frozen=True, slots=True)
class ToolOutput:
    """Text returned by a tool; `failed` is set when the backend call did not succeed."""

    text: str
    failed: bool = False
