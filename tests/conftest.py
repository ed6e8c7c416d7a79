from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import pytest
from langchain_core.messages import AIMessage, BaseMessage

from doc_expert.ingest.store import DocumentationStore
from doc_expert.service import ExpertService


class FakeChatModel:
    """Stands in for a LangChain chat model and records every prompt it gets."""

    def __init__(
        self,
        reply: Any = "SELECT * FROM users",
        *,
        delay: float = 0.0,
        error: Exception | None = None,
    ) -> None:
        self.reply = reply
        self.delay = delay
        self.error = error
        self.calls: list[list[BaseMessage]] = []
        self.cancelled = 0
        self.gate: asyncio.Event | None = None

    async def ainvoke(self, input: list[BaseMessage], **kwargs: Any) -> Any:
        self.calls.append(list(input))
        try:
            if self.gate is not None:
                await self.gate.wait()
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        if self.error is not None:
            raise self.error
        if isinstance(self.reply, AIMessage):
            return self.reply
        return AIMessage(content=self.reply)

    @property
    def prompts(self) -> list[str]:
        return [str(messages[-1].content) for messages in self.calls]


def write_corpus(
    base: Path,
    docs: dict[str, str],
    *,
    system_prompt: str = "You are an API expert.",
    tool_metadata: str = "",
    query_metadata: str = "",
) -> tuple[Path, Path]:
    docs_dir = base / "docs"
    prompts_dir = base / "prompts"
    docs_dir.mkdir(parents=True, exist_ok=True)
    prompts_dir.mkdir(parents=True, exist_ok=True)
    for name, content in docs.items():
        (docs_dir / name).write_text(content, encoding="utf-8")
    fragments = {
        "system-prompt.txt": system_prompt,
        "tool-metadata.txt": tool_metadata,
        "query-metadata.txt": query_metadata,
    }
    for name, content in fragments.items():
        path = prompts_dir / name
        if content:
            path.write_text(content, encoding="utf-8")
        elif path.exists():
            path.unlink()
    return docs_dir, prompts_dir


@pytest.fixture
def fake_llm() -> FakeChatModel:
    return FakeChatModel()


@pytest.fixture
def corpus(tmp_path: Path) -> tuple[Path, Path]:
    return write_corpus(
        tmp_path,
        {"a.txt": "Alpha doc", "b.md": "Beta doc"},
        query_metadata="All queries require a Bearer token.",
    )


@pytest.fixture
def service(corpus: tuple[Path, Path], fake_llm: FakeChatModel) -> ExpertService:
    docs_dir, prompts_dir = corpus
    store = DocumentationStore(docs_dir, prompts_dir)
    store.load()
    return ExpertService(store=store, llm=fake_llm, timeout_seconds=1.0)
