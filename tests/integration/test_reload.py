import asyncio
from pathlib import Path

import pytest
from conftest import FakeChatModel, write_corpus

from doc_expert.ingest.store import DocumentationStore
from doc_expert.service import ExpertService


def test_in_flight_request_keeps_consistent_snapshot(tmp_path: Path) -> None:
    docs_dir, prompts_dir = write_corpus(
        tmp_path, {"a.txt": "Old doc"}, system_prompt="Old system prompt"
    )
    store = DocumentationStore(docs_dir, prompts_dir)
    store.load()
    llm = FakeChatModel("answer")
    service = ExpertService(store=store, llm=llm, timeout_seconds=5.0)

    async def _run() -> None:
        llm.gate = asyncio.Event()
        in_flight = asyncio.ensure_future(
            service.dispatcher.call_tool("documentation", {"request": "what changed?"})
        )
        while not llm.calls:
            await asyncio.sleep(0)

        (docs_dir / "a.txt").unlink()
        write_corpus(tmp_path, {"b.txt": "New doc"}, system_prompt="New system prompt")
        reload = asyncio.ensure_future(service.reload())
        while store.snapshot().names() != ["b.txt"]:
            await asyncio.sleep(0.01)

        llm.gate.set()
        await asyncio.gather(in_flight, reload)

    asyncio.run(_run())

    system, human = llm.calls[0]
    assert system.content == "Old system prompt"
    assert "Old doc" in human.content
    assert "New doc" not in human.content

    assert service.descriptions.get() == "answer"
    analysis_system, analysis_human = llm.calls[1]
    assert analysis_system.content == "New system prompt"
    assert "New doc" in analysis_human.content


def test_reload_invalidates_and_recomputes_description(service: ExpertService, fake_llm: FakeChatModel) -> None:
    fake_llm.reply = "First description."
    asyncio.run(service.dispatcher.list_tools())

    fake_llm.reply = "Second description."
    description = asyncio.run(service.reload())

    assert description == "Second description."
    assert service.descriptions.get() == "Second description."
    assert len(fake_llm.calls) == 2


def test_reload_drops_description_before_publishing_snapshot(
    service: ExpertService, fake_llm: FakeChatModel, monkeypatch: pytest.MonkeyPatch
) -> None:
    fake_llm.reply = "First description."
    asyncio.run(service.dispatcher.list_tools())
    assert service.descriptions.get() == "First description."

    seen: list[str | None] = []
    publish = service.store.publish

    def _publish(snapshot):
        seen.append(service.descriptions.get())
        return publish(snapshot)

    monkeypatch.setattr(service.store, "publish", _publish)
    fake_llm.reply = "Second description."
    asyncio.run(service.reload())

    assert seen == [None]
    assert service.descriptions.get() == "Second description."
