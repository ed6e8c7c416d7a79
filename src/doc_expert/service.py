"""Composition root wiring the store, backend caller and dispatcher together."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from doc_expert.agent.description import ServiceDescriptionCache
from doc_expert.agent.dispatcher import ToolDispatcher
from doc_expert.agent.prompts import ContextAssembler
from doc_expert.agent.registry import ToolRegistry
from doc_expert.agent.tools import register_expert_tools
from doc_expert.config import ExpertConfig
from doc_expert.ingest.store import DocumentationStore
from doc_expert.llm.caller import DEFAULT_TIMEOUT_SECONDS, ChatModel, ResilientCaller
from doc_expert.obs.tracing import TraceStore

logger = logging.getLogger(__name__)


def create_chat_model(config: ExpertConfig) -> Any:
    from langchain_anthropic import ChatAnthropic

    return ChatAnthropic(
        model=config.model,
        max_tokens=config.max_tokens,
        api_key=config.api_key,
        temperature=0,
    )


class ExpertService:
    """Owns every long-lived collaborator of one running expert server."""

    def __init__(
        self,
        *,
        store: DocumentationStore,
        llm: ChatModel,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        trace_store: TraceStore | None = None,
    ) -> None:
        self.store = store
        self.caller = ResilientCaller(llm, timeout_seconds=timeout_seconds)
        self.assembler = ContextAssembler()
        self.descriptions = ServiceDescriptionCache(store, self.assembler, self.caller)
        self.trace_store = trace_store or TraceStore()

        self.registry = ToolRegistry()
        register_expert_tools(self.registry, store, self.assembler, self.caller)
        self.registry.set_observer(self.trace_store.record)
        self.dispatcher = ToolDispatcher(self.registry, self.descriptions)

    @classmethod
    def from_config(cls, config: ExpertConfig, *, llm: ChatModel | None = None) -> "ExpertService":
        """Build and load a service; the chat model is created unless injected."""

        store = DocumentationStore(config.docs_dir, config.prompts_dir)
        logger.info("Docs directory: %s", store.docs_dir)
        logger.info("Prompts directory: %s", store.prompts_dir)
        store.load()
        logger.info("Using model: %s (max tokens %d)", config.model, config.max_tokens)
        return cls(
            store=store,
            llm=llm if llm is not None else create_chat_model(config),
            timeout_seconds=config.timeout_seconds,
        )

    async def reload(self) -> str:
        """Reload documentation and fragments, then refresh the description.

        Files are read in a worker thread; requests already in flight keep the
        snapshot they started with. The cached description is dropped before the
        new snapshot is published so no caller pairs the old description with it.
        """

        logger.info("Reloading documentation and metadata...")
        snapshot = await asyncio.to_thread(self.store.read)
        self.descriptions.invalidate()
        self.store.publish(snapshot)
        logger.info("Updating service description...")
        description = await self.descriptions.ensure()
        logger.info("Documentation reload complete")
        return description
