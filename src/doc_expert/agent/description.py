"""Lazily computed, single-flight service description."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from doc_expert.agent.prompts import ContextAssembler
from doc_expert.errors import UpstreamError
from doc_expert.ingest.store import DocumentationStore
from doc_expert.llm.caller import ResilientCaller

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _Absent:
    pass


@dataclass(frozen=True, slots=True, eq=False)
class _Pending:
    task: asyncio.Future[str | None]


@dataclass(frozen=True, slots=True)
class _Present:
    value: str


_ABSENT = _Absent()


class ServiceDescriptionCache:
    """One-line summary of the corpus used to enrich tool descriptions.

    The cell moves Absent -> Pending -> Present (or back to Absent on failure).
    Callers arriving while a computation is pending await the same task, so at
    most one upstream analysis is in flight. A task only settles the cell if the
    cell still holds its own Pending state; `invalidate()` during a computation
    therefore discards the stale result.
    """

    def __init__(
        self,
        store: DocumentationStore,
        assembler: ContextAssembler,
        caller: ResilientCaller,
    ) -> None:
        self._store = store
        self._assembler = assembler
        self._caller = caller
        self._state: _Absent | _Pending | _Present = _ABSENT

    def get(self) -> str | None:
        state = self._state
        return state.value if isinstance(state, _Present) else None

    @property
    def pending(self) -> bool:
        return isinstance(self._state, _Pending)

    async def ensure(self) -> str:
        """Return the description, computing it once if needed. Never raises."""

        state = self._state
        if isinstance(state, _Present):
            return state.value
        if isinstance(state, _Absent):
            task = asyncio.ensure_future(self._analyze())
            state = _Pending(task)
            self._state = state
            task.add_done_callback(lambda done, owner=state: self._settle(owner, done))

        try:
            value = await asyncio.shield(state.task)
        except asyncio.CancelledError:
            if not state.task.cancelled():
                raise
            return ""
        return value or ""

    def invalidate(self) -> None:
        self._state = _ABSENT

    def _settle(self, owner: _Pending, task: asyncio.Future[str | None]) -> None:
        if self._state is not owner:
            return
        if task.cancelled() or task.exception() is not None or not task.result():
            self._state = _ABSENT
        else:
            self._state = _Present(task.result())

    async def _analyze(self) -> str | None:
        snapshot = self._store.snapshot()
        if not snapshot.entries:
            logger.info("No documentation available for analysis")
            return None

        logger.info("Analyzing %d documentation files...", len(snapshot))
        if snapshot.fragments.tool_metadata:
            logger.debug("Including tool metadata in analysis")
        prompt = self._assembler.description_prompt(snapshot)
        try:
            description = await self._caller.invoke(
                prompt,
                "documentation analysis",
                system_prompt=snapshot.fragments.system_prompt,
            )
        except UpstreamError as exc:
            logger.warning("Failed to generate service description: %s", exc)
            return None
        description = description.strip()
        logger.info("Generated service description: %s", description)
        return description
