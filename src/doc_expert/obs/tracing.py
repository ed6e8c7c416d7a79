"""Diagnostic logging setup and in-memory tool-call tracing."""

from __future__ import annotations

import logging
import sys
import time
from collections import OrderedDict

from doc_expert.types import ToolTrace

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    """Route all diagnostics to stderr.

    stdout is the MCP transport; anything written there corrupts protocol frames.
    """

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=_LOG_FORMAT, stream=sys.stderr, force=True)


class TraceStore:
    """Bounded in-memory storage of tool traces for the inspection API."""

    def __init__(self, *, max_records: int = 1000) -> None:
        self._records: OrderedDict[str, ToolTrace] = OrderedDict()
        self._max_records = max_records

    def record(self, trace: ToolTrace) -> str:
        self._records[trace.trace_id] = trace
        while len(self._records) > self._max_records:
            self._records.popitem(last=False)
        return trace.trace_id

    def get(self, trace_id: str) -> ToolTrace:
        trace = self._records.get(trace_id)
        if trace is None:
            raise KeyError(f"Trace not found: {trace_id}")
        return trace

    def list_recent(self, limit: int = 20) -> list[ToolTrace]:
        if limit <= 0:
            return []
        return list(self._records.values())[-limit:]

    def __len__(self) -> int:
        return len(self._records)

    def summary(self) -> dict[str, float | int]:
        """Aggregate call counts and latency for dashboard display."""
        records = list(self._records.values())
        total = len(records)
        if total == 0:
            return {
                "total_calls": 0,
                "error_calls": 0,
                "avg_latency_ms": 0.0,
                "p95_latency_ms": 0.0,
            }

        latencies = sorted(record.latency_ms for record in records)
        p95_index = max(0, int((len(latencies) * 0.95) - 1))
        return {
            "total_calls": total,
            "error_calls": sum(1 for record in records if record.status != "ok"),
            "avg_latency_ms": sum(latencies) / total,
            "p95_latency_ms": latencies[p95_index],
        }


class Timer:
    """Simple context timer."""

    def __init__(self) -> None:
        self._start = 0.0
        self.elapsed_ms = 0.0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000.0
