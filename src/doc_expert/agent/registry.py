"""Tool registry built on Pydantic v2 models."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from time import perf_counter
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from doc_expert.errors import InvalidArguments, UnknownTool
from doc_expert.types import ToolOutput, ToolTrace


class ToolSpec(BaseModel):
    """Declarative tool specification for registration and validation."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    description: str
    args_schema: type[BaseModel]
    handler: Callable[[BaseModel], Awaitable[ToolOutput]]

    def validate_arguments(self, payload: dict[str, Any] | None) -> BaseModel:
        try:
            return self.args_schema.model_validate(payload or {})
        except ValidationError as exc:
            raise InvalidArguments(_violations(exc)) from exc

    async def invoke(self, payload: dict[str, Any] | None) -> ToolOutput:
        data = self.validate_arguments(payload)
        return await self.handler(data)

    def input_schema(self) -> dict[str, Any]:
        return self.args_schema.model_json_schema()


class ToolRegistry:
    """Stores tool specs and executes them with validated arguments."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolSpec] = {}
        self._observer: Callable[[ToolTrace], None] | None = None

    def register(self, spec: ToolSpec) -> None:
        if spec.name in self._tools:
            raise ValueError(f"Tool already registered: {spec.name}")
        self._tools[spec.name] = spec

    def set_observer(self, observer: Callable[[ToolTrace], None] | None) -> None:
        """Set an optional callback invoked after each tool execution."""
        self._observer = observer

    def get(self, name: str) -> ToolSpec:
        spec = self._tools.get(name)
        if spec is None:
            raise UnknownTool(name)
        return spec

    async def execute(self, name: str, payload: dict[str, Any] | None) -> ToolOutput:
        return await self._execute_spec(self.get(name), payload)

    def specs(self) -> list[ToolSpec]:
        return list(self._tools.values())

    async def _execute_spec(
        self, spec: ToolSpec, payload: dict[str, Any] | None
    ) -> ToolOutput:
        start = perf_counter()
        status = "error"
        output = ToolOutput(text="")
        try:
            output = await spec.invoke(payload)
            status = "upstream_error" if output.failed else "ok"
            return output
        finally:
            if self._observer is not None:
                self._observer(
                    ToolTrace(
                        name=spec.name,
                        input_payload=(
                            dict(payload) if isinstance(payload, dict) else {"raw": payload}
                        ),
                        output_preview=output.text[:320],
                        latency_ms=(perf_counter() - start) * 1000.0,
                        status=status,
                    )
                )


def _violations(exc: ValidationError) -> list[tuple[str, str]]:
    violations: list[tuple[str, str]] = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "arguments"
        violations.append((field, error["msg"]))
    return violations
