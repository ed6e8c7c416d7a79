import asyncio

import pytest
from pydantic import BaseModel, Field

from doc_expert.agent.registry import ToolRegistry, ToolSpec
from doc_expert.errors import InvalidArguments, UnknownTool
from doc_expert.types import ToolOutput


class EchoInput(BaseModel):
    value: int = Field(ge=1)
    label: str = Field(min_length=1)


async def _handler(data: EchoInput) -> ToolOutput:
    return ToolOutput(text=f"{data.label}={data.value}")


def _registry() -> ToolRegistry:
    registry = ToolRegistry()
    registry.register(
        ToolSpec(
            name="echo",
            description="echo positive int",
            args_schema=EchoInput,
            handler=_handler,
        )
    )
    return registry


def test_tool_registry_validation() -> None:
    registry = _registry()

    assert asyncio.run(registry.execute("echo", {"value": 3, "label": "n"})) == ToolOutput(text="n=3")

    with pytest.raises(InvalidArguments) as excinfo:
        asyncio.run(registry.execute("echo", {"value": 0, "label": ""}))

    fields = [field for field, _ in excinfo.value.violations]
    assert fields == ["value", "label"]
    assert str(excinfo.value).startswith("Invalid arguments: value: ")


def test_missing_arguments_are_reported() -> None:
    with pytest.raises(InvalidArguments) as excinfo:
        asyncio.run(_registry().execute("echo", None))

    assert {field for field, _ in excinfo.value.violations} == {"value", "label"}


def test_unknown_tool_rejected() -> None:
    with pytest.raises(UnknownTool) as excinfo:
        asyncio.run(_registry().execute("missing", {}))

    assert str(excinfo.value) == "Unknown tool: missing"


def test_duplicate_tool_registration_rejected() -> None:
    registry = _registry()

    with pytest.raises(ValueError):
        registry.register(registry.get("echo"))
