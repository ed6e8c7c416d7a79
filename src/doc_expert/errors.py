"""Exception types raised across the expert service."""

from __future__ import annotations


class ExpertError(Exception):
    """Base class for every error the service raises on purpose."""


class ConfigurationMissing(ExpertError):
    """A required setting (such as the API credential) is not configured."""

    def __init__(self, setting: str) -> None:
        super().__init__(
            f"{setting} environment variable is required for the expert service to function."
        )
        self.setting = setting


class InvalidArguments(ExpertError, ValueError):
    """Tool arguments failed shape or length validation."""

    def __init__(self, violations: list[tuple[str, str]]) -> None:
        self.violations = violations
        detail = ", ".join(f"{field}: {reason}" for field, reason in violations)
        super().__init__(f"Invalid arguments: {detail}")


class UnknownTool(ExpertError, KeyError):
    """The requested tool name is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name

    def __str__(self) -> str:
        return str(self.args[0])


class UpstreamError(ExpertError):
    """The text-generation backend could not produce a usable reply."""

    def __init__(self, message: str, *, context: str = "") -> None:
        super().__init__(message)
        self.context = context


class UpstreamTimeout(UpstreamError):
    def __init__(self, context: str, timeout_seconds: float) -> None:
        super().__init__(
            f"Request timed out after {timeout_seconds:g}s for {context}",
            context=context,
        )
        self.timeout_seconds = timeout_seconds


class UpstreamMalformedResponse(UpstreamError):
    def __init__(self, context: str, reason: str) -> None:
        super().__init__(f"Invalid response for {context}: {reason}", context=context)
        self.reason = reason
