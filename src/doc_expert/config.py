"""Configuration models for the expert service."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from doc_expert.errors import ConfigurationMissing

DEFAULT_MODEL = "claude-sonnet-4-5"


class ExpertConfig(BaseModel):
    """Runtime settings for the generation backend and corpus locations."""

    api_key: str = Field(min_length=1, repr=False)
    model: str = Field(default=DEFAULT_MODEL, min_length=1)
    max_tokens: int = Field(default=1500, ge=1)
    docs_dir: Path = Field(default_factory=lambda: Path.cwd() / "docs")
    prompts_dir: Path = Field(default_factory=lambda: Path.cwd() / "prompts")
    timeout_seconds: float = Field(default=30.0, gt=0.0)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, **overrides: Any) -> "ExpertConfig":
        """Build config from the environment (and `.env`), then apply overrides.

        Overrides whose value is ``None`` are ignored so CLI flags that were not
        passed fall through to the environment or the defaults.

        Raises:
            ConfigurationMissing: when ``ANTHROPIC_API_KEY`` is absent.
        """

        load_dotenv()
        api_key = os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            raise ConfigurationMissing("ANTHROPIC_API_KEY")

        values: dict[str, Any] = {"api_key": api_key}
        env_map = {
            "model": "EXPERT_MODEL",
            "max_tokens": "EXPERT_MAX_TOKENS",
            "docs_dir": "EXPERT_DOCS_DIR",
            "prompts_dir": "EXPERT_PROMPTS_DIR",
            "timeout_seconds": "EXPERT_TIMEOUT_SECONDS",
            "log_level": "EXPERT_LOG_LEVEL",
        }
        for field_name, env_name in env_map.items():
            raw = os.getenv(env_name)
            if raw:
                values[field_name] = raw
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls.model_validate(values)
