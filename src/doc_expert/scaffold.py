"""Create the docs/prompts layout and persist the service description."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

from doc_expert.ingest.store import (
    QUERY_METADATA_FILE,
    SERVICE_DESCRIPTION_FILE,
    SYSTEM_PROMPT_FILE,
    TOOL_METADATA_FILE,
)
from doc_expert.service import ExpertService

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = (
    "You are an API expert and expert at analyzing documentation and generating accurate "
    "queries and responses based on the provided documentation and context. When asked to "
    "generate a query, return ONLY the query with no additional explanation. When asked about "
    "documentation, provide clear, concise responses that take into account both the "
    "documentation and any additional context provided. Always ensure your responses align "
    "with the intended use cases and audience specified in the context."
)

DEFAULT_TOOL_METADATA = """# Additional context about the API/Service for tool descriptions
# Add information that helps describe what this service is and how it should be used
# For example:
# - The intended audience (e.g., "This API is designed for enterprise developers")
# - Primary use cases (e.g., "Commonly used in IoT deployments")
# - Service category (e.g., "Part of our data processing suite")
# - Integration points (e.g., "Core component of our ML pipeline")

# Remove these example comments and add your tool description metadata here"""

DEFAULT_QUERY_METADATA = """# Additional context for query generation and documentation responses
# Add information that helps generate better queries and documentation responses
# For example:
# - Authentication requirements (e.g., "All queries require Bearer token")
# - Common query patterns (e.g., "Queries should include pagination parameters")
# - Rate limiting details (e.g., "Max 100 requests per minute")
# - Required headers (e.g., "Content-Type must be application/json")
# - Response formats (e.g., "All responses are in JSON format")
# - Error handling (e.g., "Include error handling for 429 rate limit responses")

# Remove these example comments and add your query metadata here"""


def scaffold_layout(base_dir: Path) -> list[Path]:
    """Create `docs/`, `prompts/` and default prompt files that do not exist yet.

    Returns the files that were written.
    """

    for name in ("docs", "prompts"):
        directory = base_dir / name
        if not directory.exists():
            logger.info("Creating directory: %s", directory)
            directory.mkdir(parents=True)

    defaults = {
        SYSTEM_PROMPT_FILE: DEFAULT_SYSTEM_PROMPT,
        TOOL_METADATA_FILE: DEFAULT_TOOL_METADATA,
        QUERY_METADATA_FILE: DEFAULT_QUERY_METADATA,
    }
    created: list[Path] = []
    for filename, content in defaults.items():
        path = base_dir / "prompts" / filename
        if path.exists():
            continue
        logger.info("Creating file: %s", path)
        path.write_text(content, encoding="utf-8")
        created.append(path)
    return created


def run_setup(base_dir: Path, service_factory: Callable[[], ExpertService]) -> str:
    """Scaffold the layout, analyze the corpus and save the description.

    Raises:
        RuntimeError: the description could not be generated.
    """

    scaffold_layout(base_dir)
    service = service_factory()
    logger.info("Analyzing documentation...")
    description = asyncio.run(service.descriptions.ensure())
    if not description:
        raise RuntimeError("Failed to generate service description")

    path = base_dir / "prompts" / SERVICE_DESCRIPTION_FILE
    logger.info("Saving service description to: %s", path)
    path.write_text(description, encoding="utf-8")
    return description
