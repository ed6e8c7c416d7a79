"""Documentation corpus and prompt fragment loading."""

from __future__ import annotations

import logging
from pathlib import Path

from doc_expert.types import DocumentationEntry, DocumentationSnapshot, PromptFragments

logger = logging.getLogger(__name__)

DOC_EXTENSIONS = (".txt", ".md", ".json")

SYSTEM_PROMPT_FILE = "system-prompt.txt"
TOOL_METADATA_FILE = "tool-metadata.txt"
QUERY_METADATA_FILE = "query-metadata.txt"
SERVICE_DESCRIPTION_FILE = "service-description.txt"


class DocumentationStore:
    """Holds the current documentation snapshot.

    `read()` builds a complete `DocumentationSnapshot` and `publish()` swaps it in
    with a single assignment, so concurrent readers that grabbed `snapshot()` keep a
    consistent view (documentation and prompt fragments from the same cycle).
    """

    def __init__(self, docs_dir: str | Path, prompts_dir: str | Path) -> None:
        self.docs_dir = Path(docs_dir)
        self.prompts_dir = Path(prompts_dir)
        self._snapshot = DocumentationSnapshot()

    def load(self) -> DocumentationSnapshot:
        """Read the corpus and fragments from disk and publish them."""
        return self.publish(self.read())

    def read(self) -> DocumentationSnapshot:
        """Read the corpus and fragments from disk without publishing them."""

        snapshot = DocumentationSnapshot(
            entries=tuple(self._read_documentation()),
            fragments=PromptFragments(
                system_prompt=self._read_fragment(SYSTEM_PROMPT_FILE),
                tool_metadata=self._read_fragment(TOOL_METADATA_FILE),
                query_metadata=self._read_fragment(QUERY_METADATA_FILE),
            ),
        )
        if not snapshot.fragments.system_prompt:
            logger.warning(
                "System prompt could not be loaded. Service may not function as expected."
            )
        if not snapshot.entries:
            logger.warning(
                "No documentation files were loaded. Service may not function as expected."
            )
        return snapshot

    def publish(self, snapshot: DocumentationSnapshot) -> DocumentationSnapshot:
        self._snapshot = snapshot
        return snapshot

    def snapshot(self) -> DocumentationSnapshot:
        return self._snapshot

    def get_all_documentation(self) -> str:
        snapshot = self._snapshot
        if not snapshot.entries:
            logger.debug("No documentation files are currently loaded")
        return snapshot.all_documentation()

    def _read_documentation(self) -> list[DocumentationEntry]:
        try:
            candidates = sorted(
                path
                for path in self.docs_dir.iterdir()
                if _is_documentation_file(path)
            )
        except OSError as exc:
            logger.warning("Failed to read docs directory %s: %s", self.docs_dir, exc)
            return []

        if not candidates:
            logger.info("No valid documentation files found in %s", self.docs_dir)
            return []

        # keyed by file name; a later duplicate replaces the earlier one
        loaded: dict[str, str] = {}
        for path in candidates:
            try:
                loaded[path.name] = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Failed to load documentation file %s: %s", path.name, exc)
                continue
            logger.debug("Loaded documentation from %s", path.name)
        return [DocumentationEntry(name=name, content=content) for name, content in loaded.items()]

    def _read_fragment(self, filename: str) -> str:
        path = self.prompts_dir / filename
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("No %s found in %s; continuing without it", filename, self.prompts_dir)
            return ""
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Failed to load %s: %s", path, exc)
            return ""
        return text.strip()


def _is_documentation_file(path: Path) -> bool:
    if path.name.startswith("."):
        return False
    if path.suffix.lower() not in DOC_EXTENSIONS:
        return False
    return path.is_file()
