"""Command line entry point: `doc-expert serve` and `doc-expert setup`."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from doc_expert.config import ExpertConfig
from doc_expert.errors import ConfigurationMissing
from doc_expert.obs.tracing import configure_logging
from doc_expert.scaffold import run_setup
from doc_expert.server import serve
from doc_expert.service import ExpertService

logger = logging.getLogger("doc_expert")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="doc-expert",
        description="Documentation expert MCP server",
    )
    parser.add_argument("--model", default=None, help="Generation model identifier")
    parser.add_argument("--max-tokens", type=int, default=None, help="Maximum output tokens")
    parser.add_argument("--docs-dir", type=Path, default=None, help="Documentation directory")
    parser.add_argument("--prompts-dir", type=Path, default=None, help="Prompt fragments directory")
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Override log level",
    )
    subcommands = parser.add_subparsers(dest="command")
    subcommands.add_parser("serve", help="Run the MCP server on stdio (default)")
    setup = subcommands.add_parser("setup", help="Create docs/ and prompts/ and analyze the corpus")
    setup.add_argument("--base-dir", type=Path, default=Path.cwd(), help="Project directory")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level or "INFO")

    overrides = {
        "model": args.model,
        "max_tokens": args.max_tokens,
        "docs_dir": args.docs_dir,
        "prompts_dir": args.prompts_dir,
    }
    if args.command == "setup":
        overrides["docs_dir"] = overrides["docs_dir"] or args.base_dir / "docs"
        overrides["prompts_dir"] = overrides["prompts_dir"] or args.base_dir / "prompts"

    try:
        config = ExpertConfig.from_env(**overrides)
    except ConfigurationMissing as exc:
        logger.error("Error: %s", exc)
        return 1
    if args.log_level is None:
        configure_logging(config.log_level)

    if args.command == "setup":
        try:
            description = run_setup(args.base_dir, lambda: ExpertService.from_config(config))
        except RuntimeError as exc:
            logger.error("Setup failed: %s", exc)
            return 1
        logger.info("Setup complete. Service description: %s", description)
        return 0

    logger.info("Starting Expert MCP Server...")
    service = ExpertService.from_config(config)
    asyncio.run(serve(service))
    return 0


if __name__ == "__main__":
    sys.exit(main())
