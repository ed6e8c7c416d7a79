from pathlib import Path

import pytest

from doc_expert.cli import build_parser, main


def test_missing_credential_exits_with_error(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)

    assert main(["--model", "some-model", "serve"]) == 1


def test_parser_accepts_server_flags() -> None:
    args = build_parser().parse_args(["--model", "m", "--max-tokens", "200", "setup"])

    assert args.model == "m"
    assert args.max_tokens == 200
    assert args.command == "setup"
