# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI smoke tests.

CLI tests verify that:
  - commands execute
  - exit codes are correct
  - help text exists

We use subprocess to test the actual CLI entrypoint the way a user would.
This catches issues that unit tests miss, like broken imports or entrypoint
registration.
"""

import json
import subprocess
import sys
from pathlib import Path

import pytest


def _run_cli(*args: str) -> subprocess.CompletedProcess[str]:
    """Run `bertalign` with the given arguments and capture output."""
    return subprocess.run(
        [sys.executable, "-m", "bertalign.cli.main", *args],
        capture_output=True,
        text=True,
        timeout=60,
    )


class TestHelpTexts:
    """Every subcommand must have working --help output."""

    @pytest.mark.parametrize("subcommand", ["tokenize", "vocab", "info"])
    def test_subcommand_help_exits_zero(self, subcommand: str) -> None:
        result = _run_cli(subcommand, "--help")
        assert result.returncode == 0
        assert "usage" in result.stdout.lower()

    def test_root_help_exits_with_user_error(self) -> None:
        """Running bertalign with no args should show help and exit with USER_ERROR (1)."""
        result = _run_cli()
        assert result.returncode == 1


class TestInfo:
    def test_info_runs_without_config(self) -> None:
        result = _run_cli("info")
        assert result.returncode == 0

    def test_log_level_option_is_accepted(self) -> None:
        result = _run_cli("info", "--log-level", "DEBUG")
        assert result.returncode == 0


class TestConfigLoading:
    def test_nonexistent_config_returns_config_error(self) -> None:
        result = _run_cli("vocab", "--config", "/nonexistent/path.yaml")
        assert result.returncode == 2  # CONFIG_ERROR

    def test_vocab_from_config(self, embeddings_config_file: Path) -> None:
        result = _run_cli("vocab", "--config", str(embeddings_config_file))
        assert result.returncode == 0
        assert "Vocabulary info" in result.stdout


class TestTokenize:
    def test_writes_report(self, vocab_file: Path, tmp_path: Path) -> None:
        output = tmp_path / "out" / "report.json"
        result = _run_cli(
            "tokenize",
            "--vocab", str(vocab_file),
            "--text", "Wonderful cats\nthe unable",
            "--batch-size", "1",
            "--output", str(output),
        )
        assert result.returncode == 0, result.stdout + result.stderr

        report = json.loads(output.read_text(encoding="utf-8"))
        first, second = report["sentences"]
        assert first["wordpieces"] == ["wonder", "##ful", "cat", "##s"]
        assert first["ids"] == [0, 5, 6, 8, 9, 1]
        assert second["begin"] == 15
        assert second["ids"] == [0, 7, 3, 4, 1]
        assert report["batches"] == [[0], [1]]

    def test_truncates_to_max_sequence_length(self, vocab_file: Path, tmp_path: Path) -> None:
        output = tmp_path / "report.json"
        result = _run_cli(
            "tokenize",
            "--vocab", str(vocab_file),
            "--text", "wonderful cats",
            "--max-sequence-length", "4",
            "--output", str(output),
        )
        assert result.returncode == 0
        report = json.loads(output.read_text(encoding="utf-8"))
        assert report["sentences"][0]["ids"] == [0, 5, 6, 1]

    def test_no_text_is_user_error(self, vocab_file: Path) -> None:
        result = _run_cli("tokenize", "--vocab", str(vocab_file))
        assert result.returncode == 1

    def test_missing_vocabulary_is_config_error(self) -> None:
        result = _run_cli("tokenize", "--text", "hello")
        assert result.returncode == 2

    def test_invalid_override_is_config_error(self, vocab_file: Path) -> None:
        result = _run_cli("tokenize", "--vocab", str(vocab_file), "--text", "hi", "--batch-size", "0")
        assert result.returncode == 2


class TestVocab:
    def test_valid_vocabulary(self, vocab_file: Path) -> None:
        result = _run_cli("vocab", "--vocab", str(vocab_file))
        assert result.returncode == 0
        entry = json.loads(result.stdout.strip().splitlines()[-1])
        assert entry["size"] == len(vocab_file.read_text(encoding="utf-8").splitlines())
        assert (entry["cls_id"], entry["sep_id"], entry["unk_id"]) == (0, 1, 2)

    def test_missing_sentinel_is_validation_error(self, tmp_path: Path) -> None:
        bad = tmp_path / "vocab.txt"
        bad.write_text("[CLS]\n[UNK]\nhello\n", encoding="utf-8")
        result = _run_cli("vocab", "--vocab", str(bad))
        assert result.returncode == 4  # VALIDATION_ERROR

    def test_log_level_error_silences_info(self, vocab_file: Path) -> None:
        result = _run_cli("vocab", "--vocab", str(vocab_file), "--log-level", "ERROR")
        assert result.returncode == 0
        assert "Vocabulary loaded" not in result.stdout
        assert "Vocabulary info" not in result.stdout

    def test_log_level_flag_overrides_config(self, embeddings_config_file: Path) -> None:
        # The config asks for DEBUG; the flag wins.
        result = _run_cli("vocab", "--config", str(embeddings_config_file), "--log-level", "WARNING")
        assert result.returncode == 0
        assert result.stdout.strip() == ""
