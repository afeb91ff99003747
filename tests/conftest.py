# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for bertalign tests.

The vocabulary is tiny on purpose: small enough that every expected id in a
test can be checked by eye against VOCAB_TOKENS.
"""

import textwrap
from collections.abc import Sequence
from pathlib import Path

import pytest

from bertalign.embeddings.model.core import EmbeddingModel, EmbeddingOutput
from bertalign.tokenizer.vocab.core import Vocabulary

VOCAB_TOKENS: list[str] = [
    "[CLS]",    # 0
    "[SEP]",    # 1
    "[UNK]",    # 2
    "un",       # 3
    "##able",   # 4
    "wonder",   # 5
    "##ful",    # 6
    "the",      # 7
    "cat",      # 8
    "##s",      # 9
    "don",      # 10
    "'",        # 11
    "t",        # 12
    "new",      # 13
    "york",     # 14
    "cafe",     # 15
    "我",       # 16
    "爱",       # 17
    "nlp",      # 18
    ".",        # 19
    ",",        # 20
    "hello",    # 21
    "world",    # 22
    "[PAD]",    # 23
]


class RecordingModel(EmbeddingModel):
    """
    Deterministic stand-in for a real encoder.

    The vector at each position is [piece id, position], which depends on
    nothing but the sequence itself, so results can be compared across
    batch sizes. Every batch it receives is recorded.
    """

    def __init__(self) -> None:
        self.batches: list[list[list[int]]] = []

    def embed(self, batch: Sequence[Sequence[int]]) -> list[EmbeddingOutput]:
        self.batches.append([list(sequence) for sequence in batch])
        outputs: list[EmbeddingOutput] = []
        for sequence_index, sequence in enumerate(batch):
            for position, piece_id in enumerate(sequence):
                outputs.append((sequence_index, position, [float(piece_id), float(position)]))
        return outputs


@pytest.fixture()
def vocab_file(tmp_path: Path) -> Path:
    """VOCAB_TOKENS written as a vocab.txt, one token per line."""
    path = tmp_path / "vocab.txt"
    path.write_text("\n".join(VOCAB_TOKENS) + "\n", encoding="utf-8")
    return path


@pytest.fixture()
def vocabulary() -> Vocabulary:
    return Vocabulary.from_tokens(VOCAB_TOKENS)


@pytest.fixture()
def recording_model() -> RecordingModel:
    return RecordingModel()


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """
    The smallest config that passes schema validation. Tests that need
    specific values write their own files.
    """
    config_content = textwrap.dedent("""\
        global:
          config_version: "1.0.0"
          project_name: "bertalign-test"
          seed: 42
          log_level: "DEBUG"
    """)
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def embeddings_config_file(tmp_path: Path, vocab_file: Path) -> Path:
    """A config with an embeddings section pointing at the test vocabulary."""
    config_content = textwrap.dedent("""\
        global:
          config_version: "1.0.0"
          log_level: "DEBUG"
        embeddings:
          max_sequence_length: 16
          batch_size: 2
          vocab_file: "vocab.txt"
    """)
    config_file = tmp_path / "embeddings.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def invalid_config_file(tmp_path: Path) -> Path:
    """Valid YAML that fails schema validation (missing config_version)."""
    config_content = textwrap.dedent("""\
        global:
          project_name: "bertalign-test"
          seed: 42
    """)
    config_file = tmp_path / "invalid_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    """A file that isn't valid YAML at all."""
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return config_file
