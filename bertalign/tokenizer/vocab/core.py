# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Vocabulary: the immutable subword → id mapping.

The file format is the usual BERT vocab.txt: one token per line, and the
0-based line number is the token's id. A repeated line overwrites the id of
the earlier one.

A Vocabulary is built once when the model is loaded and then only read, so
one instance can be shared by any number of threads. Construction checks
for the sentinels the pipeline cannot run without.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Optional

from bertalign.logging.logger import get_logger
from bertalign.tokenizer.exceptions import VocabularyError
from bertalign.utils.hashing import compute_sha256

logger: logging.Logger = get_logger(__name__)

VOCAB_FILE_NAME = "vocab.txt"


def read_vocab_file(vocab_path: Path) -> dict[str, int]:
    """
    Read a vocab.txt into a plain dict, preserving file order.

    Raises:
        VocabularyError: If the file is missing or cannot be decoded.
    """
    if not vocab_path.is_file():
        raise VocabularyError(f"Vocabulary file not found: {vocab_path}")

    try:
        with open(vocab_path, "r", encoding="utf-8") as reader:
            lines = reader.readlines()
    except (OSError, UnicodeDecodeError) as err:
        raise VocabularyError(f"Cannot read vocabulary file {vocab_path}: {err}") from err

    vocab: dict[str, int] = {}
    for index, line in enumerate(lines):
        vocab[line.rstrip("\r\n")] = index
    return vocab


class Vocabulary:
    """
    Read-only mapping from subword string to integer id.

    Args:
        entries: token → id mapping. It is copied, so later changes to the
                 caller's dict never leak in.
        cls_token: Sequence start sentinel.
        sep_token: Sequence end sentinel.
        unk_token: Replacement for words that cannot be segmented.

    Raises:
        VocabularyError: If any of the three special tokens is missing.
    """

    __slots__ = ("_entries", "_cls_token", "_sep_token", "_unk_token")

    def __init__(
        self,
        entries: Mapping[str, int],
        cls_token: str = "[CLS]",
        sep_token: str = "[SEP]",
        unk_token: str = "[UNK]",
    ) -> None:
        missing = [tok for tok in (cls_token, sep_token, unk_token) if tok not in entries]
        if missing:
            raise VocabularyError(
                f"Vocabulary is missing required special tokens: {', '.join(missing)}"
            )

        self._entries: Mapping[str, int] = MappingProxyType(dict(entries))
        self._cls_token = cls_token
        self._sep_token = sep_token
        self._unk_token = unk_token

    @classmethod
    def from_tokens(cls, tokens: Iterable[str], **special: str) -> "Vocabulary":
        """Build a vocabulary whose ids are the positions of `tokens`."""
        entries: dict[str, int] = {}
        for index, token in enumerate(tokens):
            entries[token] = index
        return cls(entries, **special)

    @classmethod
    def from_file(
        cls,
        vocab_path: Path,
        cls_token: str = "[CLS]",
        sep_token: str = "[SEP]",
        unk_token: str = "[UNK]",
    ) -> "Vocabulary":
        """Load and validate a vocab.txt."""
        entries = read_vocab_file(vocab_path)
        vocabulary = cls(entries, cls_token=cls_token, sep_token=sep_token, unk_token=unk_token)
        logger.info(
            "Vocabulary loaded",
            extra={
                "path": str(vocab_path),
                "size": len(vocabulary),
                "sha256": compute_sha256(vocab_path),
            },
        )
        return vocabulary

    @property
    def cls_token(self) -> str:
        return self._cls_token

    @property
    def sep_token(self) -> str:
        return self._sep_token

    @property
    def unk_token(self) -> str:
        return self._unk_token

    @property
    def cls_id(self) -> int:
        """Id prepended to every sequence."""
        return self._entries[self._cls_token]

    @property
    def sep_id(self) -> int:
        """Id appended to every sequence."""
        return self._entries[self._sep_token]

    @property
    def unk_id(self) -> int:
        return self._entries[self._unk_token]

    def get(self, token: str, default: Optional[int] = None) -> Optional[int]:
        return self._entries.get(token, default)

    def as_dict(self) -> dict[str, int]:
        """A mutable copy, for handing to libraries that want a plain dict."""
        return dict(self._entries)

    def __contains__(self, token: object) -> bool:
        return token in self._entries

    def __getitem__(self, token: str) -> int:
        return self._entries[token]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"Vocabulary(size={len(self)}, cls={self._cls_token!r}, sep={self._sep_token!r})"
