# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Data models shared by the tokenizer and embeddings subsystems.

All of these are frozen dataclasses. Offsets are absolute character positions
in the source document and `end` is exclusive, so `document[begin:end]` gives
back the covered text.

Apart from Annotation, every type here lives only for the duration of one
annotate call.
"""

from collections.abc import Sequence
from dataclasses import dataclass

# Opaque to this package: whatever the embedding model hands back per position.
EmbeddingVector = Sequence[float]


@dataclass(frozen=True)
class Sentence:
    """A span of raw text and its position among the document's sentences."""

    content: str
    begin: int
    end: int
    index: int


@dataclass(frozen=True)
class Token:
    """A word-level token, either from an upstream tokenizer or from BasicTokenizer."""

    token: str
    begin: int
    end: int
    sentence_index: int


@dataclass(frozen=True)
class TokenizedSentence:
    """The upstream tokens of one sentence, in order."""

    tokens: tuple[Token, ...]
    sentence_index: int


@dataclass(frozen=True)
class WordpieceUnit:
    """
    One subword and the word-level token it came from.

    `token_index` points into the owning WordpieceTokenizedSentence's
    `tokens`. `begin`/`end` are copied from that token so the packer can
    line subwords up with upstream tokens without a second lookup.
    """

    wordpiece: str
    piece_id: int
    token_index: int
    is_word_start: bool
    begin: int
    end: int


@dataclass(frozen=True)
class WordpieceTokenizedSentence:
    """
    Subwords of one sentence, plus the basic tokens they were split from.

    Which sentence this is follows from its position in the enclosing list.
    """

    units: tuple[WordpieceUnit, ...]
    tokens: tuple[Token, ...] = ()


@dataclass(frozen=True)
class Annotation:
    """
    Per-token embedding result.

    `token`, `begin` and `end` are the upstream token's own text span. The
    remaining metadata describes the subword whose vector was selected,
    which is always the first subword of its word.
    """

    token: str
    begin: int
    end: int
    sentence_index: int
    embedding: EmbeddingVector
    wordpiece: str
    piece_id: int
