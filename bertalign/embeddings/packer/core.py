# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Result packing: model output back onto the caller's tokens.

The model returns one vector per id. Getting from there to one vector per
original token takes three steps:

  1. Regroup the (sequence, position, vector) triples of a batch per sequence.
  2. Drop the [CLS] and [SEP] positions. What remains lines up 1:1 with the
     sentence's subword units, up to where the sequence was truncated.
  3. For every upstream token, take the vector of the first subword of the
     basic token that starts at the same offset. Vectors of later subwords
     of the same word are discarded.

An upstream token whose first subword was truncated away, or at whose offset
no basic token starts, gets no annotation. Callers must expect fewer
annotations than tokens.
"""

from collections.abc import Iterable, Sequence
from typing import Optional

from bertalign.annotation.models import (
    Annotation,
    EmbeddingVector,
    TokenizedSentence,
    WordpieceTokenizedSentence,
    WordpieceUnit,
)
from bertalign.embeddings.model.core import EmbeddingOutput


class EmbeddingOutputError(ValueError):
    """The embedding model's output does not cover its input position for position."""


def collect_batch_vectors(
    outputs: Iterable[EmbeddingOutput],
    batch: Sequence[Sequence[int]],
) -> list[list[EmbeddingVector]]:
    """
    Regroup a batch's flat model output into one vector list per sequence.

    Raises:
        EmbeddingOutputError: If an index is out of range or a position is
            left without a vector.
    """
    slots: list[list[Optional[EmbeddingVector]]] = [[None] * len(sequence) for sequence in batch]

    for sequence_index, position_index, vector in outputs:
        if not 0 <= sequence_index < len(slots):
            raise EmbeddingOutputError(
                f"Sequence index {sequence_index} outside a batch of {len(slots)}"
            )
        row = slots[sequence_index]
        if not 0 <= position_index < len(row):
            raise EmbeddingOutputError(
                f"Position {position_index} outside sequence {sequence_index} of length {len(row)}"
            )
        row[position_index] = vector

    collected: list[list[EmbeddingVector]] = []
    for sequence_index, row in enumerate(slots):
        missing = [position for position, vector in enumerate(row) if vector is None]
        if missing:
            raise EmbeddingOutputError(
                f"No vector for positions {missing} of sequence {sequence_index}"
            )
        collected.append([vector for vector in row if vector is not None])
    return collected


def strip_sentinels(vectors: Sequence[EmbeddingVector]) -> list[EmbeddingVector]:
    """Drop the [CLS] and [SEP] vectors at both ends."""
    return list(vectors[1:-1])


def pack_sentence(
    sentence: WordpieceTokenizedSentence,
    piece_vectors: Sequence[EmbeddingVector],
    original: TokenizedSentence,
) -> list[Annotation]:
    """
    Build the annotations of one sentence.

    Args:
        sentence: Subword units of the sentence.
        piece_vectors: Vectors of the units, sentinels already stripped.
        original: The caller's tokens for the same sentence.
    """
    word_starts: dict[int, tuple[WordpieceUnit, EmbeddingVector]] = {}
    # zip stops at the end of piece_vectors; units past it were truncated.
    for unit, vector in zip(sentence.units, piece_vectors):
        if unit.is_word_start and unit.begin not in word_starts:
            word_starts[unit.begin] = (unit, vector)

    annotations: list[Annotation] = []
    for token in original.tokens:
        match = word_starts.get(token.begin)
        if match is None:
            continue
        unit, vector = match
        annotations.append(
            Annotation(
                token=token.token,
                begin=token.begin,
                end=token.end,
                sentence_index=original.sentence_index,
                embedding=vector,
                wordpiece=unit.wordpiece,
                piece_id=unit.piece_id,
            )
        )
    return annotations


def pack(
    sentences: Sequence[WordpieceTokenizedSentence],
    sequence_vectors: Sequence[Sequence[EmbeddingVector]],
    originals: Sequence[TokenizedSentence],
) -> list[Annotation]:
    """
    Pack a whole call's output, sentence by sentence, in input order.

    `sequence_vectors[i]` holds the full vectors of sequence i, sentinels
    included; `originals[i]` holds the caller's tokens of sentence i.
    """
    if not len(sentences) == len(sequence_vectors) == len(originals):
        raise ValueError(
            f"Got {len(sentences)} tokenized sentences, {len(sequence_vectors)} vector "
            f"sequences and {len(originals)} token groups"
        )

    annotations: list[Annotation] = []
    for sentence, vectors, original in zip(sentences, sequence_vectors, originals):
        annotations.extend(pack_sentence(sentence, strip_sentinels(vectors), original))
    return annotations
