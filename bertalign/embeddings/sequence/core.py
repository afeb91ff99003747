# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Sequence building and batching.

A sequence is what the model sees for one sentence:

    [CLS] piece piece ... piece [SEP]

with at most `max_length` ids in total. Pieces that don't fit are dropped
from the end of the sentence without any error or warning. Callers that
need every token covered must split long sentences before they get here.

Batches are consecutive groups of sequences in sentence order. The packer
relies on that order to put vectors back where they came from, so nothing
in this module may reorder.
"""

from collections.abc import Sequence
from typing import TypeVar

from bertalign.annotation.models import WordpieceTokenizedSentence

T = TypeVar("T")

# [CLS] and [SEP]
SPECIAL_POSITIONS = 2


def sequence_capacity(max_length: int) -> int:
    """How many subword ids fit between the two sentinels."""
    if max_length < SPECIAL_POSITIONS:
        raise ValueError(f"max_length must be at least {SPECIAL_POSITIONS}, got {max_length}")
    return max_length - SPECIAL_POSITIONS


def build_sequence(
    sentence: WordpieceTokenizedSentence,
    start_id: int,
    end_id: int,
    max_length: int,
) -> list[int]:
    """
    Wrap a sentence's piece ids in the sentinels, truncating to `max_length`.

    Position i + 1 of the result always holds the id of `sentence.units[i]`.
    """
    capacity = sequence_capacity(max_length)
    piece_ids = [unit.piece_id for unit in sentence.units[:capacity]]
    return [start_id, *piece_ids, end_id]


def build_sequences(
    sentences: Sequence[WordpieceTokenizedSentence],
    start_id: int,
    end_id: int,
    max_length: int,
) -> list[list[int]]:
    """build_sequence over every sentence, order preserved."""
    return [build_sequence(s, start_id, end_id, max_length) for s in sentences]


def build_batches(items: Sequence[T], batch_size: int) -> list[list[T]]:
    """
    Group items into consecutive batches of `batch_size`; the last batch
    may be smaller. An empty input gives no batches.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be at least 1, got {batch_size}")
    return [list(items[i:i + batch_size]) for i in range(0, len(items), batch_size)]
