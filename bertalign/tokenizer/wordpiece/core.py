# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
WordPiece encoder: greedy longest-match-first subword segmentation.

For a word like "unaffable" and a vocabulary holding "un", "##aff", "##able":

    un | aff | able   →   ["un", "##aff", "##able"]

At each position the longest remaining prefix found in the vocabulary wins.
Every piece after the first is looked up with the continuation prefix ("##")
in front, which is how a decoder knows to glue it to the previous piece.

Two cases collapse the whole word into a single unknown token:
  - the word is longer than `max_input_chars_per_word` characters
  - some position has no matching prefix at all

In the second case the pieces already matched are thrown away too. The word
is never partially encoded.

The segmentation itself is the `tokenizers` WordPiece model; this module
only tags its output with the word-level token each piece came from.
"""

from collections.abc import Sequence

from tokenizers.models import WordPiece

from bertalign.annotation.models import Token, WordpieceUnit
from bertalign.tokenizer.vocab.core import Vocabulary

DEFAULT_MAX_INPUT_CHARS_PER_WORD = 200
DEFAULT_CONTINUATION_PREFIX = "##"


class WordpieceEncoder:
    """
    Segments word-level tokens into vocabulary subwords.

    The WordPiece model is built once from the (immutable) vocabulary and
    only read afterwards, so one encoder can serve every thread.
    """

    def __init__(
        self,
        vocabulary: Vocabulary,
        max_input_chars_per_word: int = DEFAULT_MAX_INPUT_CHARS_PER_WORD,
        continuation_prefix: str = DEFAULT_CONTINUATION_PREFIX,
    ) -> None:
        self.vocabulary = vocabulary
        self.max_input_chars_per_word = max_input_chars_per_word
        self.continuation_prefix = continuation_prefix
        self._model = WordPiece(
            vocabulary.as_dict(),
            unk_token=vocabulary.unk_token,
            max_input_chars_per_word=max_input_chars_per_word,
            continuing_subword_prefix=continuation_prefix,
        )

    def segment(self, word: str) -> list[str]:
        """
        Split one word into subword strings.

        Returns `[unk_token]` when the word is too long or cannot be fully
        covered by vocabulary pieces. An empty word has no pieces.
        """
        if not word:
            return []
        return [piece.value for piece in self._model.tokenize(word)]

    def encode(self, token: Token, token_index: int) -> list[WordpieceUnit]:
        """
        Segment `token` and tag every piece with `token_index` and the
        token's offsets. The first piece is the word start.
        """
        if not token.token:
            return []
        return [
            WordpieceUnit(
                wordpiece=piece.value,
                piece_id=piece.id,
                token_index=token_index,
                is_word_start=position == 0,
                begin=token.begin,
                end=token.end,
            )
            for position, piece in enumerate(self._model.tokenize(token.token))
        ]

    def encode_tokens(self, tokens: Sequence[Token]) -> list[WordpieceUnit]:
        """Encode a sentence's tokens in order, indexing each by its position."""
        units: list[WordpieceUnit] = []
        for index, token in enumerate(tokens):
            units.extend(self.encode(token, index))
        return units
