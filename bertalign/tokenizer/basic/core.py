# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Basic word-level tokenizer, the step before WordPiece.

Splitting rules (the BERT rules):
  - break on whitespace
  - every punctuation character is its own token ("don't" → don ' t)
  - every CJK ideograph is its own token
  - control characters are dropped

When case sensitivity is off, text is lowercased and accents are stripped.
Accent stripping is Unicode NFD decomposition followed by removal of
combining marks (category Mn), so "Café" becomes "cafe".

The heavy lifting is done by the `tokenizers` library: its BertNormalizer
and BertPreTokenizer run over a PreTokenizedString, which remembers how every
normalized character maps back to the input. Splits are read back in the
*original* referential, so lowercasing or stripping accents never shifts a
token's offsets.
"""

from tokenizers import PreTokenizedString, normalizers, pre_tokenizers

from bertalign.annotation.models import Sentence, Token


class BasicTokenizer:
    """
    Splits a Sentence into word-level Tokens with absolute document offsets.

    Stateless after construction and safe to share across threads.

    Args:
        case_sensitive: Keep case and accents when True.
    """

    def __init__(self, case_sensitive: bool = False) -> None:
        self.case_sensitive = case_sensitive
        self._normalizer = normalizers.BertNormalizer(
            clean_text=True,
            handle_chinese_chars=True,
            strip_accents=not case_sensitive,
            lowercase=not case_sensitive,
        )
        self._pre_tokenizer = pre_tokenizers.BertPreTokenizer()

    def tokenize(self, sentence: Sentence) -> list[Token]:
        """
        Tokenize one sentence.

        Token text is the normalized form (what the vocabulary is looked up
        with); `begin`/`end` always refer to the original characters.
        """
        if not sentence.content:
            return []

        pretokenized = PreTokenizedString(sentence.content)
        pretokenized.normalize(self._normalizer.normalize)
        self._pre_tokenizer.pre_tokenize(pretokenized)

        tokens: list[Token] = []
        for text, (start, stop), _ in pretokenized.get_splits(
            offset_referential="original", offset_type="char"
        ):
            if not text:
                continue
            tokens.append(
                Token(
                    token=text,
                    begin=sentence.begin + start,
                    end=sentence.begin + stop,
                    sentence_index=sentence.index,
                )
            )
        return tokens
