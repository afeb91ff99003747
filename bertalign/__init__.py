# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
bertalign: WordPiece input preparation and output alignment for BERT-style
embedding models.

The pipeline, leaves first:
  Vocabulary → BasicTokenizer → WordpieceEncoder → SequenceBuilder
  → (external embedding model) → ResultPacker

Most callers only need `create_context` and `annotate`.
"""

from bertalign.annotation.models import (
    Annotation,
    Sentence,
    Token,
    TokenizedSentence,
    WordpieceTokenizedSentence,
    WordpieceUnit,
)
from bertalign.embeddings.annotator.core import (
    EmbeddingsContext,
    annotate,
    create_context,
    describe,
    load_from_directory,
    tokenize,
)
from bertalign.tokenizer.vocab.core import Vocabulary

__version__ = "0.1.0"

__all__ = [
    "Annotation",
    "EmbeddingsContext",
    "Sentence",
    "Token",
    "TokenizedSentence",
    "Vocabulary",
    "WordpieceTokenizedSentence",
    "WordpieceUnit",
    "__version__",
    "annotate",
    "create_context",
    "describe",
    "load_from_directory",
    "tokenize",
]
