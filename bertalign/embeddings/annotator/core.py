# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The annotator: one fixed pipeline from sentences to per-token embeddings.

    (sentences, tokens, context) → annotations

    sentences ─ BasicTokenizer ─ WordpieceEncoder ─ build_sequence
              ─ build_batches ─ model.embed ─ pack → annotations

Everything the pipeline needs lives in an EmbeddingsContext: the frozen
config, the vocabulary, the tokenizers built from them and the embedding
model. A context is built once per loaded model and passed into every call.
It holds no mutable state, so calls can run on as many threads as the
model allows, with no locking here.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from bertalign.annotation.models import (
    Annotation,
    EmbeddingVector,
    Sentence,
    TokenizedSentence,
    WordpieceTokenizedSentence,
)
from bertalign.config.exceptions import ConfigLoadError
from bertalign.config.schema import EmbeddingsConfig
from bertalign.embeddings.model.core import EmbeddingModel
from bertalign.embeddings.packer.core import collect_batch_vectors, pack
from bertalign.embeddings.sequence.core import build_batches, build_sequences
from bertalign.logging.logger import get_logger
from bertalign.tokenizer.basic.core import BasicTokenizer
from bertalign.tokenizer.exceptions import VocabularyError
from bertalign.tokenizer.vocab.core import VOCAB_FILE_NAME, Vocabulary
from bertalign.tokenizer.wordpiece.core import WordpieceEncoder

logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True)
class EmbeddingsContext:
    """Immutable bundle shared by every annotate call on one loaded model."""

    config: EmbeddingsConfig
    vocabulary: Vocabulary
    model: EmbeddingModel
    basic_tokenizer: BasicTokenizer
    encoder: WordpieceEncoder


def create_context(
    model: EmbeddingModel,
    config: Optional[EmbeddingsConfig] = None,
    vocabulary: Optional[Vocabulary] = None,
) -> EmbeddingsContext:
    """
    Build the context for one loaded model.

    The vocabulary is taken as given, or else loaded from `config.vocab_file`.
    Either way its special tokens are checked here, so a broken vocabulary
    fails before the first annotate call.

    Raises:
        VocabularyError: No vocabulary available, or a special token is missing.
    """
    config = config if config is not None else EmbeddingsConfig()

    if vocabulary is None:
        if config.vocab_file is None:
            raise VocabularyError("No vocabulary given and no vocab_file configured")
        vocabulary = Vocabulary.from_file(
            Path(config.vocab_file),
            cls_token=config.cls_token,
            sep_token=config.sep_token,
            unk_token=config.unk_token,
        )
    elif (vocabulary.cls_token, vocabulary.sep_token, vocabulary.unk_token) != (
        config.cls_token,
        config.sep_token,
        config.unk_token,
    ):
        vocabulary = Vocabulary(
            vocabulary.as_dict(),
            cls_token=config.cls_token,
            sep_token=config.sep_token,
            unk_token=config.unk_token,
        )

    return EmbeddingsContext(
        config=config,
        vocabulary=vocabulary,
        model=model,
        basic_tokenizer=BasicTokenizer(case_sensitive=config.case_sensitive),
        encoder=WordpieceEncoder(
            vocabulary,
            max_input_chars_per_word=config.max_input_chars_per_word,
            continuation_prefix=config.continuation_prefix,
        ),
    )


def load_from_directory(
    folder: Path,
    model: EmbeddingModel,
    config: Optional[EmbeddingsConfig] = None,
) -> EmbeddingsContext:
    """
    Build a context from an exported model directory holding vocab.txt.

    The model itself is passed in already loaded; only the vocabulary is
    read from the directory.

    Raises:
        ConfigLoadError: The folder is missing, is not a directory, or has no vocab.txt.
        VocabularyError: vocab.txt lacks a special token.
    """
    if not folder.exists():
        raise ConfigLoadError(f"Model folder {folder} not found")
    if not folder.is_dir():
        raise ConfigLoadError(f"Model path {folder} is not a folder")
    vocab_path = folder / VOCAB_FILE_NAME
    if not vocab_path.is_file():
        raise ConfigLoadError(f"Vocabulary file {VOCAB_FILE_NAME} not found in folder {folder}")

    config = config if config is not None else EmbeddingsConfig()
    config = config.model_copy(update={"vocab_file": str(vocab_path)})
    return create_context(model, config=config)


def tokenize_sentences(
    basic_tokenizer: BasicTokenizer,
    encoder: WordpieceEncoder,
    sentences: Sequence[Sentence],
) -> list[WordpieceTokenizedSentence]:
    """Re-tokenize every sentence with the BERT rules and split it into subwords."""
    tokenized: list[WordpieceTokenizedSentence] = []
    for sentence in sentences:
        tokens = basic_tokenizer.tokenize(sentence)
        units = encoder.encode_tokens(tokens)
        tokenized.append(WordpieceTokenizedSentence(units=tuple(units), tokens=tuple(tokens)))
    return tokenized


def tokenize(
    context: EmbeddingsContext,
    sentences: Sequence[Sentence],
) -> list[WordpieceTokenizedSentence]:
    """tokenize_sentences with the context's tokenizers."""
    return tokenize_sentences(context.basic_tokenizer, context.encoder, sentences)


def _align_tokens(
    sentences: Sequence[Sentence],
    tokenized_sentences: Sequence[TokenizedSentence],
) -> list[TokenizedSentence]:
    """Line the caller's token groups up with `sentences` by sentence index."""
    by_index = {group.sentence_index: group for group in tokenized_sentences}
    return [
        by_index.get(sentence.index, TokenizedSentence(tokens=(), sentence_index=sentence.index))
        for sentence in sentences
    ]


def annotate(
    context: EmbeddingsContext,
    sentences: Sequence[Sentence],
    tokenized_sentences: Sequence[TokenizedSentence],
) -> list[Annotation]:
    """
    Compute one embedding annotation per upstream token.

    Sentences longer than `max_sequence_length` ids are truncated and words
    that can't be segmented become the unknown token; neither raises. Errors
    from the embedding model propagate unchanged.

    Args:
        context: The shared, immutable pipeline context.
        sentences: Sentences of the document, in order.
        tokenized_sentences: The caller's tokens, grouped per sentence.

    Returns:
        Annotations in sentence order, then token order. There are at most
        as many as there are input tokens.
    """
    config = context.config
    wordpiece_sentences = tokenize(context, sentences)
    sequences = build_sequences(
        wordpiece_sentences,
        start_id=context.vocabulary.cls_id,
        end_id=context.vocabulary.sep_id,
        max_length=config.max_sequence_length,
    )
    batches = build_batches(sequences, config.batch_size)

    sequence_vectors: list[list[EmbeddingVector]] = []
    for batch in batches:
        outputs = context.model.embed(batch)
        sequence_vectors.extend(collect_batch_vectors(outputs, batch))

    logger.debug(
        "Annotate call finished",
        extra={"sentences": len(sentences), "batches": len(batches)},
    )

    return pack(wordpiece_sentences, sequence_vectors, _align_tokens(sentences, tokenized_sentences))


def describe(context: EmbeddingsContext) -> dict[str, Any]:
    """Metadata describing what the annotations of this context look like."""
    config = context.config
    vocabulary = context.vocabulary
    return {
        "dimension": config.embedding_dimension,
        "case_sensitive": config.case_sensitive,
        "max_sequence_length": config.max_sequence_length,
        "batch_size": config.batch_size,
        "vocab_size": len(vocabulary),
        "cls_id": vocabulary.cls_id,
        "sep_id": vocabulary.sep_id,
        "unk_id": vocabulary.unk_id,
    }
