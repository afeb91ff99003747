# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subcommand handlers for the bertalign CLI.

Each handler takes the parsed argparse namespace and returns an exit code.
No print() calls: everything goes through the structured logger, and the
full tokenization report can be written to a JSON file with --output.
"""

import argparse
import logging
from pathlib import Path
from typing import Any, Optional

from bertalign.annotation.models import Sentence, WordpieceTokenizedSentence
from bertalign.cli.exit_codes import CONFIG_ERROR, RUNTIME_ERROR, SUCCESS, USER_ERROR, VALIDATION_ERROR
from bertalign.config.exceptions import ConfigError
from bertalign.config.loader import load_config
from bertalign.config.schema import BertAlignConfig, EmbeddingsConfig
from bertalign.logging.logger import get_logger, set_package_log_level
from bertalign.runtime.bootstrap import bootstrap
from bertalign.tokenizer.exceptions import VocabularyError
from bertalign.tokenizer.vocab.core import Vocabulary


def _load_and_bootstrap(
    args: argparse.Namespace,
    command_name: str,
) -> tuple[int, Optional[BertAlignConfig], logging.Logger]:
    """
    Shared setup: load the config if one was given and run bootstrap.

    Returns (exit_code, config, logger). Anything but SUCCESS means the
    caller should return the code straight away.
    """
    set_package_log_level(args.log_level or "INFO")
    logger = get_logger(f"bertalign.cli.{command_name}")

    config = None
    if args.config is not None:
        try:
            config = load_config(Path(args.config))
        except ConfigError as err:
            logger.error(
                "Configuration error",
                extra={"command": command_name, "error": str(err)},
            )
            return CONFIG_ERROR, None, logger

    if config is not None:
        global_config = config.global_config
        if args.log_level is not None:
            global_config = global_config.model_copy(update={"log_level": args.log_level})
        bootstrap(global_config)
    else:
        logger.debug(
            "No config provided, running with defaults",
            extra={"command": command_name},
        )

    return SUCCESS, config, logger


def _embeddings_config(args: argparse.Namespace, config: Optional[BertAlignConfig]) -> EmbeddingsConfig:
    """The config's embeddings section with command-line overrides applied."""
    embeddings = config.embeddings if config is not None and config.embeddings is not None else EmbeddingsConfig()

    overrides: dict[str, Any] = {}
    if getattr(args, "vocab", None):
        overrides["vocab_file"] = args.vocab
    if getattr(args, "case_sensitive", False):
        overrides["case_sensitive"] = True
    if getattr(args, "max_sequence_length", None) is not None:
        overrides["max_sequence_length"] = args.max_sequence_length
    if getattr(args, "batch_size", None) is not None:
        overrides["batch_size"] = args.batch_size

    if not overrides:
        return embeddings
    # model_copy skips validation, so rebuild to keep the bounds checks.
    return EmbeddingsConfig.model_validate({**embeddings.model_dump(), **overrides})


def _load_vocabulary(embeddings: EmbeddingsConfig) -> Vocabulary:
    if embeddings.vocab_file is None:
        raise VocabularyError("No vocabulary given, use --vocab or set embeddings.vocab_file")
    return Vocabulary.from_file(
        Path(embeddings.vocab_file),
        cls_token=embeddings.cls_token,
        sep_token=embeddings.sep_token,
        unk_token=embeddings.unk_token,
    )


def split_lines(text: str) -> list[Sentence]:
    """One Sentence per non-blank line, with absolute offsets into `text`."""
    sentences: list[Sentence] = []
    offset = 0
    for line in text.splitlines(keepends=True):
        content = line.rstrip("\r\n")
        if content.strip():
            sentences.append(
                Sentence(content=content, begin=offset, end=offset + len(content), index=len(sentences))
            )
        offset += len(line)
    return sentences


def _sentence_report(
    sentence: Sentence,
    tokenized: WordpieceTokenizedSentence,
    sequence: list[int],
) -> dict[str, Any]:
    return {
        "index": sentence.index,
        "begin": sentence.begin,
        "end": sentence.end,
        "tokens": [token.token for token in tokenized.tokens],
        "wordpieces": [unit.wordpiece for unit in tokenized.units],
        "ids": sequence,
    }


def handle_tokenize(args: argparse.Namespace) -> int:
    """Show the subwords, id sequences and batches the model would receive for some text."""
    exit_code, config, logger = _load_and_bootstrap(args, "tokenize")
    if exit_code != SUCCESS:
        return exit_code

    text = args.text or ""
    if args.input_file:
        try:
            text = Path(args.input_file).read_text(encoding="utf-8")
        except OSError as err:
            logger.error("Cannot read input file", extra={"path": args.input_file, "error": str(err)})
            return USER_ERROR

    if not text:
        logger.error("No text provided, use --text or --input-file")
        return USER_ERROR

    try:
        embeddings = _embeddings_config(args, config)
        vocabulary = _load_vocabulary(embeddings)
    except (ConfigError, ValueError) as err:
        logger.error("Configuration error", extra={"command": "tokenize", "error": str(err)})
        return CONFIG_ERROR

    try:
        from bertalign.embeddings.annotator.core import tokenize_sentences
        from bertalign.embeddings.sequence.core import build_batches, build_sequences
        from bertalign.tokenizer.basic.core import BasicTokenizer
        from bertalign.tokenizer.wordpiece.core import WordpieceEncoder
        from bertalign.utils.filesystem import write_json

        sentences = split_lines(text)
        tokenized = tokenize_sentences(
            BasicTokenizer(case_sensitive=embeddings.case_sensitive),
            WordpieceEncoder(
                vocabulary,
                max_input_chars_per_word=embeddings.max_input_chars_per_word,
                continuation_prefix=embeddings.continuation_prefix,
            ),
            sentences,
        )
        sequences = build_sequences(
            tokenized,
            start_id=vocabulary.cls_id,
            end_id=vocabulary.sep_id,
            max_length=embeddings.max_sequence_length,
        )
        batches = build_batches([s.index for s in sentences], embeddings.batch_size)

        report = {
            "sentences": [
                _sentence_report(sentence, pieces, sequence)
                for sentence, pieces, sequence in zip(sentences, tokenized, sequences)
            ],
            "batches": batches,
        }

        if args.output:
            write_json(Path(args.output), report)

        logger.info(
            "Tokenization complete",
            extra={
                "sentence_count": len(sentences),
                "batch_count": len(batches),
                "wordpiece_count": sum(len(pieces.units) for pieces in tokenized),
                "output": args.output,
            },
        )
        return SUCCESS

    except Exception as err:
        logger.error("Tokenization failed", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR


def handle_vocab(args: argparse.Namespace) -> int:
    """Validate a vocabulary file and log its size, special ids and fingerprint."""
    exit_code, config, logger = _load_and_bootstrap(args, "vocab")
    if exit_code != SUCCESS:
        return exit_code

    try:
        embeddings = _embeddings_config(args, config)
        vocabulary = _load_vocabulary(embeddings)
    except VocabularyError as err:
        logger.error("Vocabulary rejected", extra={"error": str(err)})
        return VALIDATION_ERROR
    except (ConfigError, ValueError) as err:
        logger.error("Configuration error", extra={"command": "vocab", "error": str(err)})
        return CONFIG_ERROR

    from bertalign.utils.hashing import compute_sha256

    logger.info(
        "Vocabulary info",
        extra={
            "path": embeddings.vocab_file,
            "size": len(vocabulary),
            "cls_id": vocabulary.cls_id,
            "sep_id": vocabulary.sep_id,
            "unk_id": vocabulary.unk_id,
            "sha256": compute_sha256(Path(str(embeddings.vocab_file))),
        },
    )
    return SUCCESS


def handle_info(args: argparse.Namespace) -> int:
    """Display environment and configuration information."""
    set_package_log_level(args.log_level or "INFO")
    logger = get_logger("bertalign.cli.info")

    from bertalign import __version__
    from bertalign.runtime.environment import get_system_info

    system_info = get_system_info()

    logger.info(
        "System information",
        extra={
            "bertalign_version": __version__,
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "architecture": system_info.architecture,
            "hostname": system_info.hostname,
            "torch_version": system_info.torch_version,
            "tokenizers_version": system_info.tokenizers_version,
            "config": args.config,
        },
    )
    return SUCCESS
