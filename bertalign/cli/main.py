# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for bertalign.

Usage:
    bertalign tokenize --vocab vocab.txt --text "Hello world"
    bertalign tokenize --config configs/embeddings.yaml --input-file doc.txt --output report.json
    bertalign vocab --vocab vocab.txt
    bertalign info

The global options (--config, --log-level) are inherited by every
subcommand through argparse's parent parser mechanism.
"""

import argparse
import sys

from bertalign.cli.commands import handle_info, handle_tokenize, handle_vocab
from bertalign.cli.exit_codes import USER_ERROR


def _build_global_parser() -> argparse.ArgumentParser:
    """
    Parent parser with the global options. add_help=False so its help text
    doesn't collide with the subcommand parsers.
    """
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file.",
    )
    parent.add_argument(
        "--log-level",
        type=str,
        default=None,
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging verbosity level (overrides global.log_level).",
    )
    return parent


def _build_vocab_parser() -> argparse.ArgumentParser:
    """Options shared by the commands that read a vocabulary."""
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument(
        "--vocab",
        type=str,
        default=None,
        help="Path to vocab.txt (overrides embeddings.vocab_file).",
    )
    return parser


def _register_subcommands(
    subparsers: argparse._SubParsersAction,  # type: ignore[type-arg]
    parent: argparse.ArgumentParser,
) -> None:
    vocab_parent = _build_vocab_parser()

    tokenize_parser = subparsers.add_parser(
        "tokenize",
        parents=[parent, vocab_parent],
        help="Show the wordpieces, id sequences and batches for some text.",
    )
    tokenize_parser.add_argument("--text", type=str, default=None, help="Text to tokenize, one sentence per line.")
    tokenize_parser.add_argument("--input-file", type=str, default=None, dest="input_file", help="Read text from this file.")
    tokenize_parser.add_argument("--output", type=str, default=None, help="Write the full report to this JSON file.")
    tokenize_parser.add_argument(
        "--case-sensitive",
        action="store_true",
        default=False,
        dest="case_sensitive",
        help="Keep case and accents.",
    )
    tokenize_parser.add_argument(
        "--max-sequence-length",
        type=int,
        default=None,
        dest="max_sequence_length",
        help="Override embeddings.max_sequence_length.",
    )
    tokenize_parser.add_argument(
        "--batch-size",
        type=int,
        default=None,
        dest="batch_size",
        help="Override embeddings.batch_size.",
    )
    tokenize_parser.set_defaults(func=handle_tokenize)

    vocab_parser = subparsers.add_parser(
        "vocab",
        parents=[parent, vocab_parent],
        help="Validate a vocabulary and show its special token ids.",
    )
    vocab_parser.set_defaults(func=handle_vocab)

    info_parser = subparsers.add_parser(
        "info",
        parents=[parent],
        help="Display environment and config info.",
    )
    info_parser.set_defaults(func=handle_info)


def main() -> None:
    """
    Parse the command line, run the chosen handler and exit with its code.
    With no subcommand, print help and exit with USER_ERROR.
    """
    parent = _build_global_parser()

    root_parser = argparse.ArgumentParser(
        prog="bertalign",
        description="bertalign: WordPiece input preparation for BERT embedding models.",
        parents=[parent],
    )
    subparsers = root_parser.add_subparsers(dest="command")
    _register_subcommands(subparsers, parent)

    args = root_parser.parse_args()

    if not hasattr(args, "func") or args.func is None:
        root_parser.print_help()
        sys.exit(USER_ERROR)

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
