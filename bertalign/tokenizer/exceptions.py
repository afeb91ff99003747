# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Tokenizer-specific errors."""

from bertalign.config.exceptions import ConfigError


class VocabularyError(ConfigError):
    """
    The vocabulary cannot be used: the file is missing or unreadable, or a
    required sentinel ([CLS], [SEP], [UNK]) is absent.

    Raised at load time, before any annotate call can run.
    """
