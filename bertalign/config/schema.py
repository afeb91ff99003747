# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schemas for bertalign.

Each config section is a frozen pydantic model:
  - frozen=True: no mutation after construction, so one config object can be
    shared by every annotate call on every thread
  - extra="forbid": unknown keys fail immediately
  - validate_default=True: defaults get type-checked too

The embeddings section replaces the long list of per-option setters an
annotator would otherwise carry: it is validated once, then passed around.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class GlobalConfig(BaseModel):
    """Cross-cutting settings: identity, reproducibility and logging."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(
        description="Schema version for compatibility tracking, e.g. '1.0.0'"
    )
    project_name: str = Field(
        default="bertalign", description="Human-readable project identifier"
    )
    seed: int = Field(
        default=42,
        ge=0,
        description="Seed for random and torch, so a stochastic model behaves deterministically",
    )
    log_level: str = Field(
        default="INFO",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for file-based log output",
    )


class EmbeddingsConfig(BaseModel):
    """
    Everything the tokenize/pack pipeline needs.

    The defaults match the reference BERT annotator: uncased, 256 ids per
    sequence, five sentences per model call, 768-wide vectors.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    case_sensitive: bool = Field(
        default=False,
        description="When false, text is lowercased and accents are stripped (NFD) before lookup",
    )
    max_sequence_length: int = Field(
        default=256,
        ge=2,
        description="Upper bound on ids per sequence, [CLS] and [SEP] included",
    )
    batch_size: int = Field(
        default=5,
        ge=1,
        description="Sequences handed to the embedding model per call",
    )
    embedding_dimension: int = Field(
        default=768,
        ge=1,
        description="Width of the model's vectors; reported as metadata, never enforced",
    )
    max_input_chars_per_word: int = Field(
        default=200,
        ge=1,
        description="Words longer than this map straight to the unknown token",
    )
    cls_token: str = Field(default="[CLS]", min_length=1, description="Sequence start sentinel")
    sep_token: str = Field(default="[SEP]", min_length=1, description="Sequence end sentinel")
    unk_token: str = Field(default="[UNK]", min_length=1, description="Unknown-word fallback token")
    continuation_prefix: str = Field(
        default="##",
        min_length=1,
        description="Prefix marking a subword that continues the previous one",
    )
    vocab_file: Optional[str] = Field(
        default=None,
        description="Path to a vocab.txt; may also be supplied directly to create_context",
    )

    @model_validator(mode="after")
    def _sentinels_are_distinct(self) -> "EmbeddingsConfig":
        special = [self.cls_token, self.sep_token, self.unk_token]
        if len(set(special)) != len(special):
            raise ValueError(
                f"cls_token, sep_token and unk_token must differ, got {special}"
            )
        return self


class BertAlignConfig(BaseModel):
    """
    Top-level config container.

    A YAML file always has a `global:` section. The `embeddings:` section is
    optional; commands that need it fall back to EmbeddingsConfig defaults.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    global_config: GlobalConfig = Field(alias="global")
    embeddings: Optional[EmbeddingsConfig] = Field(default=None)
