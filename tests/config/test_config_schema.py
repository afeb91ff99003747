# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Schema-level validation tests.

Boundary values and constraint enforcement on the pydantic models.
"""

import pytest
from pydantic import ValidationError

from bertalign.config.schema import BertAlignConfig, EmbeddingsConfig, GlobalConfig


class TestGlobalConfigSchema:
    def test_seed_must_be_non_negative(self) -> None:
        with pytest.raises(ValidationError):
            GlobalConfig(config_version="1.0.0", seed=-1)

    def test_seed_zero_is_valid(self) -> None:
        config = GlobalConfig(config_version="1.0.0", seed=0)
        assert config.seed == 0

    def test_defaults(self) -> None:
        config = GlobalConfig(config_version="1.0.0")
        assert config.log_level == "INFO"
        assert config.project_name == "bertalign"
        assert config.log_file is None

    def test_config_version_is_required(self) -> None:
        with pytest.raises(ValidationError):
            GlobalConfig()  # type: ignore[call-arg]


class TestEmbeddingsConfigSchema:
    def test_defaults(self) -> None:
        config = EmbeddingsConfig()
        assert config.case_sensitive is False
        assert config.max_sequence_length == 256
        assert config.batch_size == 5
        assert config.embedding_dimension == 768
        assert config.max_input_chars_per_word == 200
        assert (config.cls_token, config.sep_token, config.unk_token) == ("[CLS]", "[SEP]", "[UNK]")
        assert config.continuation_prefix == "##"
        assert config.vocab_file is None

    def test_sequence_must_fit_both_sentinels(self) -> None:
        with pytest.raises(ValidationError):
            EmbeddingsConfig(max_sequence_length=1)
        assert EmbeddingsConfig(max_sequence_length=2).max_sequence_length == 2

    @pytest.mark.parametrize("field", ["batch_size", "embedding_dimension", "max_input_chars_per_word"])
    def test_positive_fields(self, field: str) -> None:
        with pytest.raises(ValidationError):
            EmbeddingsConfig(**{field: 0})

    def test_empty_special_token_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EmbeddingsConfig(unk_token="")

    def test_special_tokens_must_differ(self) -> None:
        with pytest.raises(ValidationError, match="must differ"):
            EmbeddingsConfig(cls_token="[SEP]")

    def test_unknown_field_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EmbeddingsConfig(lowercase=True)  # type: ignore[call-arg]

    def test_frozen(self) -> None:
        config = EmbeddingsConfig()
        with pytest.raises(ValidationError):
            config.batch_size = 10  # type: ignore[misc]


class TestBertAlignConfigSchema:
    def test_requires_global_section(self) -> None:
        with pytest.raises(ValidationError):
            BertAlignConfig()  # type: ignore[call-arg]

    def test_embeddings_section_is_optional(self) -> None:
        config = BertAlignConfig.model_validate({"global": {"config_version": "1.0.0"}})
        assert config.embeddings is None

    def test_rejects_top_level_unknown_fields(self) -> None:
        with pytest.raises(ValidationError):
            BertAlignConfig.model_validate({
                "global": {"config_version": "1.0.0"},
                "unknown_section": {"something": True},
            })
