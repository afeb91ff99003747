# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the config loader, the entry point for all config loading.

We test:
  1. Valid YAML loads into a frozen, correct config object
  2. Schema violations raise ConfigValidationError
  3. Broken or missing files raise ConfigLoadError
  4. A relative vocab_file is resolved next to the config file
"""

import textwrap
from pathlib import Path

import pytest

from bertalign.config.exceptions import ConfigError, ConfigLoadError, ConfigValidationError
from bertalign.config.loader import load_config


class TestLoadValidConfig:
    def test_loads_minimal_valid_config(self, tmp_config_file: Path) -> None:
        config = load_config(tmp_config_file)
        assert config.global_config.project_name == "bertalign-test"
        assert config.global_config.seed == 42
        assert config.global_config.config_version == "1.0.0"
        assert config.embeddings is None

    def test_loads_embeddings_section(self, embeddings_config_file: Path) -> None:
        config = load_config(embeddings_config_file)
        assert config.embeddings is not None
        assert config.embeddings.max_sequence_length == 16
        assert config.embeddings.batch_size == 2
        assert config.embeddings.case_sensitive is False

    def test_relative_vocab_file_resolved_against_config_dir(
        self, embeddings_config_file: Path, vocab_file: Path
    ) -> None:
        config = load_config(embeddings_config_file)
        assert config.embeddings is not None
        assert Path(config.embeddings.vocab_file) == vocab_file

    def test_absolute_vocab_file_left_alone(self, tmp_path: Path) -> None:
        absolute = tmp_path / "elsewhere" / "vocab.txt"
        content = textwrap.dedent(f"""\
            global:
              config_version: "1.0.0"
            embeddings:
              vocab_file: "{absolute.as_posix()}"
        """)
        config_file = tmp_path / "abs.yaml"
        config_file.write_text(content, encoding="utf-8")

        config = load_config(config_file)
        assert config.embeddings is not None
        assert Path(config.embeddings.vocab_file) == absolute


class TestLoadInvalidConfig:
    def test_missing_required_field_raises_validation_error(
        self, invalid_config_file: Path
    ) -> None:
        with pytest.raises(ConfigValidationError):
            load_config(invalid_config_file)

    def test_unknown_field_raises_validation_error(self, tmp_path: Path) -> None:
        content = textwrap.dedent("""\
            global:
              config_version: "1.0.0"
            embeddings:
              lowercase: true
        """)
        config_file = tmp_path / "unknown_field.yaml"
        config_file.write_text(content, encoding="utf-8")

        with pytest.raises(ConfigValidationError):
            load_config(config_file)

    def test_bad_value_raises_validation_error(self, tmp_path: Path) -> None:
        content = textwrap.dedent("""\
            global:
              config_version: "1.0.0"
            embeddings:
              batch_size: 0
        """)
        config_file = tmp_path / "bad_value.yaml"
        config_file.write_text(content, encoding="utf-8")

        with pytest.raises(ConfigValidationError):
            load_config(config_file)

    def test_broken_yaml_raises_load_error(self, broken_yaml_file: Path) -> None:
        with pytest.raises(ConfigLoadError):
            load_config(broken_yaml_file)

    def test_non_mapping_raises_load_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / "list.yaml"
        config_file.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigLoadError, match="mapping"):
            load_config(config_file)

    def test_nonexistent_file_raises_load_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError):
            load_config(tmp_path / "does_not_exist.yaml")

    def test_directory_path_raises_load_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError):
            load_config(tmp_path)

    def test_errors_share_a_base_class(self, broken_yaml_file: Path) -> None:
        with pytest.raises(ConfigError):
            load_config(broken_yaml_file)


class TestConfigImmutability:
    def test_cannot_mutate_frozen_config(self, tmp_config_file: Path) -> None:
        config = load_config(tmp_config_file)
        with pytest.raises(Exception):
            config.global_config.seed = 999  # type: ignore[misc]

    def test_cannot_mutate_embeddings(self, embeddings_config_file: Path) -> None:
        config = load_config(embeddings_config_file)
        with pytest.raises(Exception):
            config.embeddings.batch_size = 99  # type: ignore[union-attr,misc]
