# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Config loader: reads YAML from disk and produces a validated, frozen BertAlignConfig.

  1. Read the file
  2. Parse as YAML into a plain dict
  3. Hand the dict to pydantic for schema validation
  4. Return the frozen config object

Any failure stops here with a clear error. There is no fallback to defaults
for a config file that exists but is broken.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from bertalign.config.exceptions import ConfigLoadError, ConfigValidationError
from bertalign.config.schema import BertAlignConfig


def _read_yaml_file(config_path: Path) -> dict[str, Any]:
    """
    Read a YAML file and return the parsed mapping.

    Raises:
        ConfigLoadError: If the file doesn't exist, isn't readable, or isn't a YAML mapping.
    """
    if not config_path.exists():
        raise ConfigLoadError(f"Config file not found: {config_path}")

    if not config_path.is_file():
        raise ConfigLoadError(f"Config path is not a file: {config_path}")

    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except OSError as err:
        raise ConfigLoadError(f"Cannot read config file {config_path}: {err}") from err

    try:
        parsed = yaml.safe_load(raw_text)
    except yaml.YAMLError as err:
        raise ConfigLoadError(f"Invalid YAML in {config_path}: {err}") from err

    if not isinstance(parsed, dict):
        raise ConfigLoadError(
            f"Config file must contain a YAML mapping (dict), got {type(parsed).__name__}"
        )

    return parsed


def load_config(config_path: Path) -> BertAlignConfig:
    """
    Load, validate, and freeze a config file.

    A relative `embeddings.vocab_file` is resolved against the config file's
    directory, so a config and its vocab.txt can travel together.

    Raises:
        ConfigLoadError: File I/O or YAML parse failures.
        ConfigValidationError: Schema violations.
    """
    raw_data = _read_yaml_file(config_path)

    embeddings = raw_data.get("embeddings")
    if isinstance(embeddings, dict) and isinstance(embeddings.get("vocab_file"), str):
        vocab_path = Path(embeddings["vocab_file"])
        if not vocab_path.is_absolute():
            embeddings["vocab_file"] = str(config_path.parent / vocab_path)

    try:
        config = BertAlignConfig.model_validate(raw_data)
    except ValidationError as err:
        raise ConfigValidationError(
            f"Config validation failed for {config_path}:\n{err}"
        ) from err

    return config
