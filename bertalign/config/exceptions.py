# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Configuration errors.

Kept apart from the loader so the CLI and the annotator can catch
configuration failures without importing pydantic or YAML machinery.
"""


class ConfigError(Exception):
    """Base for all configuration errors, including a bad vocabulary."""


class ConfigLoadError(ConfigError):
    """A config file or model directory cannot be read from disk or parsed."""


class ConfigValidationError(ConfigError):
    """
    A config file parses fine but fails schema validation: missing required
    fields, type mismatches, out-of-range values or unknown keys.
    """
