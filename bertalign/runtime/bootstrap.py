# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Runtime bootstrap.

Runs once at the start of every CLI command, before any vocabulary or model
is touched:
  1. Validate the interpreter
  2. Seed random and torch, so a model with dropout or sampling left on
     still gives repeatable vectors
  3. Apply the configured level to every bertalign logger, then log
     system info
"""

import os
import random
from pathlib import Path

import torch

from bertalign.config.schema import GlobalConfig
from bertalign.logging.logger import get_logger, set_package_log_level
from bertalign.runtime.environment import check_minimum_python, get_system_info


def set_deterministic_seed(seed: int) -> None:
    """Seed Python's random module, PYTHONHASHSEED and torch (CPU and CUDA)."""
    random.seed(seed)
    os.environ["PYTHONHASHSEED"] = str(seed)

    torch.manual_seed(seed)
    if torch.cuda.is_available():
        torch.cuda.manual_seed_all(seed)
        torch.backends.cudnn.deterministic = True  # type: ignore[attr-defined]
        torch.backends.cudnn.benchmark = False  # type: ignore[attr-defined]


def bootstrap(config: GlobalConfig) -> None:
    """Put the process into a known state before a command does real work."""
    check_minimum_python()
    set_deterministic_seed(config.seed)

    set_package_log_level(config.log_level)
    log_file = Path(config.log_file) if config.log_file is not None else None
    logger = get_logger("bertalign.runtime", log_level=config.log_level, log_file=log_file)

    system_info = get_system_info()
    logger.info(
        "bertalign bootstrap complete",
        extra={
            "project": config.project_name,
            "seed": config.seed,
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "torch_version": system_info.torch_version,
        },
    )
