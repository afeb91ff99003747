# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Atomic file output.

The CLI writes tokenization reports with these helpers: the content goes to
a temp file in the target's directory and is then renamed over the target.
Rename within one filesystem is atomic on POSIX, so a crash leaves either
the old file or the new one, never half of it.
"""

import json
import tempfile
from pathlib import Path
from typing import Any


def atomic_write(target_path: Path, content: str, encoding: str = "utf-8") -> None:
    """
    Write text to `target_path` atomically, creating parent directories.

    Raises:
        OSError: If the write or rename fails.
    """
    target_path.parent.mkdir(parents=True, exist_ok=True)

    # delete=False: the file has to outlive close() so it can be renamed.
    temp_fd = tempfile.NamedTemporaryFile(
        mode="w",
        encoding=encoding,
        dir=str(target_path.parent),
        prefix=".bertalign_tmp_",
        suffix=".tmp",
        delete=False,
    )
    temp_path = Path(temp_fd.name)

    try:
        temp_fd.write(content)
        temp_fd.flush()
        temp_fd.close()
        temp_path.replace(target_path)
    except BaseException:
        temp_fd.close()
        if temp_path.exists():
            temp_path.unlink()
        raise


def write_json(target_path: Path, payload: Any) -> None:
    """Serialize `payload` as indented, key-sorted UTF-8 JSON and write it atomically."""
    content = json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False) + "\n"
    atomic_write(target_path, content)
