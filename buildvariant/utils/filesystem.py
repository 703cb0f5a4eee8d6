# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Filesystem helpers.

The variant manifest is picked up by the packaging and signing stages, which
may poll for it while we are still writing. A reader must see either the
previous manifest or the complete new one, never a truncated file.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any


def atomic_write_json(target_path: Path, payload: Any) -> None:
    """
    Serialize `payload` as indented, key-sorted JSON and swap it into place.

    Serialization happens before any file is created, so a payload that
    json cannot encode leaves the directory exactly as it was. The temp file
    lives next to the target so os.replace stays a same-filesystem rename,
    and it is fsynced first so the rename never exposes unflushed data.

    Raises:
        TypeError: If `payload` is not JSON-serializable.
        OSError: If the write, sync or rename fails.
    """
    content = json.dumps(payload, indent=2, sort_keys=True) + "\n"
    target_path.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_name = tempfile.mkstemp(
        dir=str(target_path.parent),
        prefix=f".{target_path.name}.",
        suffix=".partial",
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as stream:
            stream.write(content)
            stream.flush()
            os.fsync(stream.fileno())
        os.replace(temp_name, target_path)
    except BaseException:
        if os.path.exists(temp_name):
            os.unlink(temp_name)
        raise


def read_text_strict(file_path: Path, encoding: str = "utf-8") -> str:
    """
    Read a text file, refusing anything that is not a regular file.

    Raises:
        FileNotFoundError: If the path doesn't exist.
        IsADirectoryError: If the path is a directory.
        UnicodeDecodeError: If the bytes are not valid in `encoding`.
    """
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")
    if not file_path.is_file():
        raise IsADirectoryError(f"Expected a file, got a directory: {file_path}")
    return file_path.read_text(encoding=encoding)
