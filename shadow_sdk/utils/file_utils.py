# shadow_sdk/utils/file_utils.py
"""File operation utilities"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Union


def ensure_parent_dir(file_path: Path) -> Path:
    """
    Ensure parent directory exists

    Args:
        file_path: File path

    Returns:
        Parent directory path
    """
    parent = file_path.parent
    parent.mkdir(parents=True, exist_ok=True)
    return parent


def atomic_write(file_path: Path,
                 content: Union[str, bytes],
                 file_mode: Optional[int] = None) -> None:
    """
    Write file atomically

    The content goes to a temporary file in the target directory which is
    flushed, fsynced and then renamed over the target. Readers observe
    either the old file or the complete new one.

    Args:
        file_path: Target file path
        content: Content to write
        file_mode: Optional permission bits applied before the rename
    """
    file_path = Path(file_path)
    ensure_parent_dir(file_path)

    data = content.encode('utf-8') if isinstance(content, str) else content
    temp_fd, temp_path = tempfile.mkstemp(
        dir=file_path.parent,
        prefix=f".{file_path.name}.",
        suffix=".tmp"
    )

    try:
        with os.fdopen(temp_fd, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())

        if file_mode is not None:
            os.chmod(temp_path, file_mode)

        # Atomic rename
        os.replace(temp_path, file_path)

    except BaseException:
        # Clean up temp file on error
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise


def atomic_write_json(file_path: Path,
                      data: Any,
                      file_mode: Optional[int] = None) -> None:
    """Serialize data as indented JSON and write it atomically"""
    text = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    atomic_write(file_path, text, file_mode=file_mode)
