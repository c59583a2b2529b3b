"""Helper utility functions."""

import os
import shutil
import tempfile
from pathlib import Path


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format."""
    if size_bytes == 0:
        return "0 B"

    size_names = ["B", "KB", "MB", "GB", "TB"]
    i = 0
    size = float(size_bytes)

    while size >= 1024.0 and i < len(size_names) - 1:
        size /= 1024.0
        i += 1

    return f"{size:.1f} {size_names[i]}"


def atomic_write_bytes(path: Path, payload: bytes) -> Path:
    """
    Write ``payload`` to ``path`` through a temporary file in the same directory.

    The destination either holds the full payload or does not exist; a failed
    or interrupted write leaves no file under the final name.
    """
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(payload)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path


def prepare_staging_dir(path: Path) -> Path:
    """Create ``path`` if needed and remove everything inside it."""
    path.mkdir(parents=True, exist_ok=True)
    for child in path.iterdir():
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child)
        else:
            child.unlink()
    return path


def remove_staging_dir(path: Path) -> None:
    """Remove the staging directory and its contents."""
    shutil.rmtree(path)
