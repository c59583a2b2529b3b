"""Utility functions for TFC Backup."""

from .helpers import atomic_write_bytes, format_file_size, prepare_staging_dir, remove_staging_dir
from .process import CommandResult, run_command

__all__ = [
    "CommandResult",
    "atomic_write_bytes",
    "format_file_size",
    "prepare_staging_dir",
    "remove_staging_dir",
    "run_command",
]
