"""Tests for file and process helpers."""

import asyncio
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from tfc_backup.utils import atomic_write_bytes, format_file_size, prepare_staging_dir, remove_staging_dir, run_command


class TestAtomicWrite:
    """Tests for atomic_write_bytes."""

    def test_writes_payload(self, tmp_path: Path) -> None:
        path = atomic_write_bytes(tmp_path / "alpha-attributes.json", b"{}")
        assert path.read_bytes() == b"{}"
        assert [p.name for p in tmp_path.iterdir()] == ["alpha-attributes.json"]

    def test_replaces_existing(self, tmp_path: Path) -> None:
        target = tmp_path / "alpha-attributes.json"
        target.write_bytes(b"old")
        atomic_write_bytes(target, b"new")
        assert target.read_bytes() == b"new"

    def test_failed_write_leaves_nothing(self, tmp_path: Path) -> None:
        """An interrupted write never leaves a file under the final name."""
        with patch("tfc_backup.utils.helpers.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                atomic_write_bytes(tmp_path / "alpha-attributes.json", b"{}")
        assert list(tmp_path.iterdir()) == []


class TestStagingDir:
    """Tests for staging directory handling."""

    def test_prepare_creates_and_wipes(self, tmp_path: Path) -> None:
        staging = tmp_path / "staging"
        staging.mkdir()
        (staging / "old.json").write_text("{}")
        (staging / "nested").mkdir()
        (staging / "nested" / "file").write_text("x")

        prepare_staging_dir(staging)

        assert staging.is_dir()
        assert list(staging.iterdir()) == []

    def test_prepare_missing(self, tmp_path: Path) -> None:
        assert prepare_staging_dir(tmp_path / "a" / "b").is_dir()

    def test_remove(self, tmp_path: Path) -> None:
        staging = tmp_path / "staging"
        staging.mkdir()
        (staging / "x.json").write_text("{}")
        remove_staging_dir(staging)
        assert not staging.exists()


class TestRunCommand:
    """Tests for run_command."""

    def test_captures_output(self) -> None:
        result = asyncio.run(run_command([sys.executable, "-c", "print('name, id')"]))
        assert result.success
        assert result.stdout == "name, id\n"

    def test_non_zero_exit(self) -> None:
        result = asyncio.run(run_command([sys.executable, "-c", "import sys; sys.exit(3)"]))
        assert not result.success
        assert result.returncode == 3
        assert "exit code 3" in result.describe_failure()

    def test_timeout(self) -> None:
        result = asyncio.run(run_command([sys.executable, "-c", "import time; time.sleep(10)"], timeout=0.2))
        assert result.timed_out
        assert not result.success

    def test_missing_executable(self) -> None:
        with pytest.raises(FileNotFoundError):
            asyncio.run(run_command(["definitely-not-a-real-binary-tfc"]))

    def test_extra_env(self) -> None:
        cmd = [sys.executable, "-c", "import os; print(os.environ['RESTIC_TAG'])"]
        result = asyncio.run(run_command(cmd, env={"RESTIC_TAG": "tfc"}))
        assert result.stdout.strip() == "tfc"


def test_format_file_size() -> None:
    assert format_file_size(0) == "0 B"
    assert format_file_size(2048) == "2.0 KB"
