"""Restic backup engine."""

from pathlib import Path
from typing import Any

from tfc_backup.utils.process import run_command

from .base import AbstractBackupEngine, EngineResult


class ResticEngine(AbstractBackupEngine):
    """Runs restic against the repository named in the environment."""

    def __init__(self, config: dict[str, Any], logger: Any = None) -> None:
        """Initialize restic engine with configuration."""
        super().__init__(config, logger)
        self.executable = config.get("executable", "restic")
        self.env: dict[str, str] = config.get("env", {})
        self.host = config.get("host")
        self.tag = config.get("tag")
        self.backup_args: list[str] = config.get("backup_args", [])
        self.forget_args: list[str] = config.get("forget_args", [])
        self.timeout = config.get("timeout")

        repository = self.env.get("RESTIC_REPOSITORY")
        if repository:
            self.log("info", f"Restic engine initialized for repository: {repository}")

    @property
    def has_retention_policy(self) -> bool:
        return bool(self.forget_args)

    def _build_restic_cmd(self, operation: str, *args: str) -> list[str]:
        """Build restic command with common options."""
        cmd = [self.executable, operation]
        if self.host:
            cmd.extend(["--host", self.host])
        cmd.extend(args)
        return cmd

    async def _run_restic_cmd(self, cmd: list[str], action: str) -> EngineResult:
        try:
            result = await run_command(cmd, timeout=self.timeout, env=self.env)
        except OSError as e:
            error_msg = f"Failed to run restic {action}: {e}"
            self.log("error", error_msg)
            return EngineResult(success=False, message=error_msg)

        if result.success:
            return EngineResult(success=True, message=f"restic {action} completed")

        error_msg = f"restic {action} failed with {result.describe_failure()}"
        self.log("error", error_msg)
        return EngineResult(success=False, message=error_msg)

    async def init(self) -> EngineResult:
        """Initialize the restic repository."""
        return await self._run_restic_cmd([self.executable, "init"], "init")

    async def backup(self, source_path: Path) -> EngineResult:
        """Back up ``source_path`` as a new snapshot."""
        if not source_path.is_dir():
            return EngineResult(success=False, message=f"Source directory does not exist: {source_path}")

        args: list[str] = []
        if self.tag:
            args.extend(["--tag", self.tag])
        args.extend(self.backup_args)
        args.append(str(source_path))
        return await self._run_restic_cmd(self._build_restic_cmd("backup", *args), "backup")

    async def forget(self) -> EngineResult:
        """Forget snapshots outside the retention policy and prune."""
        if not self.has_retention_policy:
            return EngineResult(success=True, message="No retention policy configured")

        args = ["--prune"]
        if self.tag:
            args.extend(["--tag", self.tag])
        args.extend(self.forget_args)
        return await self._run_restic_cmd(self._build_restic_cmd("forget", *args), "forget")

    async def test_connection(self) -> EngineResult:
        """Check that the repository can be opened."""
        result = await self._run_restic_cmd([self.executable, "cat", "config"], "cat config")
        if result.success:
            return EngineResult(success=True, message="Restic repository is accessible")
        return result
