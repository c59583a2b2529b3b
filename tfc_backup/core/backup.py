"""Backup manager: export Terraform Cloud into a staging directory and snapshot it with restic."""

import asyncio
import logging

from tfc_backup.config import Settings
from tfc_backup.engine import AbstractBackupEngine, ResticEngine
from tfc_backup.utils import format_file_size, prepare_staging_dir, remove_staging_dir

from .export import ExportSummary, run_export
from .reporter import FailureReporter
from .workspaces import All

logger = logging.getLogger(__name__)


class BackupManager:
    """Main backup manager that orchestrates the entire backup cycle."""

    def __init__(
        self,
        settings: Settings,
        engine: AbstractBackupEngine | None = None,
        reporter: FailureReporter | None = None,
    ) -> None:
        """Initialize the backup manager."""
        self.settings = settings
        self.engine = engine or ResticEngine(settings.get_engine_config(), logger)
        self.reporter = reporter or FailureReporter.from_settings(settings)

        logger.info("Backup manager initialized")
        logger.info("Notifications: %s", "enabled" if self.settings.enable_notifications else "disabled")

    async def _fail(self, message: str) -> bool:
        await self.reporter.report(message)
        return False

    async def run_backup(self, organization: str) -> bool:
        """
        Run the complete backup cycle for every workspace of ``organization``.

        Returns
        -------
            True if every step succeeded, False otherwise
        """
        source_path = self.settings.source_path

        logger.info("=" * 60)
        logger.info("Starting Terraform Cloud backup of %s", organization)
        logger.info("=" * 60)

        # Repository must be reachable before anything is exported
        connection = await self.engine.test_connection()
        if not connection.success:
            return await self._fail(f"Backup repository is not accessible: {connection.message}")

        logger.info("Step 1: Preparing staging directory %s", source_path)
        try:
            prepare_staging_dir(source_path)
        except OSError as e:
            return await self._fail(f"Cannot create directory {source_path}: {e}")

        logger.info("Step 2: Exporting Terraform Cloud data to %s", source_path)
        summary = await run_export(self.settings, organization, All(), source_path, self.reporter)
        if summary.fatal_error is not None:
            # Already reported by the export run
            logger.error("Terraform Cloud export failed in %.0f seconds", summary.duration)
            return False
        self._log_export_summary(summary)

        logger.info("Step 3: Backing up %s", source_path)
        result = await self.engine.backup(source_path)
        if not result.success:
            return await self._fail(f"Backup failed: {result.message}")

        logger.info("Step 4: Applying retention policy")
        result = await self.engine.forget()
        if not result.success:
            return await self._fail(f"Retention failed: {result.message}")
        logger.info(result.message)

        try:
            remove_staging_dir(source_path)
        except OSError as e:
            return await self._fail(f"Cannot remove directory {source_path}: {e}")

        await self.reporter.notify_success(
            "Backup Completed",
            f"Backed up {summary.workspaces} workspaces and {summary.variable_sets} variable sets "
            f"of {organization} ({len(summary.errors)} export errors).",
        )

        logger.info("=" * 60)
        logger.info("Backup Process Completed")
        logger.info("=" * 60)
        return True

    def _log_export_summary(self, summary: ExportSummary) -> None:
        total_size = sum(path.stat().st_size for path in summary.artifacts if path.exists())
        logger.info(
            "Terraform Cloud export completed in %.0f seconds: %d artifacts (%s)",
            summary.duration,
            len(summary.artifacts),
            format_file_size(total_size),
        )
        if not summary.complete:
            logger.warning(
                "Export was incomplete: %d errors, %d warnings",
                len(summary.errors),
                len(summary.warnings),
            )

    async def run_init(self) -> bool:
        """Initialize the restic repository."""
        result = await self.engine.init()
        if not result.success:
            return await self._fail(f"Repository initialization failed: {result.message}")
        logger.info(result.message)
        return True


def run_backup_sync(settings: Settings, organization: str) -> bool:
    """Run backup synchronously (wrapper for async operation)."""
    manager = BackupManager(settings)
    return asyncio.run(manager.run_backup(organization))


def run_init_sync(settings: Settings) -> bool:
    """Initialize the repository synchronously (wrapper for async operation)."""
    manager = BackupManager(settings)
    return asyncio.run(manager.run_init())
