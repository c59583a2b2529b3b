"""Core components for TFC Backup."""

from .backup import BackupManager, run_backup_sync, run_init_sync
from .client import TerraformCloudClient
from .exceptions import (
    ListingError,
    PaginationError,
    PreconditionError,
    TfcBackupError,
    TransportError,
    WorkspaceNotFound,
)
from .export import ExportRun, ExportSummary, RunContext, run_export, run_export_sync
from .exporter import Exporter
from .paginator import Paginator
from .reporter import FailureReporter
from .workspaces import All, Single, TfcOpsLister, WorkspaceResolver

__all__ = [
    "All",
    "BackupManager",
    "ExportRun",
    "ExportSummary",
    "Exporter",
    "FailureReporter",
    "ListingError",
    "PaginationError",
    "Paginator",
    "PreconditionError",
    "RunContext",
    "Single",
    "TerraformCloudClient",
    "TfcBackupError",
    "TfcOpsLister",
    "TransportError",
    "WorkspaceNotFound",
    "WorkspaceResolver",
    "run_backup_sync",
    "run_export",
    "run_export_sync",
    "run_init_sync",
]
