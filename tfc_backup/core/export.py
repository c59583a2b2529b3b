"""A single export run: discovery, then fetch-and-persist of every resource."""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from tfc_backup.config import Settings
from tfc_backup.notifiers import NotificationLevel

from .client import TerraformCloudClient
from .exceptions import ListingError, PreconditionError
from .exporter import Exporter
from .models import ExportError, RunState, VariableSet
from .paginator import Paginator
from .reporter import FailureReporter
from .workspaces import ResolveMode, TfcOpsLister, WorkspaceResolver

logger = logging.getLogger(__name__)


@dataclass
class RunContext:
    """Everything one run threads through its components."""

    settings: Settings
    organization: str
    dest_dir: Path
    client: TerraformCloudClient
    reporter: FailureReporter
    errors: list[ExportError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class ExportSummary:
    """Outcome of an export run."""

    state: RunState
    workspaces: int = 0
    variable_sets: int = 0
    artifacts: list[Path] = field(default_factory=list)
    errors: list[ExportError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    fatal_error: str | None = None
    duration: float = 0.0

    @property
    def complete(self) -> bool:
        """True when nothing at all went wrong."""
        return self.state == RunState.DONE and not self.errors and not self.warnings

    @property
    def exit_code(self) -> int:
        """Non-fatal errors still exit 0; only an aborted run fails."""
        return 0 if self.state == RunState.DONE else 1


def require_token(settings: Settings) -> str:
    """Return the API token or raise PreconditionError."""
    if settings.atlas_token is None or not settings.atlas_token.get_secret_value():
        msg = "Terraform Cloud access token must be in ATLAS_TOKEN environment variable."
        raise PreconditionError(msg)
    return settings.atlas_token.get_secret_value()


class ExportRun:
    """
    Drives one export through ``START -> RESOLVING_WORKSPACES -> EXPORTING -> DONE``.

    Workspaces and variable sets are both discovered while resolving, so a
    listing failure aborts the run (``ABORTED_EARLY``) before any artifact
    has been written.
    """

    def __init__(self, context: RunContext) -> None:
        self.context = context
        self.state = RunState.START
        settings = context.settings
        self.resolver = WorkspaceResolver(
            context.client,
            context.organization,
            TfcOpsLister(settings.tfc_ops_path, settings.listing_timeout),
        )
        self.paginator = Paginator(context.client, settings.varset_pagination, settings.max_pages)
        self.exporter = Exporter(context.client, settings.max_workers)

    def _transition(self, state: RunState) -> None:
        logger.debug("Export run: %s -> %s", self.state.value, state.value)
        self.state = state

    async def run(self, mode: ResolveMode) -> ExportSummary:
        ctx = self.context
        start = time.monotonic()
        summary = ExportSummary(state=self.state)

        self._transition(RunState.RESOLVING_WORKSPACES)
        try:
            workspaces = await self.resolver.resolve(mode)
            variable_sets = await self.discover_variable_sets()
        except ListingError as e:
            self._transition(RunState.ABORTED_EARLY)
            await ctx.reporter.report(e.message)
            summary.state = self.state
            summary.fatal_error = e.message
            summary.duration = time.monotonic() - start
            return summary

        summary.workspaces = len(workspaces)
        summary.variable_sets = len(variable_sets)

        self._transition(RunState.EXPORTING)
        async for error in self.exporter.export_all(workspaces, variable_sets, ctx.dest_dir):
            ctx.errors.append(error)
            await ctx.reporter.report(error.message)

        self._transition(RunState.DONE)
        summary.state = self.state
        summary.artifacts = sorted(self.exporter.written)
        summary.errors = list(ctx.errors)
        summary.warnings = list(ctx.warnings)
        summary.duration = time.monotonic() - start
        return summary

    async def discover_variable_sets(self) -> list[VariableSet]:
        """Collect the organization's variable sets, reporting count mismatches."""
        ctx = self.context
        collection = await self.paginator.collect(
            ctx.client.varsets_url(ctx.organization),
            ctx.settings.page_size,
        )

        if not collection.is_consistent:
            warning = (
                f"Warning: Expected {collection.expected_total} variable sets "
                f"but processed {collection.observed_total}"
            )
            ctx.warnings.append(warning)
            await ctx.reporter.report(warning, NotificationLevel.WARNING)
        else:
            logger.info("Successfully processed all %d variable sets", collection.expected_total)

        return [VariableSet(name=name, id=varset_id) for name, varset_id in collection.items]


async def run_export(
    settings: Settings,
    organization: str,
    mode: ResolveMode,
    dest_dir: Path,
    reporter: FailureReporter | None = None,
) -> ExportSummary:
    """Check preconditions, then run one export into ``dest_dir``."""
    reporter = reporter or FailureReporter.from_settings(settings)

    try:
        token = require_token(settings)
        if not dest_dir.is_dir():
            msg = f"Export directory does not exist: {dest_dir}"
            raise PreconditionError(msg)
    except PreconditionError as e:
        await reporter.report(e.message)
        return ExportSummary(state=RunState.START, fatal_error=e.message)

    client = TerraformCloudClient(token, **settings.get_client_config())
    try:
        context = RunContext(
            settings=settings,
            organization=organization,
            dest_dir=dest_dir,
            client=client,
            reporter=reporter,
        )
        return await ExportRun(context).run(mode)
    finally:
        client.close()


def run_export_sync(settings: Settings, organization: str, mode: ResolveMode, dest_dir: Path) -> ExportSummary:
    """Run an export synchronously (wrapper for async operation)."""
    return asyncio.run(run_export(settings, organization, mode, dest_dir))
