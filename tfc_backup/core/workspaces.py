"""Workspace discovery: single lookup by name or bulk listing via tfc-ops."""

import asyncio
import logging
from dataclasses import dataclass

from pydantic import ValidationError

from tfc_backup.utils.process import run_command

from .client import TerraformCloudClient
from .exceptions import ListingError, TransportError, WorkspaceNotFound
from .models import SingleResourceResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Single:
    """Resolve one workspace by name."""

    name: str


@dataclass(frozen=True)
class All:
    """Resolve every workspace in the organization."""


ResolveMode = Single | All


class TfcOpsLister:
    """
    Lists workspaces by running ``tfc-ops workspaces list``.

    tfc-ops prints two header lines ("Getting list of workspaces ..." and
    "name, id") followed by one ``name, id`` line per workspace.
    """

    HEADER_LINES = 2
    COLUMN_HEADER = "name, id"
    SEPARATOR = ", "

    def __init__(self, executable: str = "tfc-ops", timeout: float = 300.0) -> None:
        self.executable = executable
        self.timeout = timeout

    def build_command(self, organization: str) -> list[str]:
        return [
            self.executable,
            "workspaces",
            "list",
            "--organization",
            organization,
            "--attributes",
            "name,id",
        ]

    async def list_workspaces(self, organization: str) -> dict[str, str]:
        """Run tfc-ops and parse its output into ``{name: id}``."""
        try:
            result = await run_command(self.build_command(organization), timeout=self.timeout)
        except OSError as e:
            msg = f"Failed to list workspaces: cannot run {self.executable}: {e}"
            raise ListingError(msg) from e

        if not result.success:
            msg = f"Failed to list workspaces: {self.executable} {result.describe_failure()}"
            raise ListingError(msg, {"returncode": result.returncode})

        return self.parse_output(result.stdout)

    @classmethod
    def parse_output(cls, output: str) -> dict[str, str]:
        """
        Parse tfc-ops output, validating the header contract.

        Raises
        ------
            ListingError: If the header is missing or a data line is malformed
        """
        lines = output.splitlines()
        if len(lines) < cls.HEADER_LINES:
            msg = f"Unexpected tfc-ops output: expected {cls.HEADER_LINES} header lines, got {len(lines)}"
            raise ListingError(msg)

        header = lines[cls.HEADER_LINES - 1].strip()
        if header != cls.COLUMN_HEADER:
            msg = f"Unexpected tfc-ops output: column header is {header!r}, expected {cls.COLUMN_HEADER!r}"
            raise ListingError(msg)

        workspaces: dict[str, str] = {}
        for line_number, line in enumerate(lines[cls.HEADER_LINES :], start=cls.HEADER_LINES + 1):
            if not line.strip():
                continue
            name, sep, workspace_id = line.strip().partition(cls.SEPARATOR)
            if not sep or not name or not workspace_id or cls.SEPARATOR in workspace_id:
                msg = f"Unexpected tfc-ops output on line {line_number}: {line!r}"
                raise ListingError(msg)
            if name in workspaces:
                logger.warning("Workspace %s listed more than once; keeping %s", name, workspace_id)
            workspaces[name] = workspace_id

        return workspaces


class WorkspaceResolver:
    """Produces the ``{name: id}`` mapping of workspaces to export."""

    def __init__(self, client: TerraformCloudClient, organization: str, lister: TfcOpsLister) -> None:
        self.client = client
        self.organization = organization
        self.lister = lister

    async def resolve(self, mode: ResolveMode) -> dict[str, str]:
        """Resolve workspaces, ordered by name."""
        if isinstance(mode, Single):
            workspaces = {mode.name: await self._resolve_single(mode.name)}
        else:
            workspaces = await self.lister.list_workspaces(self.organization)
            logger.info("Found %d workspaces in %s", len(workspaces), self.organization)

        return dict(sorted(workspaces.items()))

    async def _resolve_single(self, name: str) -> str:
        url = self.client.workspace_by_name_url(self.organization, name)
        try:
            body = await asyncio.to_thread(self.client.fetch_json, url)
            response = SingleResourceResponse.model_validate(body)
        except TransportError as e:
            raise WorkspaceNotFound(name, e.message) from e
        except ValidationError as e:
            raise WorkspaceNotFound(name, "response has no data.id") from e

        logger.debug("Resolved workspace %s to %s", name, response.data.id)
        return response.data.id
