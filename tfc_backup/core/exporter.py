"""Fetches workspace and variable set payloads and persists them as artifacts."""

import asyncio
import logging
from collections import Counter
from collections.abc import AsyncIterator, Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from tfc_backup.utils import atomic_write_bytes

from .client import TerraformCloudClient
from .exceptions import TransportError
from .models import ExportArtifact, ExportError, PayloadKind, ResourceKind, VariableSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _FetchJob:
    resource_kind: ResourceKind
    resource_key: str
    payload_kind: PayloadKind
    url: str


def varset_keys(variable_sets: Sequence[VariableSet], workspace_names: Iterable[str] = ()) -> dict[str, str]:
    """
    Map variable set ids to the key used in their artifact filenames.

    The key is the sanitized name. When several sets sanitize to the same
    name, or a workspace is named ``varset-<key>`` and would get the same
    filenames, the id is appended so no artifact overwrites another.
    """
    counts = Counter(vs.sanitized_name for vs in variable_sets)
    taken = set(workspace_names)
    keys: dict[str, str] = {}
    for vs in variable_sets:
        if counts[vs.sanitized_name] > 1 or f"varset-{vs.sanitized_name}" in taken:
            keys[vs.id] = f"{vs.sanitized_name}-{vs.id}"
            logger.warning("Variable set name %r collides with another artifact name; using key %s", vs.name, keys[vs.id])
        else:
            keys[vs.id] = vs.sanitized_name
    return keys


class Exporter:
    """
    Fetch-and-persist for every workspace and variable set.

    Every resource contributes two artifacts (attributes and variables). A
    failed payload becomes one ``ExportError`` and the export carries on.
    Fetches run on a bounded pool of ``max_workers``; with a single worker
    they happen strictly in order, workspaces by name and then variable sets.
    """

    def __init__(self, client: TerraformCloudClient, max_workers: int = 4) -> None:
        self.client = client
        self.max_workers = max_workers
        self.written: list[Path] = []

    def plan(self, workspaces: Mapping[str, str], variable_sets: Sequence[VariableSet]) -> list[_FetchJob]:
        jobs: list[_FetchJob] = []
        for name in sorted(workspaces):
            workspace_id = workspaces[name]
            jobs.append(
                _FetchJob(ResourceKind.WORKSPACE, name, PayloadKind.ATTRIBUTES, self.client.workspace_url(workspace_id)),
            )
            jobs.append(
                _FetchJob(ResourceKind.WORKSPACE, name, PayloadKind.VARIABLES, self.client.workspace_vars_url(workspace_id)),
            )

        keys = varset_keys(variable_sets, workspaces)
        for vs in variable_sets:
            key = keys[vs.id]
            jobs.append(_FetchJob(ResourceKind.VARIABLE_SET, key, PayloadKind.ATTRIBUTES, self.client.varset_url(vs.id)))
            jobs.append(_FetchJob(ResourceKind.VARIABLE_SET, key, PayloadKind.VARIABLES, self.client.varset_vars_url(vs.id)))
        return jobs

    async def export_all(
        self,
        workspaces: Mapping[str, str],
        variable_sets: Sequence[VariableSet],
        dest_dir: Path,
    ) -> AsyncIterator[ExportError]:
        """
        Export every payload into ``dest_dir``, yielding errors as they occur.

        Args:
            workspaces: Mapping of workspace name to id
            variable_sets: Discovered variable sets
            dest_dir: Flat staging directory receiving the artifacts

        Yields
        ------
            One ExportError per failed payload, in completion order
        """
        jobs = self.plan(workspaces, variable_sets)
        logger.info(
            "Exporting %d workspaces and %d variable sets to %s",
            len(workspaces),
            len(variable_sets),
            dest_dir,
        )

        semaphore = asyncio.Semaphore(self.max_workers)
        tasks = [asyncio.create_task(self._run_job(job, dest_dir, semaphore)) for job in jobs]
        try:
            for finished in asyncio.as_completed(tasks):
                error = await finished
                if error is not None:
                    yield error
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _run_job(self, job: _FetchJob, dest_dir: Path, semaphore: asyncio.Semaphore) -> ExportError | None:
        async with semaphore:
            try:
                path = await asyncio.to_thread(self._fetch_and_persist, job, dest_dir)
            except (TransportError, OSError) as e:
                cause = e.message if isinstance(e, TransportError) else str(e)
                error = ExportError(job.resource_kind, job.resource_key, job.payload_kind, cause)
                logger.debug("Export failed: %s", error.message)
                return error

        self.written.append(path)
        return None

    def _fetch_and_persist(self, job: _FetchJob, dest_dir: Path) -> Path:
        payload = self.client.fetch(job.url)
        artifact = ExportArtifact(job.resource_kind, job.resource_key, job.payload_kind, payload)
        path = atomic_write_bytes(dest_dir / artifact.filename, artifact.payload)
        logger.debug("Wrote %s (%d bytes)", artifact.filename, len(payload))
        return path
