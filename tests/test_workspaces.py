"""Tests for workspace discovery."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest
from conftest import FakeClient

from tfc_backup.core.exceptions import ListingError, WorkspaceNotFound
from tfc_backup.core.workspaces import All, Single, TfcOpsLister, WorkspaceResolver
from tfc_backup.utils.process import CommandResult

TFC_OPS_OUTPUT = """Getting list of workspaces ...
name, id
beta, ws-2
alpha, ws-1
"""


class TestParseOutput:
    """Tests for tfc-ops output parsing."""

    def test_parses_pairs(self) -> None:
        assert TfcOpsLister.parse_output(TFC_OPS_OUTPUT) == {"beta": "ws-2", "alpha": "ws-1"}

    def test_header_only(self) -> None:
        assert TfcOpsLister.parse_output("Getting list of workspaces ...\nname, id\n") == {}

    def test_missing_header_is_rejected(self) -> None:
        """Data without the two header lines must not be silently truncated."""
        with pytest.raises(ListingError):
            TfcOpsLister.parse_output("alpha, ws-1\nbeta, ws-2\ngamma, ws-3\n")

    def test_short_output_is_rejected(self) -> None:
        with pytest.raises(ListingError):
            TfcOpsLister.parse_output("Getting list of workspaces ...\n")

    def test_malformed_line_is_rejected(self) -> None:
        with pytest.raises(ListingError):
            TfcOpsLister.parse_output("Getting list of workspaces ...\nname, id\nalpha ws-1\n")

    def test_blank_lines_ignored(self) -> None:
        output = "Getting list of workspaces ...\nname, id\n\nalpha, ws-1\n\n"
        assert TfcOpsLister.parse_output(output) == {"alpha": "ws-1"}


class TestTfcOpsLister:
    """Tests for invoking tfc-ops."""

    def test_command_line(self) -> None:
        lister = TfcOpsLister("/usr/local/bin/tfc-ops")
        assert lister.build_command("acme") == [
            "/usr/local/bin/tfc-ops",
            "workspaces",
            "list",
            "--organization",
            "acme",
            "--attributes",
            "name,id",
        ]

    def test_non_zero_exit_is_fatal(self) -> None:
        result = CommandResult(returncode=1, stdout="", stderr="unauthorized")
        with patch("tfc_backup.core.workspaces.run_command", AsyncMock(return_value=result)):
            with pytest.raises(ListingError, match="Failed to list workspaces"):
                asyncio.run(TfcOpsLister().list_workspaces("acme"))

    def test_missing_executable_is_fatal(self) -> None:
        with patch("tfc_backup.core.workspaces.run_command", AsyncMock(side_effect=FileNotFoundError("tfc-ops"))):
            with pytest.raises(ListingError):
                asyncio.run(TfcOpsLister().list_workspaces("acme"))


class TestWorkspaceResolver:
    """Tests for WorkspaceResolver."""

    def test_single_returns_api_id(self) -> None:
        client = FakeClient(
            {
                "https://app.terraform.io/api/v2/organizations/acme/workspaces/alpha": {
                    "data": {"id": "ws-1", "type": "workspaces", "attributes": {"name": "alpha"}},
                },
            },
        )
        resolver = WorkspaceResolver(client, "acme", TfcOpsLister())
        assert asyncio.run(resolver.resolve(Single("alpha"))) == {"alpha": "ws-1"}

    def test_single_not_found(self) -> None:
        resolver = WorkspaceResolver(FakeClient({}), "acme", TfcOpsLister())
        with pytest.raises(WorkspaceNotFound) as exc_info:
            asyncio.run(resolver.resolve(Single("missing")))
        assert exc_info.value.name == "missing"

    def test_single_without_id(self) -> None:
        client = FakeClient({"https://app.terraform.io/api/v2/organizations/acme/workspaces/alpha": {"data": {}}})
        resolver = WorkspaceResolver(client, "acme", TfcOpsLister())
        with pytest.raises(WorkspaceNotFound):
            asyncio.run(resolver.resolve(Single("alpha")))

    def test_all_is_sorted_by_name(self) -> None:
        lister = TfcOpsLister()
        resolver = WorkspaceResolver(FakeClient({}), "acme", lister)
        result = CommandResult(returncode=0, stdout=TFC_OPS_OUTPUT, stderr="")
        with patch("tfc_backup.core.workspaces.run_command", AsyncMock(return_value=result)):
            workspaces = asyncio.run(resolver.resolve(All()))
        assert list(workspaces.items()) == [("alpha", "ws-1"), ("beta", "ws-2")]
