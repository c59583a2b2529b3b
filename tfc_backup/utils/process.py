"""Async execution of external commands (tfc-ops, sentry-cli, restic)."""

import asyncio
import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Captured outcome of an external command."""

    returncode: int
    stdout: str
    stderr: str
    timed_out: bool = False

    @property
    def success(self) -> bool:
        return self.returncode == 0 and not self.timed_out

    def describe_failure(self) -> str:
        if self.timed_out:
            return "timed out"
        detail = self.stderr or self.stdout
        return f"exit code {self.returncode}: {detail}" if detail else f"exit code {self.returncode}"


async def run_command(
    cmd: list[str],
    timeout: float | None = None,
    env: dict[str, str] | None = None,
) -> CommandResult:
    """
    Run a command and capture its output.

    Args:
        cmd: Command and arguments
        timeout: Seconds to wait before killing the process
        env: Extra environment variables layered over the current environment

    Returns
    -------
        CommandResult with decoded stdout/stderr

    Raises
    ------
        FileNotFoundError: If the executable does not exist
    """
    logger.debug("Running command: %s", " ".join(cmd))

    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        env={**os.environ, **env} if env else None,
    )

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except TimeoutError:
        process.kill()
        await process.wait()
        logger.warning("Command timed out after %s seconds: %s", timeout, cmd[0])
        return CommandResult(returncode=-1, stdout="", stderr="", timed_out=True)
    except asyncio.CancelledError:
        process.kill()
        await process.wait()
        raise

    result = CommandResult(
        returncode=process.returncode if process.returncode is not None else -1,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace").strip(),
    )
    if result.success:
        logger.debug("Command succeeded: %s", cmd[0])
    else:
        logger.debug("Command failed: %s (%s)", cmd[0], result.describe_failure())
    return result
