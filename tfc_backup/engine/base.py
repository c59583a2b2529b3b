"""Abstract base class for backup engines."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass
class EngineResult:
    """Result of a backup engine operation."""

    success: bool
    message: str


class AbstractBackupEngine(ABC):
    """Abstract base class for backup engines."""

    def __init__(self, config: dict[str, Any], logger: Any = None) -> None:
        """Initialize backup engine with configuration."""
        self.config = config
        self.logger = logger

    @abstractmethod
    async def init(self) -> EngineResult:
        """
        Initialize the backup repository (done once).

        Returns
        -------
            EngineResult with operation details
        """

    @abstractmethod
    async def backup(self, source_path: Path) -> EngineResult:
        """
        Snapshot a directory into the repository.

        Args:
            source_path: Directory to back up

        Returns
        -------
            EngineResult with operation details
        """

    @abstractmethod
    async def forget(self) -> EngineResult:
        """
        Apply the retention policy and prune unreferenced data.

        Returns
        -------
            EngineResult with operation details
        """

    @abstractmethod
    async def test_connection(self) -> EngineResult:
        """
        Test that the repository is reachable.

        Returns
        -------
            EngineResult indicating connection status
        """

    def log(self, level: str, message: str) -> None:
        """Log a message if logger is available."""
        if self.logger:
            getattr(self.logger, level.lower(), self.logger.info)(message)
