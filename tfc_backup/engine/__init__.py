"""Backup engines for TFC Backup."""

from .base import AbstractBackupEngine, EngineResult
from .restic import ResticEngine

__all__ = ["AbstractBackupEngine", "EngineResult", "ResticEngine"]
