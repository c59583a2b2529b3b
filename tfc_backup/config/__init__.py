"""Configuration for TFC Backup."""

from .settings import PaginationStrategy, Settings

__all__ = ["PaginationStrategy", "Settings"]
