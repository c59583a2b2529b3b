"""TFC Backup - export Terraform Cloud configuration and back it up with restic."""

__version__ = "1.0.0"
