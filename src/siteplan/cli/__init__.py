"""Command line interface for siteplan."""

from .main import cli

__all__ = ["cli"]
