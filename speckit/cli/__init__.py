"""Command-line interface."""

from speckit.cli.main import app

__all__ = ["app"]
