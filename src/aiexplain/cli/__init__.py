"""Command-line interface."""

from aiexplain.cli.main import app

__all__ = ["app"]
