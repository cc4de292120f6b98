"""Command-line interface for glyphanatomy."""

from glyphanatomy.cli.app import app, cli, main

__all__ = ["app", "cli", "main"]
