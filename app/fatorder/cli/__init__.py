"""Command line interface: the ``fatorder`` Typer application."""

from fatorder.cli.main import app

__all__ = ["app"]
