"""Subcommands registered on the ``fatorder`` application."""

from fatorder.cli.commands import config, history, inspect, sort

__all__ = ["config", "history", "inspect", "sort"]
