"""Bundled data files for fatorder."""
