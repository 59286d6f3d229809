"""Core infrastructure for fatorder: paths, settings, theme and run state."""
