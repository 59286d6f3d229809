"""fatorder - alphabetical directory-entry ordering for FAT32/exFAT volumes."""

__version__ = "0.3.0"
