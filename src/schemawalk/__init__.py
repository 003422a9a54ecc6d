"""schemawalk Package.

This package provides the command-line side of schemawalk: the workspace
walker that validates every JSON/GeoJSON document in a directory tree and
the console entry point that reports per-file results and sets the exit
status.

Exported Functions:
    main: Entry point for the schemawalk console command
"""
from .schemawalk import main

__all__ = ["main"]
