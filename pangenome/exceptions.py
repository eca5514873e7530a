"""
Exception types raised by the pangenome tools.

Each stage raises one of these; the command-line entry points catch
``PangenomeError`` once and turn it into an exit code.
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional


class PangenomeError(Exception):
    """Base class for all tool failures."""

    exit_code = 1


class OptionError(PangenomeError):
    """One or more command-line options are invalid."""

    exit_code = 2

    def __init__(self, errors: Iterable[str]):
        self.errors = list(errors)
        super().__init__("\n".join(self.errors))


class ToolError(PangenomeError):
    """An external program exited unsuccessfully."""

    def __init__(self, message: str, log_file: Optional[Path] = None):
        self.log_file = log_file
        super().__init__(message)


class BlastError(ToolError):
    """BLAST failed; ``log_file`` holds its output."""


class SplitError(ToolError):
    """The FASTA splitter failed."""

    def __init__(
        self,
        message: str,
        duplicate_ids: bool = False,
        log_file: Optional[Path] = None,
    ):
        self.duplicate_ids = duplicate_ids
        super().__init__(message, log_file=log_file)


class GridError(PangenomeError):
    """Submitting, waiting on or collecting a grid job failed."""


class ResultParseError(PangenomeError):
    """A BLAST result line could not be parsed."""
