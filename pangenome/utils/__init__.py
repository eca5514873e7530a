"""
Pangenome Utility Library.

Modules:
--------
logging_setup
    Logging configuration utilities.
file_io
    Directory, size and concatenation helpers.
fasta
    FASTA splitting.
"""

from pangenome.utils.logging_setup import setup_logging, add_file_handler
from pangenome.utils.file_io import (
    ensure_directory,
    has_content,
    list_numbered_files,
    concatenate_files,
    remove_tree,
)
from pangenome.utils.fasta import split_fasta, DUPLICATE_ID_SIGNATURE

__all__ = [
    # logging_setup
    "setup_logging",
    "add_file_handler",
    # file_io
    "ensure_directory",
    "has_content",
    "list_numbered_files",
    "concatenate_files",
    "remove_tree",
    # fasta
    "split_fasta",
    "DUPLICATE_ID_SIGNATURE",
]
