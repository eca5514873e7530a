"""
General file I/O utilities.

This module provides the directory, size and concatenation helpers used
when staging files between external tools.
"""

import re
import shutil
from pathlib import Path
from typing import Iterable, Optional

_NUMERIC_SUFFIX = re.compile(r"\.(\d+)$")


def ensure_directory(path: Path) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path

    Returns:
        The path (for chaining)
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def has_content(filepath: Optional[Path]) -> bool:
    """True if filepath is an existing regular file with a non-zero size."""
    if filepath is None:
        return False
    filepath = Path(filepath)
    return filepath.is_file() and filepath.stat().st_size > 0


def numeric_suffix(filepath: Path) -> Optional[int]:
    """
    Return the trailing ``.<n>`` index of a file name, or None.

    Example:
        >>> numeric_suffix(Path("split_fasta.12"))
        12
    """
    match = _NUMERIC_SUFFIX.search(filepath.name)
    return int(match.group(1)) if match else None


def list_numbered_files(directory: Path, base: str) -> list[Path]:
    """
    List ``<base>.<n>`` files in a directory ordered by n.

    Files whose suffix is not a number are ignored. Ordering never depends
    on the filesystem's directory order.

    Args:
        directory: Directory to search
        base: File name stem, e.g. "split_fasta"

    Returns:
        Paths sorted by their numeric suffix
    """
    numbered = []
    for path in directory.glob(f"{base}.*"):
        index = numeric_suffix(path)
        if index is not None and path.is_file():
            numbered.append((index, path))
    return [path for _, path in sorted(numbered)]


def concatenate_files(input_paths: Iterable[Path], output_path: Path) -> int:
    """
    Concatenate files byte for byte into output_path, in the order given.

    Empty inputs contribute nothing. The output file is always created.

    Args:
        input_paths: Files to append, in order
        output_path: Destination (overwritten)

    Returns:
        Number of bytes written
    """
    ensure_directory(output_path.parent)
    with open(output_path, "wb") as out:
        for path in input_paths:
            if not has_content(path):
                continue
            with open(path, "rb") as fh:
                shutil.copyfileobj(fh, out)
        # Flush before the caller checks the size
        out.flush()
        return out.tell()


def remove_tree(path: Path) -> bool:
    """
    Remove a directory tree if it exists.

    Returns:
        True if something was removed
    """
    if not path.exists():
        return False
    shutil.rmtree(path)
    return True
