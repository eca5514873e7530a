"""
FASTA splitting utilities.

This module splits a multi-FASTA file into numbered chunk files so each
chunk can be searched by one task of a grid array job.
"""

import logging
from pathlib import Path
from typing import Iterator

from Bio import SeqIO
from Bio.SeqRecord import SeqRecord

from pangenome.utils.file_io import ensure_directory

logger = logging.getLogger(__name__)

# Grid callers look for this text in the splitter's error log
DUPLICATE_ID_SIGNATURE = "Expected: unique FASTA identifier"

SPLIT_PREFIX = "split_fasta"


class DuplicateIdentifierError(ValueError):
    """The input FASTA file repeats a record identifier."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(
            f"Found duplicate identifier '{identifier}'. {DUPLICATE_ID_SIGNATURE}"
        )


def check_unique_ids(fasta_file: Path) -> int:
    """
    Verify that every record identifier in a FASTA file is unique.

    Args:
        fasta_file: Path to FASTA file

    Returns:
        Number of records

    Raises:
        DuplicateIdentifierError: on the first repeated identifier
    """
    seen: set[str] = set()
    for record in SeqIO.parse(str(fasta_file), "fasta"):
        if record.id in seen:
            raise DuplicateIdentifierError(record.id)
        seen.add(record.id)
    return len(seen)


def _batches(records: Iterator[SeqRecord], size: int) -> Iterator[list[SeqRecord]]:
    batch: list[SeqRecord] = []
    for record in records:
        batch.append(record)
        if len(batch) == size:
            yield batch
            batch = []
    if batch:
        yield batch


def split_fasta(
    fasta_file: Path,
    out_dir: Path,
    records_per_file: int = 1000,
    prefix: str = SPLIT_PREFIX,
) -> list[Path]:
    """
    Split a FASTA file into ``<prefix>.1`` .. ``<prefix>.N`` in out_dir.

    Identifiers are checked for uniqueness before anything is written,
    since chunk outputs are later merged and keyed on them.

    Args:
        fasta_file: Input FASTA file
        out_dir: Directory for the chunk files (created if needed)
        records_per_file: Maximum records per chunk
        prefix: Chunk file name stem

    Returns:
        Chunk paths in index order

    Raises:
        DuplicateIdentifierError: if an identifier repeats
        ValueError: if records_per_file is not positive
    """
    if records_per_file < 1:
        raise ValueError(f"records_per_file must be positive, got {records_per_file}")

    total = check_unique_ids(fasta_file)
    ensure_directory(out_dir)

    chunks: list[Path] = []
    records = SeqIO.parse(str(fasta_file), "fasta")
    for index, batch in enumerate(_batches(records, records_per_file), start=1):
        chunk = out_dir / f"{prefix}.{index}"
        with open(chunk, "w") as fh:
            SeqIO.write(batch, fh, "fasta")
        chunks.append(chunk)

    logger.info(f"Split {total} sequences from {fasta_file} into {len(chunks)} files")
    return chunks
