#!/usr/bin/env python3
"""
Split a FASTA file into numbered chunks.

Writes <out_dir>/split_fasta.1 .. split_fasta.N, each holding at most
--num_seqs records. Duplicate record identifiers are rejected with an
"Expected: unique FASTA identifier" error on stderr.

Usage:
    split-fasta -f centroids.fasta -n 1000 -o blast/split_fastas
"""

import argparse
import logging
import sys
from pathlib import Path

from pangenome.utils.fasta import DuplicateIdentifierError, split_fasta
from pangenome.utils.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="split-fasta",
        description="Split a FASTA file into numbered chunks",
    )
    parser.add_argument("-f", "--fasta", required=True, type=Path, help="Input FASTA file")
    parser.add_argument(
        "-n", "--num_seqs",
        type=int,
        default=1000,
        help="Sequences per output file (default: 1000)",
    )
    parser.add_argument("-o", "--out_dir", required=True, type=Path, help="Output directory")
    args = parser.parse_args(argv)

    # grid runs capture stderr into split_fasta.error
    setup_logging("pangenome", stream=sys.stderr)

    if not args.fasta.is_file():
        logger.error(f"Input file {args.fasta} does not exist")
        return 1

    try:
        chunks = split_fasta(args.fasta, args.out_dir, records_per_file=args.num_seqs)
    except DuplicateIdentifierError as e:
        logger.error(str(e))
        return 1
    except (ValueError, OSError) as e:
        logger.error(f"Error splitting {args.fasta}: {e}")
        return 1

    logger.info(f"Wrote {len(chunks)} files to {args.out_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
