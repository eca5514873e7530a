#!/usr/bin/env python3
"""
Make a pan-chromosome circular figure after gene_order has been run.

Usage:
    make-pan-chromosome-fig /path/to/pan-genome
    make-pan-chromosome-fig /path/to/pan-genome --bin_dir /opt/pangenome/bin

Environment Variables:
    PAN_CHROMOSOME_BIN: Directory holding the circle helper scripts
    FIG2DEV: fig2dev executable
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from pangenome.exceptions import PangenomeError
from pangenome.pan_chromosome import make_pan_chromosome_fig
from pangenome.utils.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    """Main entry point."""
    load_dotenv()
    parser = argparse.ArgumentParser(
        prog="make-pan-chromosome-fig",
        description="Make a pan-chromosome circular figure",
    )
    parser.add_argument("base_dir", type=Path, help="Pan-genome base directory")
    parser.add_argument("--bin_dir", type=Path, help="Directory holding the circle helper scripts")
    args = parser.parse_args(argv)

    setup_logging("pangenome")

    try:
        pdf = make_pan_chromosome_fig(args.base_dir, bin_dir=args.bin_dir)
    except PangenomeError as e:
        logger.error(str(e))
        return e.exit_code

    print(f"Pan-chromosome figure at: {pdf}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
