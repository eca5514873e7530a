#!/usr/bin/env python3
"""
Map GO terms not covered by HMMs to centroids via BLAST.

Choose ONE of three ways of getting BLAST results:

    --project, -P     SGE/UGE grid accounting project code; BLAST runs as
                      an array job on the grid
    --blast_local     run BLAST on this machine instead of the grid
    --blast_file, -b  skip BLAST and use this results file

Results are 12-column tabular BLAST output. When an accession to GO table
is given with --go_map, GO terms of each query's best hit are written to
<working_dir>/go_mapping.

Based on map_go_via_blast.pl.

Usage:
    map-go-via-blast -P 0000 -i centroids.fasta
    map-go-via-blast --blast_local -i centroids.fasta --use_nuc
    map-go-via-blast -b blast_output -i centroids.fasta --go_map acc2go.tab

Environment Variables:
    BLASTN / BLASTP: BLAST+ executables
    BLASTDB_DIR: Directory holding the default search databases
    QSUB / QSTAT: Grid engine commands
    GRID_POLL_INTERVAL: Seconds between grid status polls
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from pangenome.blast.grid import run_grid_blast
from pangenome.blast.local import run_local_blast
from pangenome.blast.options import (
    DEFAULT_EVALUE,
    DEFAULT_PERCENT_COV,
    DEFAULT_PERCENT_ID,
    RunConfig,
    RunMode,
    validate_options,
)
from pangenome.blast.results import consume_results
from pangenome.core.settings import Settings
from pangenome.exceptions import OptionError, PangenomeError
from pangenome.utils.file_io import has_content
from pangenome.utils.logging_setup import add_file_handler, setup_logging

logger = logging.getLogger(__name__)

RUN_LOG = "map_go_via_blast.log"
GO_MAPPING = "go_mapping"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="map-go-via-blast",
        description="Map GO terms not covered by HMMs to centroids via BLAST",
        allow_abbrev=False,
    )
    parser.add_argument("-P", "--project", help="SGE/UGE grid accounting project code")
    parser.add_argument(
        "--blast_local",
        action="store_true",
        help="Run BLAST locally instead of on the grid",
    )
    parser.add_argument("-b", "--blast_file", help="Skip BLAST, use this results file instead")
    parser.add_argument("-i", "--input_seqs", help="Input FASTA file")
    parser.add_argument("-s", "--search_db", help="Path to BLAST db for searching")
    parser.add_argument(
        "-E", "--evalue",
        help=f"E-value required to be reported as a hit (default: {DEFAULT_EVALUE})",
    )
    parser.add_argument(
        "-I", "--percent_id",
        type=int,
        help=f"Percent identity required to be reported as a hit (default: {DEFAULT_PERCENT_ID})",
    )
    parser.add_argument(
        "-C", "--percent_cov",
        type=int,
        help=f"Minimum percent query coverage per HSP (default: {DEFAULT_PERCENT_COV})",
    )
    parser.add_argument(
        "-n", "--use_nuc",
        action="store_true",
        help="Input is in nucleotide space, use blastn",
    )
    parser.add_argument("-w", "--working_dir", help="Working directory (default: cwd)")
    parser.add_argument("--log_dir", help="Directory for log files (default: cwd)")
    parser.add_argument("-g", "--go_map", help="Tab-delimited subject accession to GO id table")
    return parser


def obtain_results(config: RunConfig, settings: Optional[Settings] = None) -> Path:
    """Run BLAST the way the configuration asks and return the result file."""
    if config.mode is RunMode.GRID:
        return run_grid_blast(config, settings)
    if config.mode is RunMode.LOCAL:
        return run_local_blast(config, settings)
    return config.result_file


def main(argv=None) -> int:
    """Main entry point."""
    load_dotenv()
    args = build_parser().parse_args(argv)
    log = setup_logging("pangenome")

    try:
        config = validate_options(**vars(args))
    except OptionError as e:
        for error in e.errors:
            logger.error(error)
        return e.exit_code

    add_file_handler(log, config.log_dir / RUN_LOG)

    try:
        result_file = obtain_results(config)

        if not has_content(result_file):
            print("No results.")
            return 0

        print(f"BLAST results at: {result_file}")

        go_output = config.working_dir / GO_MAPPING if config.go_map else None
        consume_results(
            result_file,
            go_map_file=config.go_map,
            output_file=go_output,
            min_percent_id=config.percent_id,
        )
        return 0

    except PangenomeError as e:
        logger.error(str(e))
        return e.exit_code

    except Exception as e:
        logger.exception(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
