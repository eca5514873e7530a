"""
BLAST command-line construction.

Builds the blastn/blastp argv shared by the local and grid paths. Query
and output arguments are appended by the caller.
"""
from __future__ import annotations

import os
import shlex
from typing import List, Optional

from pangenome.blast.options import RunConfig
from pangenome.core.settings import Settings, settings as default_settings

# Tabular output, 12 columns
OUTPUT_FIELDS = [
    "qseqid", "sseqid", "pident", "length", "mismatch", "gapopen",
    "qstart", "qend", "sstart", "send", "evalue", "bitscore",
]
OUTPUT_FORMAT = "6 " + " ".join(OUTPUT_FIELDS)


def default_database(use_nuc: bool, settings: Settings) -> str:
    """Default search database for the nucleotide or protein program."""
    name = settings.blastn_db_name if use_nuc else settings.blastp_db_name
    return os.path.join(settings.blast_db_dir, name)


def build_blast_command(
    config: RunConfig,
    settings: Optional[Settings] = None,
) -> List[str]:
    """
    Build the BLAST command line, without -query and -out.

    Args:
        config: Validated run configuration
        settings: Tool settings (defaults to environment settings)

    Returns:
        Command line as list of strings
    """
    settings = settings or default_settings

    program = settings.blastn_exec if config.use_nuc else settings.blastp_exec
    database = config.search_db or default_database(config.use_nuc, settings)

    cmd = [
        program,
        "-db", database,
        "-evalue", str(config.evalue),
        "-qcov_hsp_perc", str(config.percent_cov),
    ]

    # blastp has no percent identity cutoff
    if config.use_nuc:
        cmd.extend(["-perc_identity", str(config.percent_id)])

    cmd.extend(["-outfmt", OUTPUT_FORMAT])
    return cmd


def format_command(cmd: List[str]) -> str:
    """Render an argv as a shell-safe string for logs and scripts."""
    return shlex.join(cmd)
