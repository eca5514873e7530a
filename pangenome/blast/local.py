"""
Run BLAST on the local machine.
"""
from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Optional

from pangenome.blast.command import build_blast_command, format_command
from pangenome.blast.options import RunConfig
from pangenome.core.settings import Settings
from pangenome.exceptions import BlastError
from pangenome.utils.file_io import ensure_directory

logger = logging.getLogger(__name__)


def run_local_blast(config: RunConfig, settings: Optional[Settings] = None) -> Path:
    """
    BLAST the whole input synchronously.

    stdout and stderr of BLAST go to ``<log_dir>/blast.log``.

    Args:
        config: Validated run configuration
        settings: Tool settings

    Returns:
        Path to the BLAST output file

    Raises:
        BlastError: if BLAST cannot be started or exits non-zero
    """
    output_file = config.result_file
    log_file = config.blast_log
    ensure_directory(output_file.parent)
    ensure_directory(log_file.parent)

    cmd = build_blast_command(config, settings)
    cmd.extend(["-query", str(config.input_seqs), "-out", str(output_file)])

    logger.info(f"Running BLAST command: {format_command(cmd)}")

    try:
        with open(log_file, "w+") as log_fh:
            result = subprocess.run(
                cmd,
                stdout=log_fh,
                stderr=subprocess.STDOUT,
                text=True,
            )
    except OSError as e:
        raise BlastError(
            f"Problem running blast: {e}. See {log_file}", log_file=log_file
        ) from e

    if result.returncode != 0:
        raise BlastError(f"Problem running blast. See {log_file}", log_file=log_file)

    logger.info(f"BLAST completed: {output_file}")
    return output_file
