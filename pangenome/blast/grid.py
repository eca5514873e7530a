"""
Run BLAST as a grid engine array job.

The input is split into numbered chunks, one array task BLASTs one chunk,
and the per-chunk outputs are concatenated in chunk order once the whole
array job has left the scheduler:

    Split -> Submitted -> Polling -> Merged -> Cleaned
                                           \\-> Empty

Intermediate files live in ``<working_dir>/blast`` and are removed only
after a successful merge.
"""
from __future__ import annotations

import logging
import shlex
import subprocess
import sys
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pangenome.blast.command import build_blast_command, format_command
from pangenome.blast.options import RunConfig, RunMode
from pangenome.core.settings import Settings, settings as default_settings
from pangenome.exceptions import GridError, SplitError
from pangenome.grid.sge import (
    TASK_ID_VARIABLE,
    GridJob,
    launch_grid_job,
    wait_for_grid_jobs,
)
from pangenome.utils.fasta import DUPLICATE_ID_SIGNATURE, SPLIT_PREFIX
from pangenome.utils.file_io import (
    concatenate_files,
    ensure_directory,
    has_content,
    list_numbered_files,
    numeric_suffix,
    remove_tree,
)

logger = logging.getLogger(__name__)

SCRIPT_NAME = "grid_blast.sh"
CHUNK_OUTPUT_PREFIX = "blast_output"
SPLIT_ERROR_LOG = "split_fasta.error"


class GridStage(str, Enum):
    """Where a grid run has got to."""

    PENDING = "pending"
    SPLIT = "split"
    SUBMITTED = "submitted"
    POLLING = "polling"
    MERGED = "merged"
    CLEANED = "cleaned"
    EMPTY = "empty"
    ERROR = "error"


def log_mentions_duplicate_ids(log_file: Path) -> bool:
    """True if the splitter's log contains the duplicate identifier error."""
    if not has_content(log_file):
        return False
    with open(log_file, errors="replace") as fh:
        return any(DUPLICATE_ID_SIGNATURE in line for line in fh)


def split_command(
    input_seqs: Path,
    split_dir: Path,
    chunk_size: int,
    settings: Settings,
) -> List[str]:
    """Command line for the FASTA splitter."""
    if settings.split_fasta_exec:
        cmd = shlex.split(settings.split_fasta_exec)
    else:
        cmd = [sys.executable, "-m", "pangenome.cli.split_fasta"]
    return cmd + ["-f", str(input_seqs), "-n", str(chunk_size), "-o", str(split_dir)]


def write_blast_shell_script(
    blast_cmd: List[str],
    split_dir: Path,
    blast_dir: Path,
    shell: str = "/bin/tcsh",
) -> Path:
    """
    Write the per-task driver script.

    Each array task BLASTs ``split_fasta.$SGE_TASK_ID`` into
    ``blast_output.$SGE_TASK_ID``.

    Returns:
        Path to the executable script
    """
    task = f"${TASK_ID_VARIABLE}"
    query = f"{shlex.quote(str(split_dir))}/{SPLIT_PREFIX}.{task}"
    output = f"{shlex.quote(str(blast_dir))}/{CHUNK_OUTPUT_PREFIX}.{task}"
    cmd_string = f"{format_command(blast_cmd)} -query {query} -out {output}"

    script = blast_dir / SCRIPT_NAME
    ensure_directory(blast_dir)
    script.write_text(f"#!{shell}\n\n{cmd_string}\n")
    script.chmod(0o755)
    return script


def merge_chunk_outputs(blast_dir: Path, chunk_count: int, output_file: Path) -> Path:
    """
    Concatenate ``blast_output.1`` .. ``blast_output.N`` into output_file.

    Raises:
        GridError: if any chunk output is missing
    """
    outputs = [blast_dir / f"{CHUNK_OUTPUT_PREFIX}.{i}" for i in range(1, chunk_count + 1)]
    missing = [path.name for path in outputs if not path.is_file()]
    if missing:
        raise GridError(
            f"Problem getting blast results: {len(missing)} of {chunk_count} "
            f"chunk outputs missing ({', '.join(missing)}). See {blast_dir}"
        )

    size = concatenate_files(outputs, output_file)
    logger.info(f"Merged {chunk_count} chunk outputs into {output_file} ({size} bytes)")
    return output_file


class GridBlastRun:
    """One split/submit/wait/merge pass over a grid."""

    def __init__(self, config: RunConfig, settings: Optional[Settings] = None):
        if config.mode is not RunMode.GRID:
            raise ValueError(f"GridBlastRun needs a grid configuration, got {config.mode}")
        self.config = config
        self.settings = settings or default_settings
        self.blast_dir = config.working_dir / "blast"
        self.split_dir = self.blast_dir / "split_fastas"
        self.output_file = config.result_file
        self.stage = GridStage.PENDING
        self.chunks: List[Path] = []
        self.job: Optional[GridJob] = None

    def _advance(self, stage: GridStage) -> None:
        logger.debug(f"Grid stage {self.stage.value} -> {stage.value}")
        self.stage = stage

    def split(self) -> List[Path]:
        """Split the input into numbered chunks."""
        # chunks and outputs of an earlier failed run must not be merged
        if remove_tree(self.blast_dir):
            logger.warning(f"Removed intermediate files of a previous run in {self.blast_dir}")
        ensure_directory(self.split_dir)
        error_log = self.config.working_dir / SPLIT_ERROR_LOG
        cmd = split_command(
            self.config.input_seqs,
            self.split_dir,
            self.settings.split_chunk_size,
            self.settings,
        )
        logger.info(f"Splitting input: {format_command(cmd)}")

        try:
            with open(error_log, "w") as log_fh:
                result = subprocess.run(cmd, stdout=log_fh, stderr=subprocess.STDOUT)
        except OSError as e:
            self._advance(GridStage.ERROR)
            raise SplitError(f"Error running split_fasta: {e}", log_file=error_log) from e

        if result.returncode != 0:
            self._advance(GridStage.ERROR)
            duplicates = log_mentions_duplicate_ids(error_log)
            if duplicates:
                detail = "It looks like duplicate locus tags are involved."
            else:
                detail = "It doesn't look like duplicate locus tags are involved."
            raise SplitError(
                f"Error running split_fasta. {detail} See {error_log}",
                duplicate_ids=duplicates,
                log_file=error_log,
            )

        chunks = list_numbered_files(self.split_dir, SPLIT_PREFIX)
        if not chunks:
            self._advance(GridStage.ERROR)
            raise SplitError(f"split_fasta produced no files in {self.split_dir}", log_file=error_log)

        indices = [numeric_suffix(chunk) for chunk in chunks]
        if indices != list(range(1, len(chunks) + 1)):
            self._advance(GridStage.ERROR)
            raise SplitError(
                f"Split files in {self.split_dir} are not numbered 1..{len(chunks)}",
                log_file=error_log,
            )

        self.chunks = chunks
        self._advance(GridStage.SPLIT)
        return chunks

    def submit(self) -> GridJob:
        """Write the driver script and submit it as an array job."""
        blast_cmd = build_blast_command(self.config, self.settings)
        script = write_blast_shell_script(
            blast_cmd, self.split_dir, self.blast_dir, shell=self.settings.grid_shell
        )
        logger.info("Running blast on the grid.")
        self.job = launch_grid_job(
            self.config.project,
            self.config.working_dir,
            script,
            "blast.stdout",
            "blast.stderr",
            array_size=len(self.chunks),
            settings=self.settings,
        )
        self._advance(GridStage.SUBMITTED)
        return self.job

    def wait(self) -> None:
        """Block until the array job leaves the scheduler."""
        self._advance(GridStage.POLLING)
        logger.info("Waiting for blast jobs to finish.")
        wait_for_grid_jobs([self.job], settings=self.settings)
        logger.info("Blast jobs finished!")

    def merge(self) -> Path:
        merge_chunk_outputs(self.blast_dir, len(self.chunks), self.output_file)
        self._advance(GridStage.MERGED)
        return self.output_file

    def cleanup(self) -> None:
        logger.info("Removing intermediate blast files.")
        remove_tree(self.blast_dir)
        if has_content(self.output_file):
            self._advance(GridStage.CLEANED)
        else:
            self._advance(GridStage.EMPTY)

    def run(self) -> Path:
        """
        Run every stage in order.

        Returns:
            Path to the merged output (possibly empty; check ``stage``)
        """
        try:
            self.split()
            self.submit()
            self.wait()
            self.merge()
        except GridError:
            self._advance(GridStage.ERROR)
            raise
        self.cleanup()
        return self.output_file


def run_grid_blast(config: RunConfig, settings: Optional[Settings] = None) -> Path:
    """BLAST the input on the grid and return the merged output file."""
    return GridBlastRun(config, settings).run()
