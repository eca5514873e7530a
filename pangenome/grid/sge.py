"""
Sun Grid Engine job submission and polling.

Jobs are submitted with ``qsub`` and waited on by polling ``qstat -j``
until the scheduler no longer knows the job id. Scheduling itself is
entirely up to the grid engine.
"""
from __future__ import annotations

import logging
import re
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from pangenome.core.settings import Settings, settings as default_settings
from pangenome.exceptions import GridError

logger = logging.getLogger(__name__)

# e.g. 'Your job-array 4242.1-3:1 ("grid_blast.sh") has been submitted'
_JOB_ID_RE = re.compile(r"Your job(?:-array)? (\d+)")

TASK_ID_VARIABLE = "SGE_TASK_ID"


@dataclass(frozen=True)
class GridJob:
    """A submitted job; only the id is meaningful to the scheduler."""

    job_id: str
    array_size: int = 1


def parse_job_id(qsub_output: str) -> str:
    """
    Extract the job id from qsub's confirmation message.

    Raises:
        GridError: if no id is present
    """
    match = _JOB_ID_RE.search(qsub_output)
    if not match:
        raise GridError(f"Could not find a job id in qsub output: {qsub_output.strip()!r}")
    return match.group(1)


def build_qsub_command(
    project: str,
    working_dir: Path,
    script: Path,
    stdout_name: str,
    stderr_name: str,
    array_size: int = 1,
    queue: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> List[str]:
    """
    Build the qsub command line.

    Args:
        project: Grid accounting project code
        working_dir: Job working directory; stdout/stderr land here
        script: Shell script to run
        stdout_name: File name for job stdout
        stderr_name: File name for job stderr
        array_size: Number of array tasks; tasks are numbered 1..array_size
        queue: Optional queue name
        settings: Tool settings

    Returns:
        Command line as list of strings
    """
    settings = settings or default_settings
    if array_size < 1:
        raise GridError(f"Array size must be at least 1, got {array_size}")

    cmd = [
        settings.qsub_exec,
        "-P", project,
        "-wd", str(working_dir),
        "-o", str(working_dir / stdout_name),
        "-e", str(working_dir / stderr_name),
        "-S", settings.grid_shell,
    ]
    if queue:
        cmd.extend(["-q", queue])
    # Always an array job, so the task id is set even for one chunk
    cmd.extend(["-t", f"1-{array_size}"])
    cmd.append(str(script))
    return cmd


def launch_grid_job(
    project: str,
    working_dir: Path,
    script: Path,
    stdout_name: str,
    stderr_name: str,
    array_size: int = 1,
    queue: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> GridJob:
    """
    Submit a script as an array job.

    Returns:
        GridJob for polling

    Raises:
        GridError: if qsub fails or prints no job id
    """
    cmd = build_qsub_command(
        project, working_dir, script, stdout_name, stderr_name,
        array_size=array_size, queue=queue, settings=settings,
    )
    logger.info(f"Submitting grid job: {' '.join(cmd)}")

    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        raise GridError(f"Could not run qsub: {e}") from e

    if result.returncode != 0:
        raise GridError(f"qsub failed: {result.stderr.strip() or result.stdout.strip()}")

    job = GridJob(job_id=parse_job_id(result.stdout), array_size=array_size)
    logger.info(f"Submitted job {job.job_id} with {job.array_size} tasks")
    return job


def job_is_running(job: GridJob, settings: Optional[Settings] = None) -> bool:
    """True while qstat still knows the job (queued, running or held)."""
    settings = settings or default_settings
    try:
        result = subprocess.run(
            [settings.qstat_exec, "-j", job.job_id],
            capture_output=True,
            text=True,
        )
    except OSError as e:
        raise GridError(f"Could not run qstat: {e}") from e
    return result.returncode == 0


def wait_for_grid_jobs(
    jobs: Sequence[GridJob],
    poll_interval: Optional[float] = None,
    timeout: Optional[float] = None,
    settings: Optional[Settings] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """
    Block until none of the jobs are known to the scheduler.

    Args:
        jobs: Submitted jobs
        poll_interval: Seconds between polls (default from settings)
        timeout: Give up after this many seconds (default from settings;
            None waits forever)
        settings: Tool settings
        sleep: Sleep function, replaceable in tests

    Raises:
        GridError: if the timeout expires
    """
    settings = settings or default_settings
    if poll_interval is None:
        poll_interval = settings.grid_poll_interval
    if timeout is None:
        timeout = settings.grid_wait_timeout

    pending = list(jobs)
    started = time.monotonic()

    while pending:
        pending = [job for job in pending if job_is_running(job, settings)]
        if not pending:
            break

        if timeout is not None and time.monotonic() - started >= timeout:
            ids = ", ".join(job.job_id for job in pending)
            raise GridError(f"Timed out after {timeout}s waiting for grid jobs: {ids}")

        logger.debug(f"{len(pending)} grid job(s) still running")
        sleep(poll_interval)
