"""Grid engine submission helpers."""

from pangenome.grid.sge import (
    GridJob,
    TASK_ID_VARIABLE,
    launch_grid_job,
    wait_for_grid_jobs,
)

__all__ = [
    "GridJob",
    "TASK_ID_VARIABLE",
    "launch_grid_job",
    "wait_for_grid_jobs",
]
