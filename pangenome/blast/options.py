"""
Run configuration and option validation for map_go_via_blast.

Exactly one of three modes is chosen on the command line:

- ``--project``: split the input and BLAST it as a grid array job
- ``--blast_local``: BLAST the whole input on this machine
- ``--blast_file``: skip BLAST and read an existing result file

Every violation found is collected and raised together as one
``OptionError``.
"""
from __future__ import annotations

import math
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from pangenome.exceptions import OptionError
from pangenome.utils.file_io import has_content

DEFAULT_EVALUE = "10e-5"
DEFAULT_PERCENT_ID = 35
DEFAULT_PERCENT_COV = 80

MODE_FLAGS = "--project, --blast_local, or --blast_file"


class RunMode(str, Enum):
    """How BLAST results are obtained."""

    GRID = "grid"
    LOCAL = "local"
    EXISTING = "existing"


@dataclass(frozen=True)
class RunConfig:
    """Validated options for one run."""

    mode: RunMode
    input_seqs: Path
    working_dir: Path
    log_dir: Path
    project: Optional[str] = None
    blast_file: Optional[Path] = None
    search_db: Optional[str] = None
    evalue: str = DEFAULT_EVALUE
    percent_id: int = DEFAULT_PERCENT_ID
    percent_cov: int = DEFAULT_PERCENT_COV
    use_nuc: bool = False
    go_map: Optional[Path] = None

    @property
    def result_file(self) -> Path:
        """Where BLAST results are read from."""
        if self.mode is RunMode.EXISTING:
            return self.blast_file
        return self.working_dir / "blast_output"

    @property
    def blast_log(self) -> Path:
        return self.log_dir / "blast.log"


def _check_percent(name: str, value: Optional[int], errors: list[str]) -> None:
    if value is not None and not 0 <= value <= 100:
        errors.append(f"--{name} must be between 0 and 100, got {value}.")


def validate_options(
    project: Optional[str] = None,
    blast_local: bool = False,
    blast_file: Optional[str] = None,
    input_seqs: Optional[str] = None,
    search_db: Optional[str] = None,
    evalue: Optional[str] = None,
    percent_id: Optional[int] = None,
    percent_cov: Optional[int] = None,
    use_nuc: bool = False,
    working_dir: Optional[str] = None,
    log_dir: Optional[str] = None,
    go_map: Optional[str] = None,
) -> RunConfig:
    """
    Validate raw option values and build a RunConfig.

    Args mirror the command-line flags; unset values are None/False.

    Returns:
        Frozen RunConfig with defaults applied

    Raises:
        OptionError: listing every problem found
    """
    errors: list[str] = []

    modes_set = sum(bool(flag) for flag in (project, blast_local, blast_file))
    if modes_set > 1:
        errors.append(f"Please specify only one of {MODE_FLAGS}")
    elif modes_set == 0:
        errors.append(f"Please specify one of {MODE_FLAGS}")

    if blast_file and not has_content(Path(blast_file)):
        errors.append(f"--blast_file {blast_file} has no size or doesn't exist.")

    if input_seqs:
        if not has_content(Path(input_seqs)):
            errors.append(f"input seq file {input_seqs} is empty or non-existent.")
    else:
        errors.append("--input_seqs is necessary.")

    if evalue is not None:
        try:
            value = float(evalue)
        except ValueError:
            errors.append(f"--evalue {evalue} is not a number.")
        else:
            if not math.isfinite(value) or value <= 0:
                errors.append(f"--evalue {evalue} must be a positive finite number.")

    _check_percent("percent_id", percent_id, errors)
    _check_percent("percent_cov", percent_cov, errors)

    if go_map and not has_content(Path(go_map)):
        errors.append(f"--go_map {go_map} has no size or doesn't exist.")

    if errors:
        raise OptionError(errors)

    if project:
        mode = RunMode.GRID
    elif blast_local:
        mode = RunMode.LOCAL
    else:
        mode = RunMode.EXISTING

    # grid tasks start in working_dir, so every path must be absolute
    cwd = os.getcwd()
    return RunConfig(
        mode=mode,
        input_seqs=Path(input_seqs).resolve(),
        working_dir=Path(working_dir or cwd).resolve(),
        log_dir=Path(log_dir or cwd).resolve(),
        project=project,
        blast_file=Path(blast_file).resolve() if blast_file else None,
        search_db=search_db,
        evalue=evalue if evalue is not None else DEFAULT_EVALUE,
        percent_id=percent_id if percent_id is not None else DEFAULT_PERCENT_ID,
        percent_cov=percent_cov if percent_cov is not None else DEFAULT_PERCENT_COV,
        use_nuc=use_nuc,
        go_map=Path(go_map).resolve() if go_map else None,
    )
