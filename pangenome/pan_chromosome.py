"""
Build the pan-chromosome circular figure.

Runs after gene_order has produced ``results/fGIs`` under the pan-genome
base directory. The helper scripts draw an xfig file which fig2dev turns
into a PDF.
"""
from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional

from pangenome.core.settings import Settings, settings as default_settings
from pangenome.exceptions import PangenomeError, ToolError

logger = logging.getLogger(__name__)

CORE_ATT = "Core.attfGI"
SHARED_CLUSTERS = "shared_clusters.txt"
FIG_FILE = "pan-chromosome.fig"
PDF_FILE = "pan-chromosome.pdf"

GENOME_ATT_SCRIPT = "make_db2circle_genome_att.pl"
CIRCLE_SCRIPT = "db2circle_rainbow_flatfile.spl"


def _run_step(step: str, cmd: List[str], cwd: Path, stdout=None) -> None:
    logger.info(f"{step}: {' '.join(cmd)}")
    try:
        result = subprocess.run(
            cmd,
            cwd=str(cwd),
            stdout=stdout,
            stderr=subprocess.PIPE,
            text=True,
        )
    except OSError as e:
        raise ToolError(f"{step} failed: {e}") from e
    if result.returncode != 0:
        raise ToolError(f"{step} failed (exit {result.returncode}): {(result.stderr or '').strip()}")


def make_pan_chromosome_fig(
    base_dir: Path,
    bin_dir: Optional[Path] = None,
    settings: Optional[Settings] = None,
) -> Path:
    """
    Generate ``pan-chromosome.pdf`` in ``<base_dir>/results/fGIs``.

    Args:
        base_dir: Pan-genome base directory
        bin_dir: Directory holding the circle helper scripts
        settings: Tool settings

    Returns:
        Path to the PDF

    Raises:
        PangenomeError: if inputs are missing
        ToolError: if any step fails
    """
    settings = settings or default_settings
    if bin_dir is None:
        if not settings.pan_chromosome_bin:
            raise PangenomeError("No helper directory given; set PAN_CHROMOSOME_BIN or --bin_dir")
        bin_dir = Path(settings.pan_chromosome_bin)

    results_dir = Path(base_dir) / "results" / "fGIs"
    if not results_dir.is_dir():
        raise PangenomeError(f"{results_dir} does not exist")

    missing = [name for name in (CORE_ATT, SHARED_CLUSTERS) if not (results_dir / name).is_file()]
    if missing:
        raise PangenomeError(f"Missing required files in {results_dir}: {', '.join(missing)}")

    logger.info(f"path = {results_dir}")

    _run_step(
        "Generating files for circle making",
        [str(bin_dir / GENOME_ATT_SCRIPT), "-a", CORE_ATT, "-c", SHARED_CLUSTERS],
        results_dir,
    )

    with open(results_dir / FIG_FILE, "w") as fig_fh:
        _run_step(
            "Making xfig pan-chromosome file",
            [str(bin_dir / CIRCLE_SCRIPT), "-G", "genome.att", "-c", "config.file", "-F", "data.file"],
            results_dir,
            stdout=fig_fh,
        )

    _run_step(
        "Converting to .pdf",
        [settings.fig2dev_exec, "-L", "pdf", FIG_FILE, PDF_FILE],
        results_dir,
    )

    logger.info("Finished making the pan-chromosome circular figure.")
    return results_dir / PDF_FILE
