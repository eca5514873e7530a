"""
Pytest fixtures for pangenome tool tests.

Provides temporary directories, sample FASTA and BLAST content, and a
Settings object that does not depend on the environment.
"""
import logging
import tempfile
from pathlib import Path

import pytest

from pangenome.core.settings import Settings


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def temp_file(temp_dir):
    """Create a temporary file."""
    def _create_file(name: str, content: str = "") -> Path:
        file_path = temp_dir / name
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content)
        return file_path
    return _create_file


@pytest.fixture
def settings():
    """Settings with fixed tool names and no polling delay."""
    return Settings(
        BLASTN="blastn",
        BLASTP="blastp",
        BLASTDB_DIR="/db",
        BLASTN_DB="nuc.seq",
        BLASTP_DB="prot.pep",
        SPLIT_FASTA="split_fasta.pl",
        SPLIT_CHUNK_SIZE=2,
        QSUB="qsub",
        QSTAT="qstat",
        GRID_SHELL="/bin/tcsh",
        GRID_POLL_INTERVAL=0,
        FIG2DEV="fig2dev",
    )


@pytest.fixture
def sample_fasta_content():
    """Sample protein FASTA content for testing."""
    return """>orf19.1 Actin
MDSEVAALVIDNGSGMCKAGFAGDDAPRAVFPSIVGRP
>orf19.2 Tubulin
MREIVHIQAGQCGNQIGAKFWEVISDEHGIDP
>orf19.3 GTPase
MQTIKCVVVGDGAVGKTCLLISYTTNKFPSEYVPTVFDNY
"""


@pytest.fixture
def sample_blast_content():
    """Sample 12-column tabular BLAST output."""
    return (
        "orf19.1\tP60010\t98.50\t375\t5\t0\t1\t375\t1\t375\t0.0\t760\n"
        "orf19.1\tQ12345\t60.00\t370\t140\t2\t1\t370\t3\t372\t1e-50\t300\n"
        "orf19.2\tP02557\t40.00\t440\t250\t4\t1\t440\t1\t447\t1e-90\t350\n"
        "orf19.3\tP19073\t30.00\t190\t130\t1\t1\t190\t1\t191\t1e-20\t90.5\n"
    )


@pytest.fixture(autouse=True)
def reset_pangenome_logger():
    """Drop handlers the CLI entry points attach to the package logger."""
    yield
    log = logging.getLogger("pangenome")
    for handler in list(log.handlers):
        log.removeHandler(handler)
        handler.close()
