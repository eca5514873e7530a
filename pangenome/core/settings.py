from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Tool settings.

    Every value has a default so the tools run on a stock install with
    BLAST+ and the grid engine binaries on PATH.

    Optional:
      - BLASTDB_DIR: directory holding the default search databases
      - SPLIT_FASTA: external splitter command (defaults to the bundled one)
      - GRID_WAIT_TIMEOUT: give up waiting on an array job after N seconds
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # BLAST configuration
    blastn_exec: str = Field(default="blastn", validation_alias="BLASTN")
    blastp_exec: str = Field(default="blastp", validation_alias="BLASTP")
    blast_db_dir: str = Field(
        default="/usr/local/scratch/PROK/blastdb",
        validation_alias="BLASTDB_DIR",
    )
    blastn_db_name: str = Field(
        default="plasmid_finder_rep.seq",
        validation_alias="BLASTN_DB",
        description="Default nucleotide database, relative to BLASTDB_DIR",
    )
    blastp_db_name: str = Field(
        default="plasmid_finder_rep.pep",
        validation_alias="BLASTP_DB",
        description="Default protein database, relative to BLASTDB_DIR",
    )

    # FASTA splitting
    split_fasta_exec: Optional[str] = Field(
        default=None,
        validation_alias="SPLIT_FASTA",
        description="Splitter command; None runs python -m pangenome.cli.split_fasta",
    )
    split_chunk_size: int = Field(
        default=1000,
        validation_alias="SPLIT_CHUNK_SIZE",
        description="Sequences per chunk when splitting for the grid",
    )

    # Grid engine configuration
    qsub_exec: str = Field(default="qsub", validation_alias="QSUB")
    qstat_exec: str = Field(default="qstat", validation_alias="QSTAT")
    grid_shell: str = Field(default="/bin/tcsh", validation_alias="GRID_SHELL")
    grid_poll_interval: float = Field(
        default=30,
        validation_alias="GRID_POLL_INTERVAL",
        description="Seconds between qstat polls",
    )
    grid_wait_timeout: Optional[float] = Field(
        default=None,
        validation_alias="GRID_WAIT_TIMEOUT",
        description="Seconds to wait for an array job; None waits forever",
    )

    # Pan-chromosome figure
    fig2dev_exec: str = Field(default="/usr/bin/fig2dev", validation_alias="FIG2DEV")
    pan_chromosome_bin: Optional[str] = Field(
        default=None,
        validation_alias="PAN_CHROMOSOME_BIN",
        description="Directory holding make_db2circle_genome_att.pl and friends",
    )


settings = Settings()
