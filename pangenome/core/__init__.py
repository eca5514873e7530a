"""
Pangenome Core Package

This package contains configuration shared by the command-line tools.

Modules:
- settings: tool locations and grid tunables

Environment Variables:
    BLASTN / BLASTP: BLAST+ executables
    BLASTDB_DIR: Directory holding the default BLAST databases
    QSUB / QSTAT: Grid engine submission and status commands
"""
