"""
BLAST orchestration for GO term mapping.

Modules:
- options: option validation and the frozen RunConfig
- command: BLAST command-line construction
- local: run BLAST on this machine
- grid: run BLAST as a grid array job
- results: parse tabular results and transfer GO terms
"""
