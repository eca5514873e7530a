"""
Pangenome Tools Tests

Test Organization:
- test_options.py: option validation
- test_command.py, test_local_blast.py: BLAST command lines and local runs
- test_sge.py, test_grid_blast.py: grid submission and the split/merge workflow
- test_results.py: tabular result parsing and GO transfer
- test_fasta.py, test_file_io.py: utilities
- test_*_cli.py: command-line entry points

Running Tests:
    pytest tests/
"""
