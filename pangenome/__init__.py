"""
Pan-genome helper tools.

Wrappers around BLAST+, a grid engine scheduler and the pan-chromosome
figure helpers.
"""

__version__ = "0.1.0"
