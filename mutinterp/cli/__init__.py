"""
Command-line interface for MutInterp.

Usage patterns:
    mutinterp interpret heatmap.csv --sequence AVKLG -o results/
    mutinterp show-config
    mutinterp validate-config rules.json
"""

from .main import cli, main

__all__ = ["cli", "main"]
