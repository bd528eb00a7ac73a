"""
MutInterp test suite.

Tests are organized by module:
- test_config: Rule configuration model and loaders
- test_matrix: Matrix validation, loading and FASTA input
- test_rules: Individual analysis steps
- test_narrative: Template filling and report text
- test_engine: End-to-end interpretation
- test_cli: Export and command-line interface
"""
