"""
MutInterp: rule-based interpretation of peptide mutational scanning matrices.

Deep mutational scanning, experimental or predicted, yields one
functional-impact score for every possible single substitution of a
peptide: a 20 x L matrix of deltas (here ΔBFI). Read cell by cell, such a
matrix is hard to act on. MutInterp condenses it into the statements a
peptide designer needs:

- which positions are intolerant and should be conserved,
- which positions are designable and worth optimising,
- which chemistries each position favours or rejects,
- which individual substitutions are the most promising or damaging.

Interpretation is deterministic and driven entirely by a rule
configuration (thresholds, chemical groups, ordered classification rules
and text templates), so that every statement in a report can be traced
back to the matrix and the rules that produced it.

Key components:
    - core: Data models, matrix validation and loading, FASTA input
    - rules: Rule configuration and the individual analysis steps
    - narrative: Template filling and report text
    - engine: The orchestrating InterpretationEngine
    - export: JSON and TSV output
    - cli: Command-line interface

Basic usage:
    >>> from mutinterp import interpret
    >>> result = interpret(heatmap, "AVKLG")
    >>> print(result.global_summary)
    >>> for pos in result.positions:
    ...     print(pos.full_text)
"""

__version__ = "0.1.0"

from .core.exceptions import (
    ConfigError,
    InterpretationError,
    MatrixShapeError,
    MissingConfigKeyError,
    TemplateError,
)
from .core.matrix import ScoreMatrix, load_matrix
from .core.models import (
    InterpretationResult,
    Mutation,
    PositionInterpretation,
)
from .engine import InterpretationEngine, interpret
from .rules.config import RuleConfig, load_config, reference_config

__all__ = [
    "__version__",
    # Entry points
    "interpret",
    "InterpretationEngine",
    # Configuration
    "RuleConfig",
    "load_config",
    "reference_config",
    # Data
    "ScoreMatrix",
    "load_matrix",
    "InterpretationResult",
    "PositionInterpretation",
    "Mutation",
    # Errors
    "InterpretationError",
    "MatrixShapeError",
    "MissingConfigKeyError",
    "TemplateError",
    "ConfigError",
]
