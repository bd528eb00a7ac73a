"""
Core data structures and utilities for MutInterp.

Modules:
    models: Per-position values and the Pydantic result models
    matrix: Score matrix validation, column access and file loading
    sequence: Wild-type FASTA parsing
    exceptions: Error hierarchy shared by the whole package
"""

from .exceptions import (
    ConfigError,
    InterpretationError,
    MatrixShapeError,
    MissingConfigKeyError,
    TemplateError,
)
from .matrix import ScoreMatrix, as_matrix, get_column, load_matrix
from .models import (
    ChemistryAnalysis,
    GlobalAAPreference,
    GlobalGroupPreference,
    InterpretationResult,
    Mutation,
    PositionClass,
    PositionInterpretation,
    PositionStats,
)
from .sequence import (
    STANDARD_AA,
    SequenceError,
    WildTypeRecord,
    clean_sequence,
    parse_fasta,
    read_wild_type,
    sequence_hash,
)

__all__ = [
    # Models
    "PositionStats",
    "PositionClass",
    "ChemistryAnalysis",
    "Mutation",
    "GlobalAAPreference",
    "GlobalGroupPreference",
    "PositionInterpretation",
    "InterpretationResult",
    # Matrix
    "ScoreMatrix",
    "as_matrix",
    "get_column",
    "load_matrix",
    # Sequence utilities
    "WildTypeRecord",
    "SequenceError",
    "parse_fasta",
    "read_wild_type",
    "clean_sequence",
    "sequence_hash",
    "STANDARD_AA",
    # Errors
    "InterpretationError",
    "MatrixShapeError",
    "MissingConfigKeyError",
    "TemplateError",
    "ConfigError",
]
