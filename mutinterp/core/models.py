"""
Core data models for MutInterp.

Two families of structures are defined here:

* Intermediate, per-position values produced while the rules run
  (:class:`PositionStats`, :class:`PositionClass`,
  :class:`ChemistryAnalysis`). These are frozen dataclasses; each is built
  once per position and never modified.
* The published result (:class:`InterpretationResult` and its parts).
  These use Pydantic for validation and JSON serialization, and are frozen
  as well so that a result cannot drift after construction.

Positions are 0-based internally (``pos_index``) and 1-based everywhere a
human reads them (``pos1``, ``Mutation.position`` and all result position
lists).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Annotated, Mapping, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer


def freeze_scores(scores: Mapping[str, float]) -> Mapping[str, float]:
    """Read-only copy of a score mapping."""
    return MappingProxyType(dict(scores))


# Validates and serializes as a plain dict, stored read-only
FrozenScores = Annotated[
    dict[str, float],
    AfterValidator(freeze_scores),
    PlainSerializer(dict, return_type=dict[str, float]),
]


# =============================================================================
# Intermediate values
# =============================================================================

@dataclass(frozen=True)
class PositionStats:
    """
    Summary statistics of one matrix column.

    Attributes:
        pos_index: 0-based position
        pos1: 1-based position
        wt_aa: Wild-type residue at this position
        column: Deltas for every candidate, in aa_list order
        num_improve: Candidates with delta > improve threshold
        num_degrade: Candidates with delta < degrade threshold
        num_neutral: Candidates with |delta| < neutral_abs
        best_aa / best_score: Highest delta (first in aa_list order on ties)
        worst_aa / worst_score: Lowest delta (first in aa_list order on ties)
    """
    pos_index: int
    pos1: int
    wt_aa: str
    column: tuple[float, ...]
    num_improve: int
    num_degrade: int
    num_neutral: int
    best_aa: str
    best_score: float
    worst_aa: str
    worst_score: float

    @property
    def max_score(self) -> float:
        """Alias of best_score."""
        return self.best_score


@dataclass(frozen=True)
class PositionClass:
    """Classification of a position: identifier and display label."""
    class_id: str
    class_label: str


@dataclass(frozen=True)
class ChemistryAnalysis:
    """
    Chemical-group view of one column.

    At most one beneficial and one harmful dominant group are reported,
    and never the same group for both.
    """
    group_means: Mapping[str, float] = field(default_factory=dict)
    dominant_beneficial_group: Optional[str] = None
    dominant_harmful_group: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "group_means", freeze_scores(self.group_means))


# =============================================================================
# Published result
# =============================================================================

class Mutation(BaseModel):
    """A single substitution away from the wild type."""
    model_config = ConfigDict(frozen=True)

    from_aa: str = Field(..., description="Wild-type residue")
    to_aa: str = Field(..., description="Substituted residue")
    position: int = Field(..., ge=1, description="1-based position")
    delta: float = Field(..., description="Predicted functional impact (ΔBFI)")

    @property
    def label(self) -> str:
        """Conventional mutation notation, e.g. 'K12W'."""
        return f"{self.from_aa}{self.position}{self.to_aa}"


class GlobalAAPreference(BaseModel):
    """Position-independent tendency of one candidate residue."""
    model_config = ConfigDict(frozen=True)

    aa: str
    aa_group: Optional[str] = Field(None, description="First configured group containing the residue")
    mean: float
    improve_count: int = Field(..., ge=0)
    degrade_count: int = Field(..., ge=0)


class GlobalGroupPreference(BaseModel):
    """Mean of member residues' global means for one chemical group."""
    model_config = ConfigDict(frozen=True)

    group: str
    mean: float


class PositionInterpretation(BaseModel):
    """Everything reported for one position, including its narrative."""
    model_config = ConfigDict(frozen=True)

    pos_index: int = Field(..., ge=0)
    pos1: int = Field(..., ge=1)
    wt_aa: str

    # Classification
    class_id: str
    class_label: str

    # Statistics
    num_improve: int
    num_degrade: int
    num_neutral: int
    best_aa: str
    best_score: float
    worst_aa: str
    worst_score: float
    max_score: float = Field(..., description="Same value as best_score")

    # Chemistry
    group_means: FrozenScores = Field(default_factory=lambda: MappingProxyType({}))
    dominant_beneficial_group: Optional[str] = None
    dominant_harmful_group: Optional[str] = None

    # Flags
    is_conserved_charged: bool = False
    is_excellent_target: bool = False

    # Narrative
    header: str
    basic_stats: str
    chemistry_text: tuple[str, ...] = ()
    full_text: str


class InterpretationResult(BaseModel):
    """
    Complete interpretation of a mutational scanning matrix.

    Built once by the engine; every position list is 1-based and in
    sequence order.
    """
    model_config = ConfigDict(frozen=True)

    positions: tuple[PositionInterpretation, ...]

    # Position lists
    conserved_positions: tuple[int, ...] = ()
    sensitive_positions: tuple[int, ...] = ()
    designable_positions: tuple[int, ...] = ()
    neutral_positions: tuple[int, ...] = ()
    excellent_target_positions: tuple[int, ...] = ()
    designable_runs: tuple[tuple[int, ...], ...] = Field(
        (),
        description="Runs of at least three adjoining designable positions",
    )

    # Global preferences
    aa_preferences: tuple[GlobalAAPreference, ...] = ()
    group_preferences: tuple[GlobalGroupPreference, ...] = ()

    # Rankings
    top_beneficial_mutations: tuple[Mutation, ...] = ()
    top_harmful_mutations: tuple[Mutation, ...] = ()

    # Summary
    total_positions: int = Field(..., ge=0)
    structurally_conserved_count: int = Field(..., ge=0)
    global_summary: str
    mutation_report: str = ""

    def position(self, pos1: int) -> PositionInterpretation:
        """Look up a position by its 1-based index."""
        if not 1 <= pos1 <= len(self.positions):
            raise IndexError(f"Position {pos1} outside 1..{len(self.positions)}")
        return self.positions[pos1 - 1]
