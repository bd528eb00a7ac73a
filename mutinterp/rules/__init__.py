"""
Rule engine components.

Each step of the interpretation is a pure function of the score matrix,
the wild type and the rule configuration:

- statistics: per-position counts and best/worst candidates
- classifier: ordered first-match position classes
- chemistry: chemical-group means, dominant groups, charged override
- targets: globally ranked excellent optimisation sites
- preferences: position-independent residue and group tendencies
- ranking: top beneficial and harmful substitutions
- config: the rule configuration model and its loaders
"""

from .chemistry import (
    CHARGED_GROUPS,
    analyze_chemistry_groups,
    resolve_group_indices,
    should_apply_charged_override,
)
from .classifier import FALLBACK_CLASS, PositionTier, classify_position, tier_of
from .config import (
    ClassRule,
    RuleConditions,
    RuleConfig,
    Thresholds,
    load_config,
    parse_config,
    reference_config,
)
from .preferences import compute_global_preferences
from .ranking import enumerate_mutations, rank_mutations
from .statistics import compute_position_stats
from .targets import find_consecutive_runs, mark_excellent_targets

__all__ = [
    # Configuration
    "RuleConfig",
    "Thresholds",
    "ClassRule",
    "RuleConditions",
    "load_config",
    "parse_config",
    "reference_config",
    # Steps
    "compute_position_stats",
    "classify_position",
    "analyze_chemistry_groups",
    "should_apply_charged_override",
    "mark_excellent_targets",
    "find_consecutive_runs",
    "compute_global_preferences",
    "rank_mutations",
    "enumerate_mutations",
    # Helpers
    "PositionTier",
    "FALLBACK_CLASS",
    "tier_of",
    "resolve_group_indices",
    "CHARGED_GROUPS",
]
