"""
Interpretation engine for mutational scanning matrices.

The engine runs the rule steps over every position of a wild-type peptide
and assembles a single :class:`InterpretationResult`:

1. Validate the matrix against the residue list and the wild type
2. Per position: statistics, class, chemistry analysis, charged override
3. Across positions: excellent target selection
4. Across the matrix: global residue/group preferences, mutation rankings
5. Narrative: per-position text, global summary, mutation report

Every step is a pure function of (matrix, wild type, configuration), so
identical inputs always give an identical result, narrative included.
Positions are processed and reported in sequence order. The call either
returns a complete result or raises an :class:`InterpretationError`;
nothing partial is ever produced.

Usage:
    >>> from mutinterp import InterpretationEngine
    >>> engine = InterpretationEngine()          # reference configuration
    >>> result = engine.interpret(heatmap, "AVK")
    >>> print(result.global_summary)
    >>> for pos in result.positions:
    ...     print(pos.full_text)
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from .core.matrix import ArrayLike, ScoreMatrix, as_matrix
from .core.models import InterpretationResult
from .narrative.text import (
    generate_global_summary,
    generate_mutation_report,
    generate_position_text,
)
from .rules.chemistry import (
    analyze_chemistry_groups,
    resolve_group_indices,
    should_apply_charged_override,
)
from .rules.classifier import PositionTier, classify_position, tier_of
from .rules.config import RuleConfig, reference_config
from .rules.preferences import compute_global_preferences
from .rules.ranking import rank_mutations
from .rules.statistics import compute_position_stats
from .rules.targets import find_consecutive_runs, mark_excellent_targets

logger = logging.getLogger(__name__)

# Shortest stretch of adjoining designable positions reported as a run
MIN_DESIGNABLE_RUN = 3


class InterpretationEngine:
    """
    Rule-based interpreter bound to one configuration.

    Attributes:
        config: Rule configuration applied to every matrix
    """

    def __init__(self, config: Optional[RuleConfig] = None):
        """
        Args:
            config: Rule configuration (the packaged reference if None)
        """
        self.config = config or reference_config()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(residues={self.config.n_candidates}, "
            f"rules={len(self.config.position_class_rules)})"
        )

    def _warn_empty_groups(self) -> None:
        indices = resolve_group_indices(self.config.aa_list, self.config.aa_groups)
        for group, rows in indices.items():
            if not rows:
                logger.warning(
                    f"Group '{group}' has no members in aa_list; its mean is reported as 0.0"
                )

    def interpret(
        self,
        matrix: Union[ArrayLike, ScoreMatrix],
        wt_seq: Optional[str] = None,
    ) -> InterpretationResult:
        """
        Interpret a score matrix.

        Args:
            matrix: [candidate][position] deltas, rows in aa_list order, or
                a ScoreMatrix (whose own sequence is used if wt_seq is None)
            wt_seq: Wild-type sequence, one residue id per character

        Returns:
            Complete InterpretationResult

        Raises:
            MatrixShapeError: If the inputs disagree in shape
            MissingConfigKeyError: If a referenced configuration key is absent
            TemplateError: If a template cannot be fully filled
        """
        config = self.config
        aa_list = config.aa_list

        if isinstance(matrix, ScoreMatrix):
            if tuple(aa_list) != matrix.aa_list:
                matrix = matrix.reordered(aa_list)
            wt_seq = wt_seq if wt_seq is not None else matrix.sequence
            matrix = matrix.values
        if wt_seq is None:
            raise TypeError("interpret() needs a wild-type sequence")

        values = as_matrix(matrix, aa_list, wt_seq)
        n_positions = len(wt_seq)
        logger.debug(f"Interpreting {len(aa_list)}x{n_positions} matrix for {wt_seq}")
        self._warn_empty_groups()

        # Per-position steps
        all_stats = [
            compute_position_stats(values, i, wt_seq[i], config)
            for i in range(n_positions)
        ]
        all_classes = [classify_position(stats, config) for stats in all_stats]
        all_chemistry = [
            analyze_chemistry_groups(stats.column, aa_list, config)
            for stats in all_stats
        ]
        charged_overrides = [
            should_apply_charged_override(stats.wt_aa, cls.class_id, config)
            for stats, cls in zip(all_stats, all_classes)
        ]

        # Cross-position and whole-matrix steps
        excellent_targets = mark_excellent_targets(all_stats, all_classes, config)
        aa_prefs, group_prefs = compute_global_preferences(values, config)
        top_beneficial, top_harmful = rank_mutations(
            values, wt_seq, aa_list, config.thresholds.top_k_mutations
        )

        positions = [
            generate_position_text(
                stats,
                all_classes[i],
                all_chemistry[i],
                charged_overrides[i],
                i in excellent_targets,
                config,
            )
            for i, stats in enumerate(all_stats)
        ]

        tiers = [tier_of(p.class_id) for p in positions]
        conserved = [
            p.pos1 for p, t in zip(positions, tiers) if t is PositionTier.HIGHLY_SENSITIVE
        ]
        sensitive = [p.pos1 for p, t in zip(positions, tiers) if t is not None and t.is_sensitive]
        designable = [p.pos1 for p, t in zip(positions, tiers) if t is not None and t.is_designable]
        neutral = [p.pos1 for p, t in zip(positions, tiers) if t is PositionTier.NEUTRAL]
        excellent = [p.pos1 for p in positions if p.is_excellent_target]

        global_summary = generate_global_summary(
            conserved, sensitive, designable, group_prefs, config
        )
        mutation_report = generate_mutation_report(top_beneficial, top_harmful, config)

        logger.info(
            f"Interpreted {n_positions} positions: {len(conserved)} conserved, "
            f"{len(sensitive)} sensitive, {len(designable)} designable, "
            f"{len(excellent)} excellent target(s)"
        )

        return InterpretationResult(
            positions=positions,
            conserved_positions=conserved,
            sensitive_positions=sensitive,
            designable_positions=designable,
            neutral_positions=neutral,
            excellent_target_positions=excellent,
            designable_runs=find_consecutive_runs(designable, MIN_DESIGNABLE_RUN),
            aa_preferences=aa_prefs,
            group_preferences=group_prefs,
            top_beneficial_mutations=top_beneficial,
            top_harmful_mutations=top_harmful,
            total_positions=n_positions,
            structurally_conserved_count=len(conserved),
            global_summary=global_summary,
            mutation_report=mutation_report,
        )


def interpret(
    matrix: Union[ArrayLike, ScoreMatrix],
    wt_seq: Optional[str] = None,
    config: Optional[RuleConfig] = None,
) -> InterpretationResult:
    """
    Interpret a score matrix in one call.

    Args:
        matrix: [candidate][position] deltas, rows in aa_list order
        wt_seq: Wild-type sequence
        config: Rule configuration (the packaged reference if None)

    Returns:
        Complete InterpretationResult
    """
    return InterpretationEngine(config).interpret(matrix, wt_seq)
