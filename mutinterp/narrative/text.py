"""
Narrative generation.

Turns the structured outputs of the rule steps into prose. Each position
gets a header, a statistics sentence and up to three further sentences:

1. Chemistry: for a conserved charged residue, only the override
   sentence; otherwise the beneficial explanation of the dominant
   beneficial group followed by the harmful explanation of the dominant
   harmful group, each omitted when no group dominates.
2. Target flag: appended when the position is an excellent target.

All sentences are joined with single spaces. The global summary is built
the same way from the position lists and group preferences, and the
mutation report lists the ranked substitutions one per line.
"""

from __future__ import annotations

from typing import Any, Sequence

from ..core.models import (
    ChemistryAnalysis,
    GlobalGroupPreference,
    Mutation,
    PositionClass,
    PositionInterpretation,
    PositionStats,
)
from ..rules.config import RuleConfig
from .templates import fill_template, format_score


def _render(config: RuleConfig, name: str, variables: dict[str, Any]) -> str:
    return fill_template(config.template(name), variables, name=name)


def position_variables(stats: PositionStats, classification: PositionClass) -> dict[str, Any]:
    """Values available to every position-level template."""
    return {
        "pos1": stats.pos1,
        "wt": stats.wt_aa,
        "class_id": classification.class_id,
        "class_label": classification.class_label,
        "best_AA": stats.best_aa,
        "best_score": format_score(stats.best_score),
        "worst_AA": stats.worst_aa,
        "worst_score": format_score(stats.worst_score),
        "num_improve": stats.num_improve,
        "num_degrade": stats.num_degrade,
        "num_neutral": stats.num_neutral,
    }


def chemistry_sentences(
    chemistry: ChemistryAnalysis,
    is_charged_override: bool,
    is_excellent_target: bool,
    variables: dict[str, Any],
    config: RuleConfig,
) -> list[str]:
    """Chemistry and flag sentences for one position, in report order."""
    sentences = []

    if is_charged_override:
        sentences.append(_render(config, "conserved_charged_override", variables))
    else:
        if chemistry.dominant_beneficial_group is not None:
            group = chemistry.dominant_beneficial_group
            sentences.append(fill_template(
                config.explanation(group, beneficial=True),
                variables,
                name=f"beneficial_explanations.{group}",
            ))
        if chemistry.dominant_harmful_group is not None:
            group = chemistry.dominant_harmful_group
            sentences.append(fill_template(
                config.explanation(group, beneficial=False),
                variables,
                name=f"harmful_explanations.{group}",
            ))

    if is_excellent_target:
        sentences.append(_render(config, "excellent_target", variables))

    return sentences


def generate_position_text(
    stats: PositionStats,
    classification: PositionClass,
    chemistry: ChemistryAnalysis,
    is_charged_override: bool,
    is_excellent_target: bool,
    config: RuleConfig,
) -> PositionInterpretation:
    """
    Assemble the interpretation of one position.

    Raises:
        MissingConfigKeyError: If a required template or explanation is absent
        TemplateError: If a template keeps unresolved placeholders
    """
    variables = position_variables(stats, classification)

    header = _render(config, "position_header", variables)
    basic_stats = _render(config, "position_basic_stats", variables)
    chemistry_text = chemistry_sentences(
        chemistry, is_charged_override, is_excellent_target, variables, config
    )

    return PositionInterpretation(
        pos_index=stats.pos_index,
        pos1=stats.pos1,
        wt_aa=stats.wt_aa,
        class_id=classification.class_id,
        class_label=classification.class_label,
        num_improve=stats.num_improve,
        num_degrade=stats.num_degrade,
        num_neutral=stats.num_neutral,
        best_aa=stats.best_aa,
        best_score=stats.best_score,
        worst_aa=stats.worst_aa,
        worst_score=stats.worst_score,
        max_score=stats.max_score,
        group_means=dict(chemistry.group_means),
        dominant_beneficial_group=chemistry.dominant_beneficial_group,
        dominant_harmful_group=chemistry.dominant_harmful_group,
        is_conserved_charged=is_charged_override,
        is_excellent_target=is_excellent_target,
        header=header,
        basic_stats=basic_stats,
        chemistry_text=chemistry_text,
        full_text=" ".join([header, basic_stats, *chemistry_text]),
    )


def format_positions(positions: Sequence[int], config: RuleConfig) -> str:
    """Comma-separated 1-based positions, or the configured placeholder."""
    if not positions:
        return config.empty_list_placeholder
    return ", ".join(str(p) for p in positions)


def generate_global_summary(
    conserved_positions: Sequence[int],
    sensitive_positions: Sequence[int],
    designable_positions: Sequence[int],
    group_preferences: Sequence[GlobalGroupPreference],
    config: RuleConfig,
) -> str:
    """
    Whole-peptide summary paragraph.

    The group preference sentence receives one ``<group>_mean`` variable
    per configured group.
    """
    group_means = {
        f"{pref.group}_mean": format_score(pref.mean) for pref in group_preferences
    }

    parts = [
        _render(config, "global_summary_header", {}),
        _render(config, "global_structural_core", {
            "core_positions": format_positions(conserved_positions, config),
        }),
        _render(config, "global_sensitive", {
            "sensitive_positions": format_positions(sensitive_positions, config),
        }),
        _render(config, "global_designable", {
            "designable_positions": format_positions(designable_positions, config),
        }),
        _render(config, "global_group_preferences", group_means),
    ]
    return " ".join(parts)


def format_mutation(mutation: Mutation, config: RuleConfig) -> str:
    return _render(config, "mutation_line", {
        "fromAA": mutation.from_aa,
        "toAA": mutation.to_aa,
        "position": mutation.position,
        "deltaBFI": format_score(mutation.delta),
        "label": mutation.label,
    })


def generate_mutation_report(
    top_beneficial: Sequence[Mutation],
    top_harmful: Sequence[Mutation],
    config: RuleConfig,
) -> str:
    """Ranked substitutions under their headers, one per line."""
    lines = [_render(config, "top_beneficial_header", {})]
    lines.extend(format_mutation(m, config) for m in top_beneficial)
    lines.append(_render(config, "top_harmful_header", {}))
    lines.extend(format_mutation(m, config) for m in top_harmful)
    return "\n".join(lines)
