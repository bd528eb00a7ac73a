"""
Chemical group analysis of a position.

A position's column is collapsed onto chemical groups (hydrophobic,
aromatic, charged, polar, ...) by averaging the deltas of each group's
member residues. A group *dominates* when its mean is both beyond an
absolute threshold and ahead of every other group by a configured margin:

    beneficial:  mean > group_beneficial_min  and  mean - other >= group_margin
    harmful:     mean < group_harmful_max     and  other - mean >= group_margin

The margin is tested against all competitors, not only the runner-up, so
several groups sharing a high mean prevents any of them from dominating.
Ties for the highest (or lowest) mean go to the group listed first in the
configuration.

Conserved charged residues
--------------------------
A highly sensitive position whose wild-type residue is charged is most
plausibly a salt bridge or an electrostatic interaction site. For such
positions the group explanation is replaced by a dedicated override
sentence.
"""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

import numpy as np

from ..core.models import ChemistryAnalysis
from .classifier import PositionTier
from .config import RuleConfig

CHARGED_GROUPS = ("positive", "negative")


def resolve_group_indices(
    aa_list: Sequence[str],
    aa_groups: Mapping[str, Sequence[str]],
) -> dict[str, list[int]]:
    """
    Row indices of each group's members.

    Members absent from aa_list are skipped; a group may resolve to no
    rows at all.
    """
    index = {aa: i for i, aa in enumerate(aa_list)}
    return {
        group: [index[aa] for aa in members if aa in index]
        for group, members in aa_groups.items()
    }


def _dominant(
    group_means: dict[str, float],
    margin: float,
    beneficial: bool,
) -> Optional[str]:
    """Group that leads every other group by at least the margin."""
    # max()/min() keep the first of equal keys, i.e. configuration order
    pick = max if beneficial else min
    leader = pick(group_means, key=group_means.__getitem__)
    lead_mean = group_means[leader]

    for group, mean in group_means.items():
        if group == leader:
            continue
        gap = lead_mean - mean if beneficial else mean - lead_mean
        if gap < margin:
            return None
    return leader


def analyze_chemistry_groups(
    column: Sequence[float],
    aa_list: Sequence[str],
    config: RuleConfig,
) -> ChemistryAnalysis:
    """
    Compute group means and detect dominant groups for one column.

    Args:
        column: Deltas for every candidate, in aa_list order
        aa_list: Canonical residue order
        config: Rule configuration

    Returns:
        ChemistryAnalysis with group means in configuration order
    """
    thresholds = config.thresholds
    values = np.asarray(column, dtype=float)

    group_means: dict[str, float] = {}
    for group, indices in resolve_group_indices(aa_list, config.aa_groups).items():
        group_means[group] = float(np.mean(values[indices])) if indices else 0.0

    if not group_means:
        return ChemistryAnalysis()

    beneficial = _dominant(group_means, thresholds.group_margin, beneficial=True)
    if beneficial is not None and group_means[beneficial] <= thresholds.group_beneficial_min:
        beneficial = None

    harmful = _dominant(group_means, thresholds.group_margin, beneficial=False)
    if harmful is not None and group_means[harmful] >= thresholds.group_harmful_max:
        harmful = None

    # One group cannot be both; keep the flag with the larger absolute mean
    if beneficial is not None and beneficial == harmful:
        if abs(group_means[beneficial]) > abs(group_means[harmful]):
            harmful = None
        else:
            beneficial = None

    return ChemistryAnalysis(
        group_means=group_means,
        dominant_beneficial_group=beneficial,
        dominant_harmful_group=harmful,
    )


def should_apply_charged_override(wt_aa: str, class_id: str, config: RuleConfig) -> bool:
    """
    Whether a position is a conserved charged residue.

    True when the position is in the most sensitive tier and the wild-type
    residue belongs to the positive or negative group.

    Raises:
        MissingConfigKeyError: If either charged group is not configured
    """
    charged = [config.group(name) for name in CHARGED_GROUPS]
    if class_id != PositionTier.HIGHLY_SENSITIVE:
        return False
    return any(wt_aa in members for members in charged)
