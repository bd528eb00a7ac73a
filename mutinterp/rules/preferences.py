"""
Global residue preferences.

Where the per-position analysis asks "what does this position tolerate?",
the global view asks "what does this residue do wherever it is placed?".
Each matrix row is reduced to its mean delta and to counts of improving
and degrading placements. Group preferences are then the mean of the
member residues' means, a two-level aggregation that weighs every member
residue equally regardless of the sequence length.
"""

from __future__ import annotations

import numpy as np

from ..core.models import GlobalAAPreference, GlobalGroupPreference
from .config import RuleConfig


def compute_global_preferences(
    matrix: np.ndarray,
    config: RuleConfig,
) -> tuple[list[GlobalAAPreference], list[GlobalGroupPreference]]:
    """
    Per-residue and per-group global tendencies.

    Args:
        matrix: Validated score matrix [candidate][position]
        config: Rule configuration

    Returns:
        Tuple of (residue preferences in aa_list order,
        group preferences in configuration order)
    """
    thresholds = config.thresholds
    values = np.asarray(matrix, dtype=float)

    row_means = values.mean(axis=1)
    improve_counts = np.count_nonzero(values > thresholds.improve, axis=1)
    degrade_counts = np.count_nonzero(values < thresholds.degrade, axis=1)

    first_group = {}
    for group, members in config.aa_groups.items():
        for aa in members:
            first_group.setdefault(aa, group)

    aa_prefs = [
        GlobalAAPreference(
            aa=aa,
            aa_group=first_group.get(aa),
            mean=float(row_means[i]),
            improve_count=int(improve_counts[i]),
            degrade_count=int(degrade_counts[i]),
        )
        for i, aa in enumerate(config.aa_list)
    ]

    # Members missing from aa_list count as 0.0
    mean_by_aa = {pref.aa: pref.mean for pref in aa_prefs}
    group_prefs = []
    for group, members in config.aa_groups.items():
        member_means = [mean_by_aa.get(aa, 0.0) for aa in members]
        mean = float(np.mean(member_means)) if member_means else 0.0
        group_prefs.append(GlobalGroupPreference(group=group, mean=mean))

    return aa_prefs, group_prefs
