"""
Per-position statistics.

Each column of the score matrix describes how every possible substitution
at one position affects function. Three independent counts summarise it:

- **improve**: deltas strictly above ``thresholds.improve``
- **degrade**: deltas strictly below ``thresholds.degrade``
- **neutral**: deltas with magnitude strictly below ``thresholds.neutral_abs``

For any sensible configuration (degrade < -neutral_abs < neutral_abs <
improve) the three sets are disjoint, but nothing here relies on that.
The best and worst candidates are taken in ``aa_list`` order, so the
earliest residue wins a tie.
"""

from __future__ import annotations

import numpy as np

from ..core.matrix import get_column
from ..core.models import PositionStats
from .config import RuleConfig


def compute_position_stats(
    matrix: np.ndarray,
    pos_index: int,
    wt_aa: str,
    config: RuleConfig,
) -> PositionStats:
    """
    Summarise one column of the matrix.

    Args:
        matrix: Validated score matrix [candidate][position]
        pos_index: 0-based position
        wt_aa: Wild-type residue at the position
        config: Rule configuration

    Returns:
        PositionStats for the position
    """
    column = get_column(matrix, pos_index)
    thresholds = config.thresholds
    values = np.asarray(column)

    num_improve = int(np.count_nonzero(values > thresholds.improve))
    num_degrade = int(np.count_nonzero(values < thresholds.degrade))
    num_neutral = int(np.count_nonzero(np.abs(values) < thresholds.neutral_abs))

    # argmax/argmin return the first occurrence, i.e. aa_list order on ties
    best_idx = int(np.argmax(values))
    worst_idx = int(np.argmin(values))

    return PositionStats(
        pos_index=pos_index,
        pos1=pos_index + 1,
        wt_aa=wt_aa,
        column=column,
        num_improve=num_improve,
        num_degrade=num_degrade,
        num_neutral=num_neutral,
        best_aa=config.aa_list[best_idx],
        best_score=column[best_idx],
        worst_aa=config.aa_list[worst_idx],
        worst_score=column[worst_idx],
    )
