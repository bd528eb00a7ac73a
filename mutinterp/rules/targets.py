"""
Excellent optimisation targets.

Among highly designable positions, those whose best substitution reaches
``top_opt_site_delta`` compete for at most ``top_opt_site_max_num``
"excellent target" flags. Selection is global: a position's flag depends
on how its best score ranks against every other qualifying position, so
it can only be decided once all positions have been analysed.
"""

from __future__ import annotations

import logging
from typing import Sequence

from ..core.models import PositionClass, PositionStats
from .classifier import PositionTier
from .config import RuleConfig

logger = logging.getLogger(__name__)


def mark_excellent_targets(
    all_stats: Sequence[PositionStats],
    all_classes: Sequence[PositionClass],
    config: RuleConfig,
) -> frozenset[int]:
    """
    Select the top designable positions.

    Candidates are ranked by best score, highest first; equal scores keep
    sequence order.

    Args:
        all_stats: Statistics for every position, in sequence order
        all_classes: Classes for every position, in the same order
        config: Rule configuration

    Returns:
        0-based indices of the selected positions
    """
    if len(all_stats) != len(all_classes):
        raise ValueError(
            f"Got {len(all_stats)} position stats but {len(all_classes)} classes"
        )

    thresholds = config.thresholds
    candidates = [
        stats
        for stats, cls in zip(all_stats, all_classes)
        if cls.class_id == PositionTier.HIGHLY_DESIGNABLE
        and stats.best_score >= thresholds.top_opt_site_delta
    ]
    candidates.sort(key=lambda s: (-s.best_score, s.pos_index))

    selected = candidates[:thresholds.top_opt_site_max_num]
    if len(candidates) > len(selected):
        logger.debug(
            f"{len(candidates)} positions qualify as excellent targets, "
            f"keeping the top {len(selected)}"
        )
    return frozenset(s.pos_index for s in selected)


def find_consecutive_runs(positions: Sequence[int], min_length: int = 3) -> list[list[int]]:
    """
    Runs of adjoining positions.

    Several designable positions side by side point to a functional face
    of the peptide rather than isolated hot spots.

    Args:
        positions: Position numbers (any order, duplicates ignored)
        min_length: Shortest run to report

    Returns:
        Runs in ascending order, each a list of consecutive positions
    """
    runs: list[list[int]] = []
    for p in sorted(set(positions)):
        if runs and p == runs[-1][-1] + 1:
            runs[-1].append(p)
        else:
            runs.append([p])
    return [run for run in runs if len(run) >= min_length]
