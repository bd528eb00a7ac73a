"""
Position classification by ordered first-match rules.

Positions fall into tolerance tiers according to how many substitutions
improve or degrade function:

- **Highly sensitive**: most substitutions are damaging; the residue is
  likely structural or catalytic and should be conserved.
- **Moderately sensitive**: many substitutions are damaging.
- **Highly designable**: most substitutions improve function; the
  position is a promising optimisation site.
- **Moderately designable**: several substitutions improve function.
- **Neutral / tolerant**: neither pattern dominates.

The tiers are not hardcoded: the configuration supplies an ordered list of
rules and the first rule whose bounds all hold decides the class. Rule
order is therefore significant. A position that no rule matches receives
the built-in neutral class, so every position is always classified.
"""

from __future__ import annotations

import logging
from enum import Enum

from ..core.models import PositionClass, PositionStats
from .config import RuleConfig

logger = logging.getLogger(__name__)


class PositionTier(str, Enum):
    """Class identifiers that the engine itself acts upon."""
    HIGHLY_SENSITIVE = "highly_sensitive"
    MODERATELY_SENSITIVE = "moderately_sensitive"
    HIGHLY_DESIGNABLE = "highly_designable"
    MODERATELY_DESIGNABLE = "moderately_designable"
    NEUTRAL = "neutral"

    @property
    def is_sensitive(self) -> bool:
        return self in (PositionTier.HIGHLY_SENSITIVE, PositionTier.MODERATELY_SENSITIVE)

    @property
    def is_designable(self) -> bool:
        return self in (PositionTier.HIGHLY_DESIGNABLE, PositionTier.MODERATELY_DESIGNABLE)


FALLBACK_CLASS = PositionClass(
    class_id=PositionTier.NEUTRAL.value,
    class_label="Neutral / tolerant",
)


def classify_position(stats: PositionStats, config: RuleConfig) -> PositionClass:
    """
    Assign a class using the first matching rule.

    Args:
        stats: Statistics of the position
        config: Rule configuration (rules evaluated in list order)

    Returns:
        PositionClass of the first matching rule, or FALLBACK_CLASS
    """
    for rule in config.position_class_rules:
        if rule.conditions.matches(stats.num_improve, stats.num_degrade):
            return PositionClass(class_id=rule.id, class_label=rule.label)

    logger.debug(
        f"Position {stats.pos1}: no rule matched "
        f"(improve={stats.num_improve}, degrade={stats.num_degrade}), using fallback"
    )
    return FALLBACK_CLASS


def tier_of(class_id: str) -> PositionTier | None:
    """Map a class id onto a known tier, or None for custom classes."""
    try:
        return PositionTier(class_id)
    except ValueError:
        return None
