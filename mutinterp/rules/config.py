"""
Rule configuration for the mutational tolerance interpreter.

All interpretive knowledge lives in data rather than in code: thresholds,
chemical groupings of amino acids, the ordered classification rules, the
explanatory sentences attached to each group and the narrative templates.
Changing how positions are classified or described therefore never
requires touching the engine.

Configuration layout
--------------------
``aa_list``
    Canonical order of candidate residues. Row *i* of every score matrix
    holds the deltas for ``aa_list[i]``.
``thresholds``
    Numeric cut-offs (see :class:`Thresholds`).
``aa_groups``
    Chemical groups, in the order used for tie-breaking. Groups may
    overlap and may name residues that are not in ``aa_list``.
``position_class_rules``
    Ordered first-match rules on improve/degrade counts.
``beneficial_explanations`` / ``harmful_explanations``
    One sentence per group, used when that group dominates a position.
``templates``
    Narrative templates with ``{{variable}}`` placeholders.

The packaged reference configuration reproduces the ΔBFI rule set used
for peptide design reports.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from ..core.exceptions import ConfigError, MissingConfigKeyError

logger = logging.getLogger(__name__)

REFERENCE_CONFIG_FILE = "reference_config.json"


class Thresholds(BaseModel):
    """Numeric cut-offs driving statistics, chemistry analysis and ranking."""
    model_config = ConfigDict(frozen=True)

    # Per-mutation categories
    improve: float = Field(..., description="Delta above which a mutation improves function")
    degrade: float = Field(..., description="Delta below which a mutation degrades function")
    neutral_abs: float = Field(..., ge=0, description="|delta| below which a mutation is neutral")

    # Class cut-offs (informational; the rules carry the bounds actually applied)
    high_sensitive_degrade: int = Field(14, ge=0)
    mod_sensitive_degrade: int = Field(10, ge=0)
    high_design_improve: int = Field(14, ge=0)
    mod_design_improve: int = Field(10, ge=0)

    # Chemistry dominance
    group_beneficial_min: float = Field(..., description="Minimum group mean to call a group beneficial")
    group_harmful_max: float = Field(..., description="Maximum group mean to call a group harmful")
    group_margin: float = Field(..., ge=0, description="Required lead over every other group")

    # Target flagging and ranking
    top_opt_site_delta: float = Field(..., description="Best-score floor for excellent targets")
    top_opt_site_max_num: int = Field(..., ge=0, description="Maximum number of excellent targets")
    top_k_mutations: int = Field(..., ge=0, description="Length of the mutation rankings")

    @model_validator(mode="after")
    def degrade_below_improve(self) -> Thresholds:
        if self.degrade >= self.improve:
            raise ValueError(
                f"degrade threshold ({self.degrade}) must be below improve threshold ({self.improve})"
            )
        return self


class RuleConditions(BaseModel):
    """Inclusive bounds on improve/degrade counts; a missing bound is unconstrained."""
    model_config = ConfigDict(frozen=True)

    num_degrade_gte: Optional[int] = None
    num_degrade_lte: Optional[int] = None
    num_improve_gte: Optional[int] = None
    num_improve_lte: Optional[int] = None

    def matches(self, num_improve: int, num_degrade: int) -> bool:
        """Check whether the counts satisfy every present bound."""
        if self.num_degrade_gte is not None and num_degrade < self.num_degrade_gte:
            return False
        if self.num_degrade_lte is not None and num_degrade > self.num_degrade_lte:
            return False
        if self.num_improve_gte is not None and num_improve < self.num_improve_gte:
            return False
        if self.num_improve_lte is not None and num_improve > self.num_improve_lte:
            return False
        return True


class ClassRule(BaseModel):
    """A single position classification rule."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Class identifier, e.g. 'highly_sensitive'")
    label: str = Field(..., description="Display label")
    conditions: RuleConditions = Field(default_factory=RuleConditions)


class RuleConfig(BaseModel):
    """
    Complete, immutable rule configuration.

    Instances are normally obtained from :func:`load_config` or
    :func:`reference_config`; constructing one directly from a dict via
    ``RuleConfig.model_validate`` is equally valid.
    """
    model_config = ConfigDict(frozen=True)

    aa_list: list[str] = Field(..., min_length=1, description="Canonical residue order")
    thresholds: Thresholds
    aa_groups: dict[str, list[str]] = Field(default_factory=dict)
    position_class_rules: list[ClassRule] = Field(default_factory=list)
    beneficial_explanations: dict[str, str] = Field(default_factory=dict)
    harmful_explanations: dict[str, str] = Field(default_factory=dict)
    templates: dict[str, str] = Field(default_factory=dict)
    empty_list_placeholder: str = Field("None", description="Rendered in place of an empty position list")

    @field_validator("aa_list")
    @classmethod
    def unique_residues(cls, v: list[str]) -> list[str]:
        duplicates = sorted(aa for aa, n in Counter(v).items() if n > 1)
        if duplicates:
            raise ValueError(f"aa_list contains duplicate residues: {duplicates}")
        return v

    @property
    def n_candidates(self) -> int:
        """Number of candidate residues (matrix rows)."""
        return len(self.aa_list)

    def group(self, name: str) -> list[str]:
        """Members of a chemical group."""
        try:
            return self.aa_groups[name]
        except KeyError:
            raise MissingConfigKeyError(name, "aa_groups") from None

    def template(self, name: str) -> str:
        """Raw template text."""
        try:
            return self.templates[name]
        except KeyError:
            raise MissingConfigKeyError(name, "templates") from None

    def explanation(self, group: str, beneficial: bool) -> str:
        """Explanation sentence for a dominant group."""
        section = "beneficial_explanations" if beneficial else "harmful_explanations"
        table = self.beneficial_explanations if beneficial else self.harmful_explanations
        try:
            return table[group]
        except KeyError:
            raise MissingConfigKeyError(group, section) from None

    def to_json(self, indent: int = 2) -> str:
        """Serialize the configuration back to JSON."""
        return self.model_dump_json(indent=indent)


def parse_config(data: dict) -> RuleConfig:
    """
    Validate an in-memory configuration mapping.

    Raises:
        ConfigError: If the mapping does not describe a valid configuration
    """
    try:
        return RuleConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid rule configuration: {e}") from e


def load_config(path: Union[str, Path]) -> RuleConfig:
    """
    Load a rule configuration from a JSON file.

    Args:
        path: Path to the JSON configuration

    Returns:
        Validated RuleConfig

    Raises:
        ConfigError: If the file is unreadable, not JSON, or invalid
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read configuration {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Configuration {path} is not valid JSON: {e}") from e

    config = parse_config(data)
    logger.debug(
        f"Loaded configuration from {path}: {config.n_candidates} residues, "
        f"{len(config.aa_groups)} groups, {len(config.position_class_rules)} rules"
    )
    return config


@lru_cache(maxsize=1)
def reference_config() -> RuleConfig:
    """Return the packaged reference ΔBFI configuration."""
    text = resources.files(__package__).joinpath(REFERENCE_CONFIG_FILE).read_text(encoding="utf-8")
    return parse_config(json.loads(text))
