"""
Result export.

Writes an :class:`InterpretationResult` in formats suited to downstream
tools:

- JSON: the complete result, including narrative text, plus a small
  metadata block identifying the wild type
- Per-position TSV: one row per position with class, counts, best/worst
  candidates, flags and full narrative
- Mutation TSV: the two rankings, one row per substitution

Output is deterministic for a given result, so exported files can be
diffed between runs.
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Union

from . import __version__
from .core.models import InterpretationResult
from .core.sequence import sequence_hash

logger = logging.getLogger(__name__)

POSITION_COLUMNS = [
    "pos", "wt", "class_id", "class_label",
    "num_improve", "num_degrade", "num_neutral",
    "best_aa", "best_score", "worst_aa", "worst_score",
    "dominant_beneficial_group", "dominant_harmful_group",
    "is_conserved_charged", "is_excellent_target", "text",
]

MUTATION_COLUMNS = ["ranking", "rank", "mutation", "from_aa", "position", "to_aa", "delta"]


def wild_type_of(result: InterpretationResult) -> str:
    """Reconstruct the wild-type sequence from the per-position records."""
    return "".join(p.wt_aa for p in result.positions)


def result_to_dict(result: InterpretationResult) -> dict:
    """JSON-ready dict of a result with export metadata."""
    wt = wild_type_of(result)
    return {
        "metadata": {
            "generator": f"mutinterp {__version__}",
            "sequence": wt,
            "sequence_md5": sequence_hash(wt),
        },
        "result": result.model_dump(mode="json"),
    }


def export_to_json(result: InterpretationResult, filepath: Union[str, Path], indent: int = 2) -> Path:
    """
    Write the full result as JSON.

    Returns:
        Path to created file
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(result_to_dict(result), f, indent=indent, ensure_ascii=False)
        f.write("\n")

    logger.info(f"Exported interpretation of {result.total_positions} positions to {filepath}")
    return filepath


def export_positions_to_tsv(result: InterpretationResult, filepath: Union[str, Path]) -> Path:
    """
    Write one row per position.

    Returns:
        Path to created file
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    with open(filepath, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f, delimiter="\t", lineterminator="\n")
        writer.writerow(POSITION_COLUMNS)
        for p in result.positions:
            writer.writerow([
                p.pos1, p.wt_aa, p.class_id, p.class_label,
                p.num_improve, p.num_degrade, p.num_neutral,
                p.best_aa, f"{p.best_score:.4f}", p.worst_aa, f"{p.worst_score:.4f}",
                p.dominant_beneficial_group or "", p.dominant_harmful_group or "",
                p.is_conserved_charged, p.is_excellent_target, p.full_text,
            ])

    logger.info(f"Exported {len(result.positions)} positions to {filepath}")
    return filepath


def export_mutations_to_tsv(result: InterpretationResult, filepath: Union[str, Path]) -> Path:
    """
    Write the beneficial and harmful rankings.

    Returns:
        Path to created file
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    rankings = [
        ("beneficial", result.top_beneficial_mutations),
        ("harmful", result.top_harmful_mutations),
    ]
    n_rows = 0
    with open(filepath, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f, delimiter="\t", lineterminator="\n")
        writer.writerow(MUTATION_COLUMNS)
        for name, mutations in rankings:
            for rank, m in enumerate(mutations, start=1):
                writer.writerow([
                    name, rank, m.label, m.from_aa, m.position, m.to_aa, f"{m.delta:.4f}",
                ])
                n_rows += 1

    logger.info(f"Exported {n_rows} ranked mutations to {filepath}")
    return filepath
