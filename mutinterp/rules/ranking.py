"""
Mutation ranking.

Every cell of the matrix off the wild-type diagonal is a single
substitution. A cell whose candidate equals the wild-type residue is not
a mutation at all and is never emitted. The remaining substitutions are
ranked twice: by delta descending (most beneficial first) and ascending
(most harmful first). Equal deltas keep enumeration order: candidate rows
in aa_list order, positions left to right within a row.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..core.models import Mutation


def enumerate_mutations(
    matrix: np.ndarray,
    wt_seq: str,
    aa_list: Sequence[str],
) -> list[Mutation]:
    """All substitutions in enumeration order, self-substitutions excluded."""
    mutations = []
    for aa_index, row in enumerate(np.asarray(matrix, dtype=float)):
        to_aa = aa_list[aa_index]
        for pos_index, delta in enumerate(row):
            from_aa = wt_seq[pos_index]
            if from_aa == to_aa:
                continue
            mutations.append(Mutation(
                from_aa=from_aa,
                to_aa=to_aa,
                position=pos_index + 1,
                delta=float(delta),
            ))
    return mutations


def rank_mutations(
    matrix: np.ndarray,
    wt_seq: str,
    aa_list: Sequence[str],
    top_k: int,
) -> tuple[list[Mutation], list[Mutation]]:
    """
    Top-K beneficial and top-K harmful substitutions.

    Args:
        matrix: Validated score matrix [candidate][position]
        wt_seq: Wild-type sequence
        aa_list: Canonical residue order
        top_k: Length of each ranking; all mutations are returned when
            fewer are available

    Returns:
        Tuple of (top beneficial, top harmful)
    """
    if top_k <= 0:
        return [], []

    mutations = enumerate_mutations(matrix, wt_seq, aa_list)
    order = range(len(mutations))

    beneficial = sorted(order, key=lambda i: (-mutations[i].delta, i))
    harmful = sorted(order, key=lambda i: (mutations[i].delta, i))

    return (
        [mutations[i] for i in beneficial[:top_k]],
        [mutations[i] for i in harmful[:top_k]],
    )
