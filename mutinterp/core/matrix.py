"""
Score matrix handling.

A mutational scanning matrix holds one predicted functional-impact delta
(ΔBFI) for every candidate residue at every position of the wild-type
peptide. Rows follow the configured residue order (``aa_list``), columns
follow the wild-type sequence::

            pos 1   pos 2   pos 3  ...
      A     0.12   -0.40    0.05
      C    -0.02   -0.61    0.31
      ...

The interpreter treats the matrix as opaque numeric input. This module
validates its shape against the residue list and the wild type, exposes
column access, and reads matrices exported by scoring services as
CSV/TSV tables or JSON.
"""

from __future__ import annotations

import csv
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

import numpy as np

from .exceptions import MatrixShapeError

logger = logging.getLogger(__name__)

ArrayLike = Union[np.ndarray, Sequence[Sequence[float]]]


def as_matrix(matrix: ArrayLike, aa_list: Sequence[str], wt_seq: str) -> np.ndarray:
    """
    Convert and validate a score matrix.

    The returned array is a read-only float copy, so the caller's data is
    never touched and the engine cannot modify it by accident.

    Args:
        matrix: Nested lists or 2-D array, [candidate][position]
        aa_list: Canonical residue order (one per row)
        wt_seq: Wild-type sequence (one residue per column)

    Returns:
        Read-only float64 array of shape (len(aa_list), len(wt_seq))

    Raises:
        MatrixShapeError: On any mismatch, ragged rows, or non-finite values
    """
    if len(wt_seq) == 0:
        raise MatrixShapeError("Wild-type sequence is empty")

    if not isinstance(matrix, np.ndarray):
        try:
            matrix = [list(row) for row in matrix]
        except TypeError:
            raise MatrixShapeError(
                "Matrix must be 2-D: expected a sequence of rows, each a sequence of scores"
            ) from None
        lengths = {len(row) for row in matrix}
        if len(lengths) > 1:
            raise MatrixShapeError(f"Matrix rows have unequal lengths: {sorted(lengths)}")

    try:
        arr = np.array(matrix, dtype=float)
    except (TypeError, ValueError) as e:
        raise MatrixShapeError(f"Matrix is not numeric: {e}") from e

    if arr.ndim != 2:
        raise MatrixShapeError(f"Matrix must be 2-D, got {arr.ndim} dimension(s)")

    n_rows, n_cols = arr.shape
    if n_rows != len(aa_list):
        raise MatrixShapeError(
            f"Matrix has {n_rows} rows but aa_list has {len(aa_list)} residues"
        )
    if n_cols != len(wt_seq):
        raise MatrixShapeError(
            f"Matrix has {n_cols} columns but wild-type sequence has {len(wt_seq)} residues"
        )
    if not np.all(np.isfinite(arr)):
        bad = np.argwhere(~np.isfinite(arr))[0]
        raise MatrixShapeError(
            f"Matrix contains non-finite value at {aa_list[bad[0]]}{bad[1] + 1}"
        )

    arr.setflags(write=False)
    return arr


def get_column(matrix: np.ndarray, pos_index: int) -> tuple[float, ...]:
    """All candidate deltas at one position, in aa_list order."""
    return tuple(float(v) for v in matrix[:, pos_index])


@dataclass(frozen=True)
class ScoreMatrix:
    """
    A validated matrix together with its row and column labels.

    Attributes:
        values: Read-only array [candidate][position]
        aa_list: Row labels
        sequence: Wild-type sequence (column labels)
    """
    values: np.ndarray
    aa_list: tuple[str, ...]
    sequence: str

    @classmethod
    def build(cls, matrix: ArrayLike, aa_list: Sequence[str], sequence: str) -> ScoreMatrix:
        return cls(
            values=as_matrix(matrix, aa_list, sequence),
            aa_list=tuple(aa_list),
            sequence=sequence,
        )

    @property
    def shape(self) -> tuple[int, int]:
        return self.values.shape

    def column(self, pos_index: int) -> tuple[float, ...]:
        return get_column(self.values, pos_index)

    def row(self, aa: str) -> tuple[float, ...]:
        """Deltas of one candidate residue across all positions."""
        try:
            idx = self.aa_list.index(aa)
        except ValueError:
            raise KeyError(f"Residue '{aa}' not in aa_list") from None
        return tuple(float(v) for v in self.values[idx])

    def reordered(self, aa_list: Sequence[str]) -> ScoreMatrix:
        """
        Return the matrix with rows permuted into another residue order.

        Raises:
            MatrixShapeError: If the two residue sets differ
        """
        if set(aa_list) != set(self.aa_list) or len(aa_list) != len(self.aa_list):
            missing = sorted(set(aa_list) - set(self.aa_list))
            extra = sorted(set(self.aa_list) - set(aa_list))
            raise MatrixShapeError(
                f"Matrix residues do not match aa_list (missing: {missing}, extra: {extra})"
            )
        order = [self.aa_list.index(aa) for aa in aa_list]
        return ScoreMatrix.build(self.values[order], aa_list, self.sequence)


# =============================================================================
# Loading
# =============================================================================

def load_matrix(
    path: Union[str, Path],
    aa_list: Optional[Sequence[str]] = None,
    sequence: Optional[str] = None,
) -> ScoreMatrix:
    """
    Read a score matrix from disk.

    Supported layouts:

    * ``.csv`` / ``.tsv``: header row of position labels (first cell
      ignored), then one row per residue with the residue id in the first
      column.
    * ``.json``: either ``{"heatmap": [[...]], "aa_list": [...],
      "sequence": "..."}`` or a bare nested list.

    Args:
        path: File to read
        aa_list: Residue order to enforce; rows are permuted into this order
            when the file carries residue labels, and used as labels when it
            does not
        sequence: Wild-type sequence; overrides one stored in the file

    Returns:
        Validated ScoreMatrix

    Raises:
        MatrixShapeError: If the file cannot be interpreted as a matrix
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix in (".csv", ".tsv"):
        labels, rows, file_sequence = _read_delimited(path, "\t" if suffix == ".tsv" else ",")
    elif suffix == ".json":
        labels, rows, file_sequence = _read_json(path)
    else:
        raise MatrixShapeError(f"Unsupported matrix format: {path.suffix or path.name}")

    wt = sequence or file_sequence
    if not wt:
        raise MatrixShapeError(f"No wild-type sequence given and none stored in {path}")

    if labels is None:
        if aa_list is None:
            raise MatrixShapeError(f"{path} has no residue labels and no aa_list was given")
        labels = list(aa_list)

    matrix = ScoreMatrix.build(rows, labels, wt)
    if aa_list is not None and tuple(aa_list) != matrix.aa_list:
        matrix = matrix.reordered(aa_list)

    logger.info(f"Loaded {matrix.shape[0]}x{matrix.shape[1]} matrix from {path}")
    return matrix


def _read_delimited(path: Path, delimiter: str) -> tuple[list[str], list[list[float]], Optional[str]]:
    with open(path, "r", newline="", encoding="utf-8") as f:
        reader = csv.reader(f, delimiter=delimiter)
        try:
            header = next(reader)
        except StopIteration:
            raise MatrixShapeError(f"{path} is empty") from None

        labels = []
        rows = []
        for line_no, record in enumerate(reader, start=2):
            if not record or not "".join(record).strip():
                continue
            labels.append(record[0].strip())
            try:
                rows.append([float(cell) for cell in record[1:]])
            except ValueError as e:
                raise MatrixShapeError(f"{path}:{line_no}: {e}") from e

    # Position labels like "K1", "V2" carry the wild type
    position_labels = [cell.strip() for cell in header[1:]]
    sequence = None
    if position_labels and all(len(c) >= 2 and c[0].isalpha() and c[1:].isdigit() for c in position_labels):
        sequence = "".join(c[0] for c in position_labels)

    return labels, rows, sequence


def _read_json(path: Path) -> tuple[Optional[list[str]], list[list[float]], Optional[str]]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise MatrixShapeError(f"{path} is not valid JSON: {e}") from e

    if isinstance(data, list):
        return None, data, None
    if isinstance(data, dict) and "heatmap" in data:
        return data.get("aa_list"), data["heatmap"], data.get("sequence")
    raise MatrixShapeError(f"{path} does not contain a 'heatmap' matrix")
