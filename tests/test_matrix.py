"""
Tests for score matrix validation, matrix loading and wild-type input.

The engine assumes a rectangular, finite matrix whose rows follow the
configured residue order and whose columns follow the wild type. These
tests pin down every way that assumption is checked at the boundary.
"""

import json
from io import StringIO

import numpy as np
import pytest

from mutinterp.core.exceptions import InterpretationError, MatrixShapeError
from mutinterp.core.matrix import ScoreMatrix, as_matrix, get_column, load_matrix
from mutinterp.core.sequence import (
    STANDARD_AA,
    SequenceError,
    WildTypeRecord,
    clean_sequence,
    parse_fasta,
    read_wild_type,
    sequence_hash,
)


# =============================================================================
# Test Data
# =============================================================================

AA_LIST = list(STANDARD_AA)
WT = "AVK"


def ramp_matrix(n_pos=3):
    """delta(aa, pos) = (aa_index - pos_index) * 0.2"""
    return [[(a - p) * 0.2 for p in range(n_pos)] for a in range(len(AA_LIST))]


def write_csv(path, matrix, positions, delimiter=","):
    lines = [delimiter.join(["aa"] + positions)]
    for aa, row in zip(AA_LIST, matrix):
        lines.append(delimiter.join([aa] + [str(v) for v in row]))
    path.write_text("\n".join(lines) + "\n")


class TestAsMatrix:
    """Tests for matrix shape validation."""

    def test_valid_matrix(self):
        arr = as_matrix(ramp_matrix(), AA_LIST, WT)
        assert arr.shape == (20, 3)
        assert arr.dtype == np.float64

    def test_result_is_read_only(self):
        arr = as_matrix(ramp_matrix(), AA_LIST, WT)
        with pytest.raises(ValueError):
            arr[0, 0] = 99.0

    def test_input_not_modified(self):
        source = np.zeros((20, 3))
        arr = as_matrix(source, AA_LIST, WT)
        assert arr is not source
        assert source.flags.writeable

    def test_wrong_row_count(self):
        with pytest.raises(MatrixShapeError, match="19 rows"):
            as_matrix(ramp_matrix()[:19], AA_LIST, WT)

    def test_wrong_column_count(self):
        with pytest.raises(MatrixShapeError, match="columns"):
            as_matrix(ramp_matrix(4), AA_LIST, WT)

    def test_ragged_rows(self):
        matrix = ramp_matrix()
        matrix[5] = matrix[5][:2]
        with pytest.raises(MatrixShapeError, match="unequal lengths"):
            as_matrix(matrix, AA_LIST, WT)

    def test_nan_rejected(self):
        matrix = ramp_matrix()
        matrix[2][1] = float("nan")
        with pytest.raises(MatrixShapeError, match="D2"):
            as_matrix(matrix, AA_LIST, WT)

    def test_infinity_rejected(self):
        matrix = ramp_matrix()
        matrix[0][0] = float("inf")
        with pytest.raises(MatrixShapeError, match="non-finite"):
            as_matrix(matrix, AA_LIST, WT)

    def test_non_numeric_rejected(self):
        matrix = ramp_matrix()
        matrix[0][0] = "high"
        with pytest.raises(MatrixShapeError, match="not numeric"):
            as_matrix(matrix, AA_LIST, WT)

    def test_one_dimensional_list(self):
        with pytest.raises(MatrixShapeError, match="2-D"):
            as_matrix([0.0] * 20, AA_LIST, "A")

    def test_scalar_row(self):
        matrix = ramp_matrix()
        matrix[4] = 0.5
        with pytest.raises(MatrixShapeError, match="2-D"):
            as_matrix(matrix, AA_LIST, WT)

    def test_scalar_input(self):
        with pytest.raises(MatrixShapeError, match="2-D"):
            as_matrix(1.0, AA_LIST, WT)

    def test_one_dimensional_array(self):
        with pytest.raises(MatrixShapeError, match="2-D"):
            as_matrix(np.zeros(20), AA_LIST, "A")

    def test_generator_input(self):
        """Rows may come from a one-shot iterator."""
        arr = as_matrix((row for row in ramp_matrix()), AA_LIST, WT)
        assert arr.shape == (20, 3)
        assert arr[19, 0] == pytest.approx(3.8)

    def test_empty_wild_type(self):
        with pytest.raises(MatrixShapeError, match="empty"):
            as_matrix([[] for _ in AA_LIST], AA_LIST, "")

    def test_shape_error_is_interpretation_error(self):
        with pytest.raises(InterpretationError):
            as_matrix(ramp_matrix()[:10], AA_LIST, WT)

    def test_get_column(self):
        arr = as_matrix(ramp_matrix(), AA_LIST, WT)
        column = get_column(arr, 1)
        assert len(column) == 20
        assert column[0] == pytest.approx(-0.2)
        assert column[1] == pytest.approx(0.0)
        assert all(isinstance(v, float) for v in column)


class TestScoreMatrix:
    """Tests for the labelled matrix container."""

    def test_row_lookup(self):
        matrix = ScoreMatrix.build(ramp_matrix(), AA_LIST, WT)
        assert matrix.row("C") == pytest.approx((0.2, 0.0, -0.2))

    def test_unknown_row(self):
        matrix = ScoreMatrix.build(ramp_matrix(), AA_LIST, WT)
        with pytest.raises(KeyError):
            matrix.row("X")

    def test_reordered(self):
        matrix = ScoreMatrix.build(ramp_matrix(), AA_LIST, WT)
        reversed_order = list(reversed(AA_LIST))
        flipped = matrix.reordered(reversed_order)
        assert flipped.aa_list == tuple(reversed_order)
        assert flipped.row("A") == matrix.row("A")
        assert flipped.column(0)[0] == matrix.column(0)[-1]

    def test_reordered_mismatch(self):
        matrix = ScoreMatrix.build(ramp_matrix(), AA_LIST, WT)
        with pytest.raises(MatrixShapeError, match="missing"):
            matrix.reordered(AA_LIST[:-1] + ["X"])


class TestLoadMatrix:
    """Tests for reading matrices from CSV, TSV and JSON."""

    def test_csv_with_position_labels(self, tmp_path):
        path = tmp_path / "heatmap.csv"
        write_csv(path, ramp_matrix(), ["A1", "V2", "K3"])

        matrix = load_matrix(path)

        assert matrix.sequence == "AVK"
        assert matrix.shape == (20, 3)
        assert matrix.row("Y") == pytest.approx((3.8, 3.6, 3.4))

    def test_tsv_needs_sequence_without_labels(self, tmp_path):
        path = tmp_path / "heatmap.tsv"
        write_csv(path, ramp_matrix(), ["1", "2", "3"], delimiter="\t")

        with pytest.raises(MatrixShapeError, match="No wild-type sequence"):
            load_matrix(path)

        matrix = load_matrix(path, sequence="AVK")
        assert matrix.sequence == "AVK"

    def test_rows_permuted_into_aa_list(self, tmp_path):
        path = tmp_path / "heatmap.csv"
        write_csv(path, ramp_matrix(), ["A1", "V2", "K3"])
        order = list(reversed(AA_LIST))

        matrix = load_matrix(path, aa_list=order)

        assert matrix.aa_list == tuple(order)
        assert matrix.column(0)[0] == pytest.approx(3.8)

    def test_json_object(self, tmp_path):
        path = tmp_path / "heatmap.json"
        path.write_text(json.dumps({
            "heatmap": ramp_matrix(),
            "aa_list": AA_LIST,
            "sequence": "AVK",
        }))

        matrix = load_matrix(path)
        assert matrix.sequence == "AVK"
        assert matrix.aa_list == tuple(AA_LIST)

    def test_bare_json_list_needs_aa_list(self, tmp_path):
        path = tmp_path / "heatmap.json"
        path.write_text(json.dumps(ramp_matrix()))

        with pytest.raises(MatrixShapeError, match="no residue labels"):
            load_matrix(path, sequence="AVK")

        matrix = load_matrix(path, aa_list=AA_LIST, sequence="AVK")
        assert matrix.shape == (20, 3)

    def test_sequence_argument_overrides_file(self, tmp_path):
        path = tmp_path / "heatmap.csv"
        write_csv(path, ramp_matrix(), ["A1", "V2", "K3"])
        matrix = load_matrix(path, sequence="GGG")
        assert matrix.sequence == "GGG"

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "heatmap.xlsx"
        path.write_text("")
        with pytest.raises(MatrixShapeError, match="Unsupported"):
            load_matrix(path)

    def test_non_numeric_cell(self, tmp_path):
        path = tmp_path / "heatmap.csv"
        path.write_text("aa,A1\nA,oops\n")
        with pytest.raises(MatrixShapeError, match=":2:"):
            load_matrix(path)


class TestWildType:
    """Tests for FASTA input of the wild-type peptide."""

    def test_parse_fasta_string(self):
        fasta = ">pep1 designed binder\nAVKLG\nWW\n>pep2\nGG\n"
        records = list(parse_fasta(fasta))
        assert [r.id for r in records] == ["pep1", "pep2"]
        assert records[0].sequence == "AVKLGWW"
        assert records[0].length == 7

    def test_read_first_record_from_file(self, tmp_path):
        path = tmp_path / "wt.fasta"
        path.write_text(">wt\nAVK\n")
        record = read_wild_type(path)
        assert record.id == "wt"
        assert record.sequence == "AVK"

    def test_read_from_stringio(self):
        record = read_wild_type(StringIO(">wt\nKLV\n"))
        assert record.sequence == "KLV"

    def test_empty_fasta(self, tmp_path):
        path = tmp_path / "empty.fasta"
        path.write_text("")
        with pytest.raises(SequenceError):
            read_wild_type(path)

    def test_residue_codes_not_validated(self):
        """Non-standard codes are opaque identifiers, kept as given."""
        record = WildTypeRecord(id="x", sequence="AxB Z")
        assert record.sequence == "AxBZ"

    def test_clean_sequence(self):
        assert clean_sequence(" AV\nK\t") == "AVK"

    def test_sequence_hash_ignores_whitespace(self):
        assert sequence_hash("AVK") == sequence_hash("A V K\n")
        assert sequence_hash("AVK") != sequence_hash("AVL")
