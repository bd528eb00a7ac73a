"""
Wild-type sequence handling for MutInterp.

The interpreter treats each character of the wild type as an opaque
residue identifier: no biological validation is applied, so sequences
with non-standard or modified residue codes are interpreted as given.
This module only reads sequences from FASTA and normalises whitespace.
"""

from __future__ import annotations

import hashlib
from io import StringIO
from pathlib import Path
from typing import Iterator, Union

from Bio import SeqIO
from pydantic import BaseModel, Field, field_validator

from .exceptions import InterpretationError


# Standard amino acid alphabet, in the canonical one-letter order
STANDARD_AA = tuple("ACDEFGHIKLMNPQRSTVWY")


class SequenceError(InterpretationError):
    """Exception raised for sequence-related errors."""
    pass


class WildTypeRecord(BaseModel):
    """A named wild-type peptide."""

    id: str = Field(..., description="Sequence identifier from the FASTA header")
    description: str = ""
    sequence: str = Field(..., min_length=1)

    @field_validator("sequence")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        return clean_sequence(v)

    @property
    def length(self) -> int:
        return len(self.sequence)


def clean_sequence(sequence: str) -> str:
    """Remove whitespace; case and residue codes are left unchanged."""
    return "".join(sequence.split())


def parse_fasta(source: Union[str, Path, StringIO]) -> Iterator[WildTypeRecord]:
    """
    Parse wild-type sequences from FASTA format.

    Args:
        source: File path, FASTA string, or StringIO object

    Yields:
        WildTypeRecord for each entry
    """
    if isinstance(source, str) and (source.startswith(">") or "\n>" in source):
        handle = StringIO(source)
        close = False
    elif isinstance(source, (str, Path)):
        handle = open(source, "r")
        close = True
    else:
        handle = source
        close = False

    try:
        for record in SeqIO.parse(handle, "fasta"):
            yield WildTypeRecord(
                id=record.id,
                description=record.description,
                sequence=str(record.seq),
            )
    finally:
        if close:
            handle.close()


def read_wild_type(source: Union[str, Path, StringIO]) -> WildTypeRecord:
    """
    Read the first sequence of a FASTA source.

    Raises:
        SequenceError: If the source holds no sequence
    """
    records = parse_fasta(source)
    try:
        return next(records)
    except StopIteration:
        raise SequenceError(f"No FASTA records found in {source}") from None
    finally:
        records.close()


def sequence_hash(sequence: str) -> str:
    """
    MD5 digest of a cleaned sequence.

    Used to tag exported results with the wild type they describe.
    """
    return hashlib.md5(clean_sequence(sequence).encode()).hexdigest()
