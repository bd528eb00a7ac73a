#!/usr/bin/env python3
"""
MutInterp Example: Interpreting a Mutational Scan

This script builds a synthetic ΔBFI matrix for a short peptide and walks
through what the interpreter reports about it: position classes, the
chemistry favoured at each position, excellent optimisation targets and
the most promising and most damaging single substitutions.

Run with: python examples/basic_usage.py
"""

from pathlib import Path

import numpy as np

from mutinterp import (
    InterpretationEngine,
    interpret,
    reference_config,
)
from mutinterp.export import export_mutations_to_tsv, export_to_json


def print_header(title: str):
    """Print a formatted section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def synthetic_scan(sequence: str, seed: int = 1) -> np.ndarray:
    """
    A toy ΔBFI matrix with a recognisable pattern.

    - Charged residues of the wild type are intolerant to any change
    - Hydrophobic substitutions help at the C-terminal half
    - Everything else is mildly noisy around zero
    """
    config = reference_config()
    rng = np.random.default_rng(seed)
    matrix = rng.normal(0.0, 0.15, size=(config.n_candidates, len(sequence)))

    hydrophobic = [config.aa_list.index(aa) for aa in config.aa_groups["hydrophobic"]]
    for pos, wt in enumerate(sequence):
        if wt in "KRDE":
            matrix[:, pos] -= 1.2
        elif pos >= len(sequence) // 2:
            matrix[:, pos] += 0.9
            matrix[hydrophobic, pos] += 1.0
    return matrix


def describe_positions(sequence: str):
    """Per-position classes and narrative."""
    print_header(f"Position analysis of {sequence}")

    result = interpret(synthetic_scan(sequence), sequence)

    for pos in result.positions:
        flag = " *" if pos.is_excellent_target else ""
        print(f"\n{pos.pos1:>3} {pos.wt_aa}  {pos.class_label}{flag}")
        print(f"    {pos.full_text}")

    print(f"\nConserved positions:   {result.conserved_positions}")
    print(f"Designable positions:  {result.designable_positions}")
    print(f"Designable runs:       {result.designable_runs}")
    print(f"Excellent targets:     {result.excellent_target_positions}")
    return result


def describe_globals(result):
    """Residue and group tendencies across the whole peptide."""
    print_header("Global preferences")

    print("\n" + result.global_summary)

    print("\nResidues ranked by mean ΔBFI:")
    for pref in sorted(result.aa_preferences, key=lambda p: -p.mean)[:5]:
        print(f"  {pref.aa} ({pref.aa_group or '-'}): {pref.mean:+.2f}, "
              f"improves at {pref.improve_count} position(s)")

    print("\n" + result.mutation_report)


def stricter_rules(sequence: str):
    """The same scan under a stricter configuration."""
    print_header("Stricter thresholds")

    config = reference_config()
    thresholds = config.thresholds.model_copy(update={"improve": 0.8, "top_k_mutations": 3})
    engine = InterpretationEngine(config.model_copy(update={"thresholds": thresholds}))

    result = engine.interpret(synthetic_scan(sequence), sequence)
    print(f"\nDesignable positions with improve > 0.8: {result.designable_positions}")
    print(result.mutation_report)


def main():
    """Run all example analyses."""
    sequence = "GKEVLAWRLIAF"

    result = describe_positions(sequence)
    describe_globals(result)
    stricter_rules(sequence)

    output_dir = Path("mutinterp_example_output")
    export_to_json(result, output_dir / "interpretation.json")
    export_mutations_to_tsv(result, output_dir / "mutations.tsv")

    print("\n" + "=" * 70)
    print(f"  Example complete! Results written to {output_dir}/")
    print("=" * 70)


if __name__ == "__main__":
    main()
