"""
MutInterp Command Line Interface.

Runs the rule-based interpretation on score matrices exported by a
scoring service and inspects rule configurations. Built with Click, with
Rich for terminal output.

Usage:
    mutinterp interpret heatmap.csv --sequence AVKLG -o results/
    mutinterp interpret heatmap.json --config my_rules.json --format tsv
    mutinterp show-config
    mutinterp validate-config my_rules.json
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .. import __version__
from ..core.exceptions import InterpretationError

# Initialize rich console for pretty output
console = Console()


def setup_logging(verbose: bool, quiet: bool) -> None:
    """Route package logging through Rich."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_rules(config_path: Optional[str]):
    from ..rules.config import load_config, reference_config

    if config_path:
        return load_config(config_path)
    return reference_config()


@click.group()
@click.version_option(version=__version__, prog_name="MutInterp")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.pass_context
def cli(ctx, verbose: bool, quiet: bool):
    """
    MutInterp: rule-based interpretation of peptide mutational scanning matrices.

    \b
    • Position tolerance classes (sensitive / designable / neutral)
    • Chemistry-group explanations per position
    • Ranked beneficial and harmful substitutions
    • Narrative summaries driven by a JSON rule configuration

    Run 'mutinterp COMMAND --help' for command-specific help.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    setup_logging(verbose, quiet)


@cli.command("interpret")
@click.argument("matrix_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--sequence", "-s", help="Wild-type sequence (overrides one stored in the matrix file)")
@click.option(
    "--fasta",
    type=click.Path(exists=True, dir_okay=False),
    help="FASTA file holding the wild-type sequence",
)
@click.option(
    "--config", "-c", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Rule configuration JSON (default: packaged reference rules)",
)
@click.option(
    "--output", "-o",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory to write results to",
)
@click.option(
    "--format", "-f", "fmt",
    type=click.Choice(["json", "tsv"]),
    default="json",
    help="Output format for results",
)
@click.option("--top", type=int, default=None, help="Number of ranked mutations to report")
@click.pass_context
def interpret_cmd(
    ctx,
    matrix_file: str,
    sequence: Optional[str],
    fasta: Optional[str],
    config_path: Optional[str],
    output: Optional[str],
    fmt: str,
    top: Optional[int],
):
    """
    Interpret a mutational scanning matrix.

    MATRIX_FILE is a CSV/TSV table (residues as rows, positions as
    columns) or a JSON file with a "heatmap" matrix.

    \b
    Examples:
        mutinterp interpret heatmap.csv --sequence AVKLG
        mutinterp interpret heatmap.json --fasta wt.fasta -o results/
        mutinterp interpret heatmap.tsv -s AVKLG -c rules.json -f tsv --top 20
    """
    from ..core.matrix import load_matrix
    from ..core.sequence import read_wild_type
    from ..engine import InterpretationEngine
    from ..export import export_mutations_to_tsv, export_positions_to_tsv, export_to_json

    quiet = ctx.obj.get("quiet", False)

    try:
        config = _load_rules(config_path)
        if top is not None:
            thresholds = config.thresholds.model_copy(update={"top_k_mutations": max(top, 0)})
            config = config.model_copy(update={"thresholds": thresholds})

        if fasta:
            record = read_wild_type(fasta)
            sequence = record.sequence
            if not quiet:
                console.print(f"[green]✓[/green] Wild type {record.id} ({record.length} residues)")

        matrix = load_matrix(matrix_file, aa_list=config.aa_list, sequence=sequence)
        result = InterpretationEngine(config).interpret(matrix)
    except InterpretationError as e:
        console.print(f"[red]✗ Interpretation failed:[/red] {escape(str(e))}")
        sys.exit(1)

    if not quiet:
        _print_result(result)

    if output:
        output_dir = Path(output)
        if fmt == "json":
            written = [export_to_json(result, output_dir / "interpretation.json")]
        else:
            written = [
                export_positions_to_tsv(result, output_dir / "positions.tsv"),
                export_mutations_to_tsv(result, output_dir / "mutations.tsv"),
            ]
        for path in written:
            console.print(f"[green]✓[/green] Results saved to: {path}")


def _print_result(result) -> None:
    table = Table(title="Position Interpretation", show_header=True, header_style="bold cyan")
    table.add_column("Pos", justify="right")
    table.add_column("WT")
    table.add_column("Class")
    table.add_column("Improve", justify="right")
    table.add_column("Degrade", justify="right")
    table.add_column("Best")
    table.add_column("Worst")
    table.add_column("Flags")

    for p in result.positions:
        flags = []
        if p.is_conserved_charged:
            flags.append("charged")
        if p.is_excellent_target:
            flags.append("[bold green]target[/bold green]")
        table.add_row(
            str(p.pos1),
            p.wt_aa,
            p.class_label,
            str(p.num_improve),
            str(p.num_degrade),
            f"{p.best_aa} {p.best_score:+.2f}",
            f"{p.worst_aa} {p.worst_score:+.2f}",
            ", ".join(flags) or "-",
        )
    console.print(table)

    if result.top_beneficial_mutations:
        mut_table = Table(title="Top Mutations", show_header=True, header_style="bold cyan")
        mut_table.add_column("Beneficial")
        mut_table.add_column("ΔBFI", justify="right")
        mut_table.add_column("Harmful")
        mut_table.add_column("ΔBFI", justify="right")
        for good, bad in zip(result.top_beneficial_mutations, result.top_harmful_mutations):
            mut_table.add_row(good.label, f"{good.delta:+.2f}", bad.label, f"{bad.delta:+.2f}")
        console.print(mut_table)

    console.print(Panel(escape(result.global_summary), title="[bold]Summary[/bold]", border_style="blue"))


@cli.command("show-config")
@click.option(
    "--config", "-c", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Rule configuration JSON (default: packaged reference rules)",
)
@click.option("--json", "as_json", is_flag=True, help="Print the configuration as JSON")
def show_config(config_path: Optional[str], as_json: bool):
    """
    Show thresholds, chemical groups and classification rules.
    """
    try:
        config = _load_rules(config_path)
    except InterpretationError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        sys.exit(1)

    if as_json:
        click.echo(config.to_json())
        return

    console.print(f"\n[bold]Residues:[/bold] {' '.join(config.aa_list)}")

    thr_table = Table(title="Thresholds", show_header=True, header_style="bold cyan")
    thr_table.add_column("Name", style="bold")
    thr_table.add_column("Value", justify="right")
    for name, value in config.thresholds.model_dump().items():
        thr_table.add_row(name, str(value))
    console.print(thr_table)

    grp_table = Table(title="Chemical Groups", show_header=True, header_style="bold cyan")
    grp_table.add_column("Group", style="bold")
    grp_table.add_column("Members")
    for group, members in config.aa_groups.items():
        grp_table.add_row(group, " ".join(members))
    console.print(grp_table)

    rule_table = Table(title="Classification Rules (first match wins)", show_header=True, header_style="bold cyan")
    rule_table.add_column("#", justify="right")
    rule_table.add_column("Id", style="bold")
    rule_table.add_column("Label")
    rule_table.add_column("Conditions")
    for i, rule in enumerate(config.position_class_rules, start=1):
        conditions = ", ".join(
            f"{k}={v}" for k, v in rule.conditions.model_dump(exclude_none=True).items()
        )
        rule_table.add_row(str(i), rule.id, rule.label, conditions or "(always)")
    console.print(rule_table)


@cli.command("validate-config")
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False))
def validate_config(config_file: str):
    """
    Check that a rule configuration file is well formed.

    \b
    Examples:
        mutinterp validate-config my_rules.json
    """
    from ..narrative.templates import placeholders
    from ..rules.config import load_config

    try:
        config = load_config(config_file)
    except InterpretationError as e:
        console.print(f"[red]✗[/red] {config_file}: Invalid")
        console.print(f"    - {escape(str(e))}")
        sys.exit(1)

    console.print(
        f"[green]✓[/green] {config_file}: Valid "
        f"({config.n_candidates} residues, {len(config.aa_groups)} groups, "
        f"{len(config.position_class_rules)} rules, {len(config.templates)} templates)"
    )
    for name, text in config.templates.items():
        names = placeholders(text)
        if names:
            console.print(f"[dim]  {name}: {', '.join(names)}[/dim]")


def main():
    """Main entry point for CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
