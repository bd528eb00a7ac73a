"""
Narrative text generation from rule outputs.

Modules:
    templates: Strict ``{{placeholder}}`` substitution
    text: Position narratives, the global summary and the mutation report
"""

from .templates import fill_template, format_score, placeholders
from .text import (
    chemistry_sentences,
    format_mutation,
    format_positions,
    generate_global_summary,
    generate_mutation_report,
    generate_position_text,
    position_variables,
)

__all__ = [
    "fill_template",
    "format_score",
    "placeholders",
    "generate_position_text",
    "generate_global_summary",
    "generate_mutation_report",
    "chemistry_sentences",
    "position_variables",
    "format_positions",
    "format_mutation",
]
