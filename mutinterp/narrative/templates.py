"""
Placeholder substitution for narrative templates.

Templates use ``{{name}}`` placeholders; whitespace inside the braces is
ignored, so ``{{ name }}`` is the same placeholder. Filling is strict:
anything between double braces that has no value, including malformed
names such as ``{{pos-1}}`` or ``{{}}``, is a configuration error and
raises :class:`TemplateError` instead of leaking into the report.
Values not referenced by a template are ignored.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from ..core.exceptions import TemplateError

PLACEHOLDER = re.compile(r"\{\{\s*([^{}]*?)\s*\}\}")


def placeholders(template: str) -> list[str]:
    """Placeholder names in order of first appearance."""
    return list(dict.fromkeys(PLACEHOLDER.findall(template)))


def format_score(value: float) -> str:
    """Scores are always reported with two decimals."""
    return f"{value:.2f}"


def fill_template(
    template: str,
    variables: Mapping[str, Any],
    name: str = "<template>",
) -> str:
    """
    Substitute every placeholder of a template.

    Args:
        template: Template text
        variables: Values by placeholder name; converted with str()
        name: Template name used in error messages

    Returns:
        Filled text

    Raises:
        TemplateError: If any placeholder has no value
    """
    missing = [p for p in placeholders(template) if p not in variables]
    if missing:
        raise TemplateError(name, missing)

    return PLACEHOLDER.sub(lambda m: str(variables[m.group(1)]), template)
