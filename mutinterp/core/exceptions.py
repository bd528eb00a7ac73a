"""
Exception hierarchy for MutInterp.

Every failure raised by the interpretation pipeline derives from
``InterpretationError`` so callers can surface all configuration and data
problems at a single boundary. The engine never returns a partial result:
an interpretation either completes or raises one of these.
"""

from __future__ import annotations


class InterpretationError(Exception):
    """Base exception for interpretation errors."""
    pass


class MatrixShapeError(InterpretationError, ValueError):
    """Raised when matrix, wild-type sequence and residue list disagree in shape."""
    pass


class MissingConfigKeyError(InterpretationError, KeyError):
    """
    Raised when a group, template or explanation referenced by the rules
    is absent from the configuration.
    """

    def __init__(self, key: str, section: str):
        self.key = key
        self.section = section
        super().__init__(f"Missing configuration key '{key}' in section '{section}'")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class TemplateError(InterpretationError):
    """Raised when a template keeps unresolved {{placeholders}} after filling."""

    def __init__(self, template_name: str, missing: list[str]):
        self.template_name = template_name
        self.missing = missing
        names = ", ".join(missing)
        super().__init__(
            f"Template '{template_name}' has unresolved placeholder(s): {names}"
        )


class ConfigError(InterpretationError):
    """Raised when a rule configuration cannot be read or fails validation."""
    pass
