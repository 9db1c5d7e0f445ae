"""
Error types raised by the calculation engine.

All errors subclass ValueError so callers that only care about
"bad input" can catch a single type.
"""


class CalculationError(ValueError):
    """Base class for every engine failure."""


class DomainError(CalculationError):
    """A mathematically undefined operation was requested."""

    def __init__(self, message: str, variable: str = ''):
        super().__init__(message)
        self.variable = variable


class UnknownFormulaError(DomainError):
    """The requested formula id is not in the registry."""


class FormatError(CalculationError):
    """Structured input (e.g. a dotted-quad address) is malformed."""

    def __init__(self, message: str, raw: object = None):
        super().__init__(message)
        self.raw = raw


class NonConvergentPayoffError(CalculationError):
    """The payment never reduces the principal under compounding interest."""
