"""
Input guards for solve-for-unknown formulas.

Rejects variable sets that would make a rearranged formula undefined
before any arithmetic is attempted.
"""

import math
from typing import Dict, Optional

from calcengine.errors import DomainError


def readable(name: str) -> str:
    """'final_velocity' -> 'final velocity'."""
    return name.replace('_', ' ')


def check_divisors(spec, unknown: str, known: Dict[str, Optional[float]]) -> Dict[str, Optional[float]]:
    """
    Validate a variable set against the rearrangement that solves for `unknown`.

    Args:
        spec: FormulaSpec whose rearrangement table is consulted
        unknown: Name of the variable being solved for
        known: Mapping of variable name to value. The unknown's own entry,
               if present, is ignored.

    Returns:
        `known`, unchanged.

    Raises:
        DomainError: unknown is not a variable of the formula, a required
            value is missing or non-finite, a divisor is zero, or a square
            root would be taken of a negative value.
    """
    if unknown not in spec.rearrangements:
        raise DomainError(
            f"'{unknown}' is not a variable of {spec.name}. "
            f"Choose one of: {list(spec.rearrangements.keys())}",
            unknown,
        )

    for name in known:
        if name not in spec.rearrangements:
            raise DomainError(f"'{name}' is not a variable of {spec.name}.", name)

    rearrangement = spec.rearrangements[unknown]

    for name in rearrangement.requires:
        value = known.get(name)
        if value is None:
            raise DomainError(
                f"{readable(name).capitalize()} is required when solving for {readable(unknown)}.",
                name,
            )
        try:
            value = float(value)
        except (TypeError, ValueError):
            raise DomainError(f"{readable(name).capitalize()} must be a number, got {value!r}.", name)
        if not math.isfinite(value):
            raise DomainError(f"{readable(name).capitalize()} must be a finite number.", name)

    for name in rearrangement.nonzero:
        if float(known[name]) == 0:
            raise DomainError(
                f"{readable(name).capitalize()} cannot be zero when solving for {readable(unknown)}.",
                name,
            )

    if rearrangement.radicand is not None:
        values = {name: float(known[name]) for name in rearrangement.requires}
        if rearrangement.radicand(values) < 0:
            raise DomainError(
                f"Cannot take the square root of a negative value when solving for {readable(unknown)}.",
                unknown,
            )

    return known
