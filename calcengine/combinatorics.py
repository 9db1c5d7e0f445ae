"""
Permutations and combinations.

Float results come from a factorial table sized to the range where n!
fits in a double (170! ≈ 7.3e306; 171! overflows). The table is built
once at import and never mutated. Exact integer counts are reported
alongside via math.perm / math.comb.
"""

import math
from dataclasses import dataclass
from typing import Tuple

from calcengine.errors import DomainError

MAX_FACTORIAL_N = 170


def _build_factorial_table(limit: int) -> Tuple[float, ...]:
    table = [1.0]
    for k in range(1, limit + 1):
        table.append(table[-1] * k)
    return tuple(table)


FACTORIALS: Tuple[float, ...] = _build_factorial_table(MAX_FACTORIAL_N)


@dataclass(frozen=True)
class CountResult:
    kind: str       # 'permutation' or 'combination'
    n: int
    r: int
    value: float    # double-precision count
    exact: int      # exact integer count


def factorial(n: int) -> float:
    """n! as a float, for 0 <= n <= 170."""
    if isinstance(n, bool) or not isinstance(n, int):
        raise DomainError(f"n must be a whole number, got {n!r}", 'n')
    if n < 0:
        raise DomainError("Factorial is undefined for negative numbers.", 'n')
    if n > MAX_FACTORIAL_N:
        raise DomainError(f"n! overflows double precision for n > {MAX_FACTORIAL_N}.", 'n')
    return FACTORIALS[n]


def _check_counts(n: int, r: int) -> None:
    for name, value in (('n', n), ('r', r)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise DomainError(f"{name} must be a whole number, got {value!r}", name)
        if value < 0:
            raise DomainError(f"{name} must be non-negative.", name)
    if r > n:
        raise DomainError("Items to choose (r) cannot be greater than total items (n).", 'r')
    if n > MAX_FACTORIAL_N:
        raise DomainError(f"Total items (n) cannot exceed {MAX_FACTORIAL_N}.", 'n')


def permutations(n: int, r: int) -> CountResult:
    """nPr = n! / (n − r)!"""
    _check_counts(n, r)
    return CountResult(
        kind='permutation',
        n=n,
        r=r,
        value=FACTORIALS[n] / FACTORIALS[n - r],
        exact=math.perm(n, r),
    )


def combinations(n: int, r: int) -> CountResult:
    """nCr = n! / (r! · (n − r)!)"""
    _check_counts(n, r)
    return CountResult(
        kind='combination',
        n=n,
        r=r,
        value=FACTORIALS[n] / (FACTORIALS[r] * FACTORIALS[n - r]),
        exact=math.comb(n, r),
    )
