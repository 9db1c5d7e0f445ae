"""
Closed-form algebra helpers: quadratic roots and small determinants.
"""

import cmath
import math
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from calcengine.errors import DomainError, FormatError


@dataclass(frozen=True)
class QuadraticRoots:
    """
    Roots of ax² + bx + c = 0.

    nature is 'two_real', 'one_real' or 'complex'. Complex roots are
    returned as a conjugate pair, positive imaginary part first.
    """
    discriminant: float
    nature: str
    roots: Tuple[complex, ...]

    @property
    def real_roots(self) -> Tuple[float, ...]:
        if self.nature == 'complex':
            return ()
        return tuple(r.real for r in self.roots)


def solve_quadratic(a: float, b: float, c: float) -> QuadraticRoots:
    """
    Solve ax² + bx + c = 0.

    Raises:
        DomainError: a is zero (not a quadratic), a coefficient is not finite,
            or a root overflows double precision.
    """
    for name, value in (('a', a), ('b', b), ('c', c)):
        if not math.isfinite(value):
            raise DomainError(f"Coefficient {name} must be a finite number.", name)
    if a == 0:
        raise DomainError("Coefficient a cannot be zero for a quadratic equation.", 'a')

    discriminant = b * b - 4 * a * c
    if not math.isfinite(discriminant):
        raise DomainError("Discriminant is not a finite number for these coefficients.", 'discriminant')

    two_a = 2 * a
    try:
        roots, nature = _roots(b, discriminant, two_a)
    except (ZeroDivisionError, OverflowError):
        raise DomainError("Roots are not finite numbers for these coefficients.", 'a')
    if not all(cmath.isfinite(z) for z in roots):
        raise DomainError("Roots are not finite numbers for these coefficients.", 'a')

    return QuadraticRoots(discriminant=discriminant, nature=nature, roots=roots)


def _roots(b: float, discriminant: float, two_a: float) -> Tuple[Tuple[complex, ...], str]:
    if discriminant > 0:
        root = math.sqrt(discriminant)
        roots = (complex((-b + root) / two_a), complex((-b - root) / two_a))
        nature = 'two_real'
    elif discriminant == 0:
        roots = (complex(-b / two_a),)
        nature = 'one_real'
    else:
        root = cmath.sqrt(discriminant)
        first = (-b + root) / two_a
        pair = (first, first.conjugate())
        roots = tuple(sorted(pair, key=lambda z: z.imag, reverse=True))
        nature = 'complex'
    return roots, nature


def determinant(matrix: Sequence[Sequence[float]]) -> float:
    """
    Determinant of a 2x2 or 3x3 matrix by cofactor expansion along the first row.

    Raises:
        FormatError: the matrix is not 2x2 or 3x3, or holds non-numeric entries.
        DomainError: the determinant overflows double precision.
    """
    try:
        m = np.asarray(matrix, dtype=float)
    except (TypeError, ValueError):
        raise FormatError("Matrix must be a square grid of numbers.", matrix)

    if m.shape not in ((2, 2), (3, 3)):
        raise FormatError(f"Only 2x2 and 3x3 matrices are supported, got shape {m.shape}.", matrix)
    if not np.all(np.isfinite(m)):
        raise FormatError("Matrix entries must be finite numbers.", matrix)

    with np.errstate(over='ignore', invalid='ignore'):
        if m.shape == (2, 2):
            det = m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0]
        else:
            det = (
                m[0, 0] * (m[1, 1] * m[2, 2] - m[1, 2] * m[2, 1])
                - m[0, 1] * (m[1, 0] * m[2, 2] - m[1, 2] * m[2, 0])
                + m[0, 2] * (m[1, 0] * m[2, 1] - m[1, 1] * m[2, 0])
            )
    if not np.isfinite(det):
        raise DomainError("Determinant is not a finite number for this matrix.", 'matrix')
    return float(det)
