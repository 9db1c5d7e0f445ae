"""
Fertilizer quantity allocation from N-P-K recommendations.

Products are chosen greedily: phosphorus first, then potassium, then
nitrogen, crediting each product's secondary nutrients against what is
still required. This is a heuristic, not a solution of the underlying
linear system; when products overlap it can over- or under-supply a
nutrient. The residual balance is returned so callers can see that.

Recommendations are per unit area (kg/ha for metric, lbs/acre for
imperial), and fertilizer grades are percentages by weight.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from calcengine.errors import DomainError

logger = logging.getLogger(__name__)

UNITS = {'metric': 'kg', 'imperial': 'lbs'}


@dataclass(frozen=True)
class Fertilizer:
    name: str
    n: float  # % nitrogen
    p: float  # % phosphorus (P2O5)
    k: float  # % potassium (K2O)


@dataclass(frozen=True)
class FertilizerAmount:
    name: str
    amount: float
    supplies: str  # primary nutrient this product was chosen for


@dataclass
class FertilizerPlan:
    fertilizers: List[FertilizerAmount]
    unit: str
    # Positive: still required. Negative: oversupplied.
    residual: Dict[str, float] = field(default_factory=dict)


def _pick(
    fertilizers: Sequence[Fertilizer],
    nutrient: str,
    others: Sequence[str],
    partial: bool = True,
) -> Optional[Fertilizer]:
    """
    Choose the product that supplies `nutrient`.

    Preference: a straight product carrying nothing else, then (if
    `partial`) one free of the first of `others`, then anything carrying it.
    """
    def carries(f):
        return getattr(f, nutrient) > 0

    for candidate in fertilizers:
        if carries(candidate) and all(getattr(candidate, o) == 0 for o in others):
            return candidate
    if partial:
        for candidate in fertilizers:
            if carries(candidate) and getattr(candidate, others[0]) == 0:
                return candidate
    for candidate in fertilizers:
        if carries(candidate):
            return candidate
    return None


def allocate_fertilizers(
    area: float,
    rec_n: float,
    rec_p: float,
    rec_k: float,
    fertilizers: Sequence[Fertilizer],
    unit: str = 'metric',
) -> FertilizerPlan:
    """
    Work out how much of each product to apply.

    Args:
        area: Field area (hectares for metric, acres for imperial), > 0
        rec_n, rec_p, rec_k: Recommended nutrient per unit area, >= 0
        fertilizers: Available products with N-P-K percentages
        unit: 'metric' or 'imperial'

    Returns:
        FertilizerPlan with product amounts in kg or lbs.
    """
    if unit not in UNITS:
        raise DomainError(f"Unit must be one of {list(UNITS)}, got {unit!r}", 'unit')
    if area <= 0:
        raise DomainError("Area must be positive.", 'area')
    for name, value in (('rec_n', rec_n), ('rec_p', rec_p), ('rec_k', rec_k)):
        if value < 0:
            raise DomainError(f"{name} cannot be negative.", name)
    if not fertilizers:
        raise DomainError("At least one fertilizer is required.", 'fertilizers')
    for f in fertilizers:
        if min(f.n, f.p, f.k) < 0 or max(f.n, f.p, f.k) > 100:
            raise DomainError(f"Nutrient percentages for {f.name or 'fertilizer'} must be within 0-100.", 'fertilizers')

    required = {'n': rec_n * area, 'p': rec_p * area, 'k': rec_k * area}
    results: List[FertilizerAmount] = []

    order = (
        ('p', ('n', 'k'), 'Phosphorus Fertilizer'),
        ('k', ('n', 'p'), 'Potassium Fertilizer'),
        ('n', ('p', 'k'), 'Nitrogen Fertilizer'),
    )
    for nutrient, others, fallback_name in order:
        if required[nutrient] <= 0:
            continue
        product = _pick(fertilizers, nutrient, others, partial=nutrient != 'n')
        if product is None:
            continue
        amount = required[nutrient] / (getattr(product, nutrient) / 100)
        results.append(FertilizerAmount(name=product.name or fallback_name, amount=amount, supplies=nutrient))
        for key in required:
            required[key] -= amount * (getattr(product, key) / 100)
        required[nutrient] = 0.0

    residual = {key: round(value, 9) for key, value in required.items()}
    if any(value > 0 for value in residual.values()):
        logger.warning("Fertilizer plan leaves unmet demand: %s", residual)

    return FertilizerPlan(fertilizers=results, unit=UNITS[unit], residual=residual)
