"""Math routes — permutations/combinations, quadratic roots, determinants."""

import logging

from fastapi import APIRouter, HTTPException

from calcapi.models import (
    CombinatoricsRequest,
    CombinatoricsResponse,
    ComplexValue,
    CountKind,
    DeterminantRequest,
    DeterminantResponse,
    QuadraticRequest,
    QuadraticResponse,
)
from calcengine.algebra import determinant, solve_quadratic
from calcengine.combinatorics import combinations, permutations
from calcengine.errors import CalculationError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/math/combinatorics", response_model=CombinatoricsResponse)
async def combinatorics_endpoint(request: CombinatoricsRequest):
    """nPr or nCr."""
    count = permutations if request.kind == CountKind.PERMUTATION else combinations
    try:
        result = count(request.n, request.r)
    except CalculationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return CombinatoricsResponse(
        kind=request.kind,
        n=result.n,
        r=result.r,
        result=result.value,
        exact=str(result.exact),
    )


@router.post("/math/quadratic", response_model=QuadraticResponse)
async def quadratic_endpoint(request: QuadraticRequest):
    """Roots of ax² + bx + c = 0, including complex pairs."""
    try:
        roots = solve_quadratic(request.a, request.b, request.c)
    except CalculationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return QuadraticResponse(
        discriminant=roots.discriminant,
        nature=roots.nature,
        roots=[ComplexValue(real=z.real, imag=z.imag) for z in roots.roots],
        real_roots=list(roots.real_roots),
    )


@router.post("/math/determinant", response_model=DeterminantResponse)
async def determinant_endpoint(request: DeterminantRequest):
    """Determinant of a 2x2 or 3x3 matrix."""
    try:
        det = determinant(request.matrix)
    except CalculationError as e:
        logger.info("Rejected determinant input: %s", e)
        raise HTTPException(status_code=400, detail=str(e))

    size = len(request.matrix)
    return DeterminantResponse(size=f"{size}x{size}", determinant=det)
