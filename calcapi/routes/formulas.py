"""Formula routes — registry listing and solve-for-unknown."""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from calcapi.models import FormulaInfo, FormulaListResponse, SolveRequest, SolveResponse
from calcengine.errors import DomainError, UnknownFormulaError
from calcengine.formulas import evaluate_formula, get_formula, list_formulas
from calcengine.notation import format_quantity

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/formulas", response_model=FormulaListResponse)
async def list_formulas_endpoint(category: Optional[str] = Query(None, description="Filter by category")):
    """List all solve-for-unknown formulas."""
    formulas = [FormulaInfo(**f) for f in list_formulas(category)]
    return FormulaListResponse(formulas=formulas, total=len(formulas))


@router.get("/formulas/{formula_id}", response_model=FormulaInfo)
async def get_formula_endpoint(formula_id: str):
    """Get one formula's variables and units."""
    try:
        get_formula(formula_id)
    except UnknownFormulaError:
        raise HTTPException(status_code=404, detail="Formula not found")
    return next(FormulaInfo(**f) for f in list_formulas() if f["name"] == formula_id)


@router.post("/formulas/{formula_id}/solve", response_model=SolveResponse)
async def solve_formula(formula_id: str, request: SolveRequest):
    """Solve a formula for one unknown from the remaining variables."""
    try:
        result = evaluate_formula(formula_id, request.solve_for, request.values)
    except UnknownFormulaError:
        raise HTTPException(status_code=404, detail="Formula not found")
    except DomainError as e:
        logger.info("Rejected %s solve for %s: %s", formula_id, request.solve_for, e)
        raise HTTPException(status_code=400, detail=str(e))

    return SolveResponse(
        formula=result.formula,
        solve_for=result.unknown,
        value=result.value,
        unit=result.unit,
        display=format_quantity(result.value, result.unit),
    )
