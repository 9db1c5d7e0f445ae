"""Agriculture routes — fertilizer requirement."""

from fastapi import APIRouter, HTTPException

from calcapi.models import FertilizerAmountModel, FertilizerRequest, FertilizerResponse
from calcengine.errors import CalculationError
from calcengine.fertilizer import Fertilizer, allocate_fertilizers

router = APIRouter()


@router.post("/agriculture/fertilizer", response_model=FertilizerResponse)
async def fertilizer_endpoint(request: FertilizerRequest):
    """Product quantities needed to meet an N-P-K recommendation."""
    products = [Fertilizer(name=f.name, n=f.n, p=f.p, k=f.k) for f in request.fertilizers]
    try:
        plan = allocate_fertilizers(
            request.area,
            request.rec_n,
            request.rec_p,
            request.rec_k,
            products,
            unit=request.unit.value,
        )
    except CalculationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return FertilizerResponse(
        fertilizers=[
            FertilizerAmountModel(name=f.name, amount=f.amount, supplies=f.supplies)
            for f in plan.fertilizers
        ],
        unit=plan.unit,
        residual=plan.residual,
    )
