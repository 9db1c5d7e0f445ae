"""Finance routes — credit card payoff, EMI quote, amortization schedule."""

import logging

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import Response

from calcapi.models import (
    EMIRequest,
    EMIResponse,
    ExportFormat,
    PayoffRequest,
    PayoffResponse,
    ScheduleResponse,
    ScheduleRow,
)
from calcengine.amortization import (
    amortization_schedule,
    format_duration,
    quote_monthly_payment,
    solve_payoff,
)
from calcengine.errors import CalculationError
from calcengine.export import schedule_to_csv

logger = logging.getLogger(__name__)

router = APIRouter()


def _payoff_response(request: PayoffRequest) -> PayoffResponse:
    payoff = solve_payoff(request.balance, request.apr, request.monthly_payment)
    return PayoffResponse(
        months_to_pay_off=payoff.months_to_pay_off,
        duration=format_duration(payoff.months_to_pay_off),
        total_interest=payoff.total_interest,
        total_payment=payoff.total_payment,
    )


@router.post("/finance/payoff", response_model=PayoffResponse)
async def payoff_endpoint(request: PayoffRequest):
    """Months and total interest to pay off a balance with a fixed payment."""
    try:
        return _payoff_response(request)
    except CalculationError as e:
        logger.info("Rejected payoff %s: %s", request.model_dump(), e)
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/finance/emi", response_model=EMIResponse)
async def emi_endpoint(request: EMIRequest):
    """Fixed monthly payment for a loan amount, rate and term."""
    try:
        quote = quote_monthly_payment(request.principal, request.annual_rate, request.term_months)
    except CalculationError as e:
        logger.info("Rejected EMI quote %s: %s", request.model_dump(), e)
        raise HTTPException(status_code=400, detail=str(e))

    return EMIResponse(
        monthly_payment=quote.monthly_payment,
        total_payment=quote.total_payment,
        total_interest=quote.total_interest,
    )


@router.post("/finance/schedule")
async def schedule_endpoint(
    request: PayoffRequest,
    format: ExportFormat = Query(ExportFormat.JSON, description="json or csv"),
):
    """Month-by-month payoff schedule, as JSON or a CSV download."""
    try:
        payoff = _payoff_response(request)
        rows = amortization_schedule(request.balance, request.apr, request.monthly_payment)
    except CalculationError as e:
        logger.info("Rejected schedule %s: %s", request.model_dump(), e)
        raise HTTPException(status_code=400, detail=str(e))

    if format == ExportFormat.CSV:
        return Response(
            content=schedule_to_csv(rows),
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=payoff_schedule.csv"},
        )

    return ScheduleResponse(payoff=payoff, schedule=[ScheduleRow(**row) for row in rows])
