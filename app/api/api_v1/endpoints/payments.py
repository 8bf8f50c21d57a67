from typing import Any, Optional
from fastapi import APIRouter, HTTPException, Query

from app import schemas
from app.core.payouts import calculate_payout, calculate_payment_breakdown
from app.core.monitoring import metrics

router = APIRouter()

@router.get("/quote", response_model=schemas.PayoutQuote)
def quote_payout(
    booking_amount: float = Query(..., ge=0),
    percent_rate: Optional[float] = Query(None, ge=0, le=1),
    flat_amount: Optional[float] = Query(None, ge=0),
    max_payout: Optional[float] = Query(None, ge=0),
) -> Any:
    """Preview the host/creator/platform split for a booking"""
    split = calculate_payout(booking_amount, percent_rate, flat_amount, max_payout)
    metrics.increment("payments.quotes")
    return schemas.PayoutQuote(
        booking_amount=booking_amount,
        percent_rate=percent_rate,
        flat_amount=flat_amount,
        max_payout=max_payout,
        platform_revenue=split.platform_revenue,
        **split.as_dict(),
    )

@router.post("/breakdown", response_model=schemas.PaymentBreakdown)
def payment_breakdown(
    *,
    breakdown_in: schemas.PaymentBreakdownRequest,
) -> Any:
    """Cent-level breakdown for a collaboration deal"""
    try:
        breakdown = calculate_payment_breakdown(breakdown_in.cash_cents, breakdown_in.deal_type)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return breakdown.as_dict()
