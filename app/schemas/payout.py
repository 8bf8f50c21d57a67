from typing import Optional
from pydantic import BaseModel, Field

class PayoutQuote(BaseModel):
    booking_amount: float
    percent_rate: Optional[float] = None
    flat_amount: Optional[float] = None
    max_payout: Optional[float] = None

    creator_payout: float
    platform_fee_host: float
    platform_fee_creator: float
    host_total: float
    platform_revenue: float

class PaymentBreakdownRequest(BaseModel):
    cash_cents: int = Field(..., ge=0)
    deal_type: str = "flat"

class PaymentBreakdown(BaseModel):
    cash_cents: int
    deal_type: str

    creator_gross_cents: int
    creator_fee_cents: int
    creator_net_cents: int

    host_fee_cents: int
    host_total_cents: int

    platform_revenue_cents: int

    is_stay_only: bool
    is_post_for_stay: bool
    display_message: str
