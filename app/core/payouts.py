"""
Platform fee calculations.

Business rules:
- Commission deals: the platform takes 15% of the base payout from each side.
  The host pays base + 15%, the creator receives base - 15%.
- Paid deals (cents): same 15% on both sides of the cash portion.
- Post-for-stay deals: the host pays a flat $99 platform fee, no cash moves.
"""
import math
from dataclasses import dataclass, asdict
from typing import Optional

PLATFORM_FEE_RATE = 0.15

POST_FOR_STAY_FEE_CENTS = 9900  # $99

DEAL_TYPES = ("flat", "flat-with-bonus", "post-for-stay")


def round_cents(amount: float) -> float:
    """Round a major-unit amount to cents, half-up."""
    return math.floor(amount * 100 + 0.5) / 100


@dataclass(frozen=True)
class PayoutSplit:
    creator_payout: float
    platform_fee_host: float
    platform_fee_creator: float
    host_total: float

    @property
    def platform_revenue(self) -> float:
        return round_cents(self.platform_fee_host + self.platform_fee_creator)

    def as_dict(self) -> dict:
        return asdict(self)


ZERO_SPLIT = PayoutSplit(0.0, 0.0, 0.0, 0.0)


def resolve_base_payout(
    booking_amount: float,
    percent_rate: Optional[float],
    flat_amount: Optional[float],
    max_payout: Optional[float] = None,
) -> float:
    """Commission before fees. Percent wins over flat; the cap applies to either."""
    base_payout = 0.0
    if percent_rate is not None:
        base_payout = booking_amount * percent_rate
    elif flat_amount is not None:
        base_payout = flat_amount

    if max_payout is not None and base_payout > max_payout:
        base_payout = max_payout

    return base_payout


def calculate_payout(
    booking_amount: float,
    percent_rate: Optional[float],
    flat_amount: Optional[float],
    max_payout: Optional[float] = None,
) -> PayoutSplit:
    """
    Split a commission between host, creator and platform.

    Inputs are not validated: negative amounts and rates outside [0, 1] pass
    straight through. With neither a rate nor a flat amount the split is all
    zeros.
    """
    base_payout = resolve_base_payout(booking_amount, percent_rate, flat_amount, max_payout)

    platform_fee_host = base_payout * PLATFORM_FEE_RATE
    platform_fee_creator = base_payout * PLATFORM_FEE_RATE

    host_total = base_payout + platform_fee_host
    creator_payout = base_payout - platform_fee_creator

    return PayoutSplit(
        creator_payout=round_cents(creator_payout),
        platform_fee_host=round_cents(platform_fee_host),
        platform_fee_creator=round_cents(platform_fee_creator),
        host_total=round_cents(host_total),
    )


@dataclass(frozen=True)
class PaymentBreakdown:
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

    def as_dict(self) -> dict:
        return asdict(self)


def is_valid_deal_type(deal_type: str) -> bool:
    return deal_type in DEAL_TYPES


def cents_to_dollars(cents: int) -> str:
    return f"${cents / 100:.2f}"


def _fee_cents(cash_cents: int) -> int:
    return int(math.floor(cash_cents * PLATFORM_FEE_RATE + 0.5))


def calculate_payment_breakdown(cash_cents: float, deal_type: str = "flat") -> PaymentBreakdown:
    """Payment breakdown for a collaboration deal, in integer cents."""
    if cash_cents < 0:
        raise ValueError("cash_cents must be >= 0")
    if not is_valid_deal_type(deal_type):
        raise ValueError(f"Unknown deal type: {deal_type}")

    cash_cents = int(math.floor(cash_cents + 0.5))

    if deal_type == "post-for-stay":
        return PaymentBreakdown(
            cash_cents=0,
            deal_type=deal_type,
            creator_gross_cents=0,
            creator_fee_cents=0,
            creator_net_cents=0,
            host_fee_cents=POST_FOR_STAY_FEE_CENTS,
            host_total_cents=POST_FOR_STAY_FEE_CENTS,
            platform_revenue_cents=POST_FOR_STAY_FEE_CENTS,
            is_stay_only=True,
            is_post_for_stay=True,
            display_message=f"Post-for-stay: Host pays {cents_to_dollars(POST_FOR_STAY_FEE_CENTS)} platform fee",
        )

    if cash_cents == 0:
        return PaymentBreakdown(
            cash_cents=0,
            deal_type=deal_type,
            creator_gross_cents=0,
            creator_fee_cents=0,
            creator_net_cents=0,
            host_fee_cents=0,
            host_total_cents=0,
            platform_revenue_cents=0,
            is_stay_only=True,
            is_post_for_stay=False,
            display_message="No cash payment (stay-only)",
        )

    host_fee_cents = _fee_cents(cash_cents)
    creator_fee_cents = _fee_cents(cash_cents)
    host_total_cents = cash_cents + host_fee_cents
    creator_net_cents = cash_cents - creator_fee_cents

    return PaymentBreakdown(
        cash_cents=cash_cents,
        deal_type=deal_type,
        creator_gross_cents=cash_cents,
        creator_fee_cents=creator_fee_cents,
        creator_net_cents=creator_net_cents,
        host_fee_cents=host_fee_cents,
        host_total_cents=host_total_cents,
        platform_revenue_cents=host_fee_cents + creator_fee_cents,
        is_stay_only=False,
        is_post_for_stay=False,
        display_message=(
            f"Host pays {cents_to_dollars(host_total_cents)}, "
            f"Creator receives {cents_to_dollars(creator_net_cents)}"
        ),
    )
