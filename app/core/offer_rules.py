"""
Offer validation against platform rules.

Rules:
- Minimum total value $100 (cash + estimated stay value)
- Cash-only offers need at least $50
- 1 to 10 deliverables
- Expiration between 3 and 30 days out
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional

from app.core.attribution import to_naive_utc

MIN_TOTAL_VALUE_CENTS = 10000
MIN_CASH_IF_NO_STAY = 5000

MAX_DELIVERABLES = 10

MIN_EXPIRATION_DAYS = 3
MAX_EXPIRATION_DAYS = 30
DEFAULT_EXPIRATION_DAYS = 14

DEFAULT_STAY_VALUE_PER_NIGHT = 15000


@dataclass
class OfferTerms:
    offer_type: str
    cash_cents: int
    deliverables: List[str]
    stay_nights: Optional[int] = None
    stay_value_cents: Optional[int] = None
    traffic_bonus_enabled: bool = False
    traffic_bonus_threshold: Optional[int] = None
    traffic_bonus_cents: Optional[int] = None
    expires_at: Optional[datetime] = None


@dataclass
class OfferValidation:
    is_valid: bool
    total_value_cents: int
    errors: List[str] = field(default_factory=list)


def estimate_stay_value(nights: Optional[int]) -> int:
    if not nights or nights <= 0:
        return 0
    return nights * DEFAULT_STAY_VALUE_PER_NIGHT


def compute_total_value(terms: OfferTerms) -> int:
    cash_value = terms.cash_cents or 0
    stay_value = terms.stay_value_cents or estimate_stay_value(terms.stay_nights)
    return cash_value + stay_value


def default_expiration(now: Optional[datetime] = None) -> datetime:
    return (now or datetime.utcnow()) + timedelta(days=DEFAULT_EXPIRATION_DAYS)


def validate_offer_terms(terms: OfferTerms, now: Optional[datetime] = None) -> OfferValidation:
    errors = []
    total_value_cents = compute_total_value(terms)

    if total_value_cents < MIN_TOTAL_VALUE_CENTS:
        errors.append(f"Offer value must be at least ${MIN_TOTAL_VALUE_CENTS // 100}")

    has_stay = bool(terms.stay_nights and terms.stay_nights > 0)
    if not has_stay and terms.cash_cents < MIN_CASH_IF_NO_STAY:
        errors.append(f"Cash offers without a stay must be at least ${MIN_CASH_IF_NO_STAY // 100}")

    if len(terms.deliverables) > MAX_DELIVERABLES:
        errors.append(f"Maximum {MAX_DELIVERABLES} deliverables per offer")

    if not terms.deliverables:
        errors.append("At least one deliverable is required")

    if terms.traffic_bonus_enabled:
        if not terms.traffic_bonus_threshold or terms.traffic_bonus_threshold <= 0:
            errors.append("Traffic bonus requires a click threshold")
        if not terms.traffic_bonus_cents or terms.traffic_bonus_cents <= 0:
            errors.append("Traffic bonus requires a bonus amount")

    expires_at = to_naive_utc(terms.expires_at)
    if expires_at is not None:
        now = now or datetime.utcnow()
        if expires_at < now + timedelta(days=MIN_EXPIRATION_DAYS):
            errors.append(f"Offers must stay open at least {MIN_EXPIRATION_DAYS} days")
        elif expires_at > now + timedelta(days=MAX_EXPIRATION_DAYS):
            errors.append(f"Offers cannot stay open longer than {MAX_EXPIRATION_DAYS} days")

    return OfferValidation(
        is_valid=not errors,
        total_value_cents=total_value_cents,
        errors=errors,
    )
