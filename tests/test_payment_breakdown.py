import pytest

from app.core.payouts import (
    POST_FOR_STAY_FEE_CENTS,
    calculate_payment_breakdown,
    cents_to_dollars,
    is_valid_deal_type,
)


def test_standard_cash_deal():
    breakdown = calculate_payment_breakdown(50000)

    assert breakdown.creator_gross_cents == 50000
    assert breakdown.host_fee_cents == 7500
    assert breakdown.creator_fee_cents == 7500
    assert breakdown.host_total_cents == 57500
    assert breakdown.creator_net_cents == 42500
    assert breakdown.platform_revenue_cents == 15000
    assert not breakdown.is_stay_only
    assert breakdown.display_message == "Host pays $575.00, Creator receives $425.00"


def test_fee_rounds_half_up_to_whole_cents():
    # 15% of 333 cents is 49.95
    breakdown = calculate_payment_breakdown(333)

    assert breakdown.host_fee_cents == 50
    assert breakdown.creator_fee_cents == 50
    assert breakdown.host_total_cents == 383
    assert breakdown.creator_net_cents == 283


def test_fractional_cash_is_rounded():
    assert calculate_payment_breakdown(999.6).cash_cents == 1000


def test_post_for_stay_charges_flat_fee():
    breakdown = calculate_payment_breakdown(25000, "post-for-stay")

    assert breakdown.cash_cents == 0
    assert breakdown.creator_net_cents == 0
    assert breakdown.host_fee_cents == POST_FOR_STAY_FEE_CENTS
    assert breakdown.host_total_cents == 9900
    assert breakdown.platform_revenue_cents == 9900
    assert breakdown.is_post_for_stay
    assert breakdown.is_stay_only


def test_stay_only_deal_is_free():
    breakdown = calculate_payment_breakdown(0, "flat-with-bonus")

    assert breakdown.host_total_cents == 0
    assert breakdown.platform_revenue_cents == 0
    assert breakdown.is_stay_only
    assert not breakdown.is_post_for_stay
    assert breakdown.display_message == "No cash payment (stay-only)"


def test_negative_cash_rejected():
    with pytest.raises(ValueError):
        calculate_payment_breakdown(-1)


def test_unknown_deal_type_rejected():
    with pytest.raises(ValueError):
        calculate_payment_breakdown(1000, "barter")


@pytest.mark.parametrize("deal_type,valid", [
    ("flat", True),
    ("flat-with-bonus", True),
    ("post-for-stay", True),
    ("percentage", False),
    ("", False),
])
def test_is_valid_deal_type(deal_type, valid):
    assert is_valid_deal_type(deal_type) is valid


def test_cents_to_dollars():
    assert cents_to_dollars(9900) == "$99.00"
    assert cents_to_dollars(5) == "$0.05"
