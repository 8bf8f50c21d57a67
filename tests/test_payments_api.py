def test_quote_percentage(client):
    response = client.get("/api/v1/payments/quote", params={
        "booking_amount": 1000, "percent_rate": 0.10,
    })

    assert response.status_code == 200
    body = response.json()
    assert body["creator_payout"] == 85
    assert body["platform_fee_host"] == 15
    assert body["platform_fee_creator"] == 15
    assert body["host_total"] == 115
    assert body["platform_revenue"] == 30


def test_quote_flat_with_cap(client):
    response = client.get("/api/v1/payments/quote", params={
        "booking_amount": 500, "flat_amount": 150, "max_payout": 100,
    })

    assert response.json()["host_total"] == 115


def test_quote_without_terms_is_zero(client):
    body = client.get("/api/v1/payments/quote", params={"booking_amount": 1000}).json()

    assert body["creator_payout"] == 0
    assert body["host_total"] == 0


def test_quote_rejects_rate_above_one(client):
    response = client.get("/api/v1/payments/quote", params={
        "booking_amount": 1000, "percent_rate": 1.5,
    })

    assert response.status_code == 422


def test_breakdown(client):
    response = client.post("/api/v1/payments/breakdown", json={"cash_cents": 50000, "deal_type": "flat"})

    assert response.status_code == 200
    assert response.json()["host_total_cents"] == 57500


def test_breakdown_unknown_deal_type(client):
    response = client.post("/api/v1/payments/breakdown", json={"cash_cents": 50000, "deal_type": "barter"})

    assert response.status_code == 400
