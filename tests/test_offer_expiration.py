from datetime import datetime, timedelta

import pytest

from app import models
from app.core.config import settings
from app.services.affiliate_link_service import AffiliateLinkService
from app.services.offer_expiration_service import OfferExpirationService

NOW = datetime(2024, 6, 10, 9, 0)


def make_offer(db, host, creator, expires_at, status=models.OfferStatus.PENDING, **extra):
    offer = models.Offer(
        host_id=host.id,
        creator_id=creator.id,
        offer_type="flat",
        property_title="Lakehouse",
        cash_cents=20000,
        deliverables=["1 Reel"],
        status=status,
        expires_at=expires_at,
        **extra,
    )
    db.add(offer)
    db.commit()
    db.refresh(offer)
    return offer


def notifications_for(db, user, type_):
    return db.query(models.Notification).filter(
        models.Notification.user_id == user.id,
        models.Notification.type == type_,
    ).all()


def test_overdue_offers_expire(db, host, creator):
    overdue = make_offer(db, host, creator, NOW - timedelta(minutes=5))
    open_offer = make_offer(db, host, creator, NOW + timedelta(days=7))
    accepted = make_offer(db, host, creator, NOW - timedelta(days=1), status=models.OfferStatus.ACCEPTED)

    results = OfferExpirationService(db).process(now=NOW)

    assert results["offers_expired"] == 1
    assert results["errors"] == []
    for offer in (overdue, open_offer, accepted):
        db.refresh(offer)
    assert overdue.status == models.OfferStatus.EXPIRED
    assert overdue.responded_at == NOW
    assert open_offer.status == models.OfferStatus.PENDING
    assert accepted.status == models.OfferStatus.ACCEPTED

    assert len(notifications_for(db, creator, models.NotificationType.OFFER_EXPIRED)) == 1
    assert len(notifications_for(db, host, models.NotificationType.OFFER_EXPIRED)) == 1


@pytest.mark.parametrize("hours_left,warned", [
    (43, False),
    (44, True),
    (48, True),
    (52, True),
    (53, False),
])
def test_warning_window(db, host, creator, hours_left, warned):
    make_offer(db, host, creator, NOW + timedelta(hours=hours_left))

    results = OfferExpirationService(db).process(now=NOW)

    assert results["warnings_sent"] == int(warned)
    assert len(notifications_for(db, creator, models.NotificationType.OFFER_EXPIRING)) == int(warned)


def test_warning_sent_once(db, host, creator):
    offer = make_offer(db, host, creator, NOW + timedelta(hours=50))
    service = OfferExpirationService(db)

    first = service.process(now=NOW)
    second = service.process(now=NOW + timedelta(hours=2))

    assert first["warnings_sent"] == 1
    assert second["warnings_sent"] == 0
    db.refresh(offer)
    assert offer.expiry_warning_sent_at == NOW


def test_cron_endpoint_runs_job(client, db, host, creator):
    make_offer(db, host, creator, datetime.utcnow() - timedelta(hours=1))

    response = client.post("/api/v1/cron/process-expired-offers")

    assert response.status_code == 200
    body = response.json()
    assert body["offers_expired"] == 1
    assert body["warnings_sent"] == 0


def test_cron_secret_required_when_configured(client, monkeypatch):
    monkeypatch.setattr(settings, "CRON_SECRET", "s3cret")

    assert client.get("/api/v1/cron/process-expired-offers").status_code == 401
    assert client.get(
        "/api/v1/cron/process-expired-offers", headers={"x-cron-secret": "wrong"}
    ).status_code == 401
    assert client.get(
        "/api/v1/cron/process-expired-offers", headers={"x-cron-secret": "s3cret"}
    ).status_code == 200


def test_expire_links_endpoint(client, db, host, creator):
    service = AffiliateLinkService(db)
    stale = service.create_link(
        host=host,
        creator_id=creator.id,
        destination_url="https://airbnb.com/rooms/1",
        expires_at=datetime.utcnow() - timedelta(days=1),
    )
    fresh = service.create_link(
        host=host,
        creator_id=creator.id,
        destination_url="https://airbnb.com/rooms/2",
        expires_at=datetime.utcnow() + timedelta(days=1),
    )

    response = client.post("/api/v1/cron/expire-links")

    assert response.json()["links_deactivated"] == 1
    db.refresh(stale)
    db.refresh(fresh)
    assert stale.is_active is False
    assert fresh.is_active is True
