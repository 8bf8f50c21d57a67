from fastapi.testclient import TestClient

from app import models
from app.services.tracking_service import TrackingService
from app.core.attribution import ATTRIBUTION_COOKIE, VISITOR_COOKIE
from app.main import app
from app.services.affiliate_link_service import AffiliateLinkService


def make_link(db, host, creator, **extra):
    return AffiliateLinkService(db).create_link(
        host=host,
        creator_id=creator.id,
        destination_url="https://airbnb.com/rooms/123456",
        **extra,
    )


def test_click_redirects_and_sets_cookies(client, db, host, creator):
    link = make_link(db, host, creator, attribution_window_days=14)

    response = client.get(f"/r/{link.token}", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "https://airbnb.com/rooms/123456"
    assert len(response.cookies[VISITOR_COOKIE]) == 32
    assert response.cookies[ATTRIBUTION_COOKIE].strip('"').startswith(f"{link.token}|")
    assert "Max-Age=1209600" in response.headers["set-cookie"]

    db.refresh(link)
    assert link.click_count == 1
    assert link.unique_click_count == 1


def test_repeat_visitor_counts_as_revisit(client, db, host, creator):
    link = make_link(db, host, creator)

    client.get(f"/r/{link.token}", follow_redirects=False)
    client.get(f"/r/{link.token}", follow_redirects=False)

    db.refresh(link)
    assert link.click_count == 2
    assert link.unique_click_count == 1

    clicks = db.query(models.LinkClick).filter(models.LinkClick.link_id == link.id).all()
    assert sorted(c.is_revisit for c in clicks) == [False, True]
    assert len({c.visitor_id for c in clicks}) == 1


def test_new_visitor_is_unique(client, db, host, creator, rate_limiter):
    link = make_link(db, host, creator)

    client.get(f"/r/{link.token}", follow_redirects=False)
    TestClient(app).get(f"/r/{link.token}", follow_redirects=False)

    db.refresh(link)
    assert link.unique_click_count == 2


def test_click_stores_hashed_request_details(client, db, host, creator):
    link = make_link(db, host, creator)

    client.get(
        f"/r/{link.token}",
        headers={
            "x-forwarded-for": "203.0.113.5",
            "user-agent": "Mozilla/5.0",
            "referer": "https://instagram.com/tess",
        },
        follow_redirects=False,
    )

    click = db.query(models.LinkClick).filter(models.LinkClick.link_id == link.id).one()
    assert click.ip_hash is not None
    assert click.ip_hash != "203.0.113.5"
    assert click.referer == "https://instagram.com/tess"


def test_unknown_token_redirects_home(client):
    response = client.get("/r/cs_doesnotexist", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"].endswith("/?error=invalid_link")


def test_malformed_token_redirects_home(client):
    response = client.get("/r/bad", follow_redirects=False)

    assert response.headers["location"].endswith("/?error=invalid_link")


def test_inactive_link_is_not_tracked(client, db, host, creator):
    link = make_link(db, host, creator)
    AffiliateLinkService(db).deactivate(link)

    response = client.get(f"/r/{link.token}", follow_redirects=False)

    assert response.headers["location"].endswith("/?error=invalid_link")
    db.refresh(link)
    assert link.click_count == 0


def test_rate_limited_per_ip(client, db, host, creator, rate_limiter):
    rate_limiter.limit = 2
    link = make_link(db, host, creator)
    headers = {"x-forwarded-for": "198.51.100.9"}

    statuses = [
        client.get(f"/r/{link.token}", headers=headers, follow_redirects=False).status_code
        for _ in range(3)
    ]

    assert statuses == [302, 302, 429]
    other = client.get(f"/r/{link.token}", headers={"x-forwarded-for": "198.51.100.10"}, follow_redirects=False)
    assert other.status_code == 302


def test_clicks_from_two_sessions_both_count(db, second_db, host, creator):
    link = make_link(db, host, creator)
    # both sessions hold the link with click_count == 0
    same_link = second_db.get(models.AffiliateLink, link.id)
    assert same_link.click_count == 0

    TrackingService(db).record_click(link, "a" * 32)
    TrackingService(second_db).record_click(same_link, "b" * 32)

    db.refresh(link)
    assert link.click_count == 2
    assert link.unique_click_count == 2
    assert same_link.click_count == 2
    assert db.query(models.LinkClick).filter(models.LinkClick.link_id == link.id).count() == 2


def test_revisit_bumps_only_total_clicks(db, host, creator):
    link = make_link(db, host, creator)
    service = TrackingService(db)

    first = service.record_click(link, "a" * 32)
    second = service.record_click(link, "a" * 32)

    assert first.is_unique and second.is_revisit
    assert link.click_count == 2
    assert link.unique_click_count == 1
