"""
Click attribution helpers.

Timestamps stored by the app are naive UTC. Aware datetimes are compared
against "now" in their own timezone.
"""
import hashlib
import re
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Mapping, Optional

from app.core.config import settings

VISITOR_COOKIE = "cs_vid"
ATTRIBUTION_COOKIE = "cs_ref"

LINK_TOKEN_PREFIX = "cs_"

_TOKEN_RE = re.compile(r"^[a-zA-Z0-9_-]{8,50}$")


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Aware datetimes are converted to UTC and stripped to match stored timestamps"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _now_for(reference: datetime) -> datetime:
    if reference.tzinfo is not None:
        return datetime.now(reference.tzinfo)
    return datetime.utcnow()


def get_attribution_window_end(click_date: datetime, window_days: int) -> datetime:
    """Last instant a click is attributable: the click time plus N calendar days."""
    return click_date + timedelta(days=window_days)


def is_within_attribution_window(
    click_date: datetime, window_days: int, now: Optional[datetime] = None
) -> bool:
    """True while now <= click_date + window_days (the end is inclusive)."""
    window_end = get_attribution_window_end(click_date, window_days)
    if now is None:
        now = _now_for(click_date)
    return now <= window_end


def generate_visitor_id() -> str:
    return uuid.uuid4().hex


def generate_link_token() -> str:
    """cs_ followed by 12 URL-safe characters"""
    return f"{LINK_TOKEN_PREFIX}{secrets.token_urlsafe(9)}"


def build_tracking_url(token: str) -> str:
    return f"{settings.APP_URL.rstrip('/')}/r/{token}"


def hash_string(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:32]


def hash_ip(ip: Optional[str]) -> Optional[str]:
    """Salted hash so raw visitor IPs are never stored"""
    if not ip:
        return None
    return hash_string(f"{ip}:{settings.IP_HASH_SALT}")


def hash_user_agent(user_agent: Optional[str]) -> Optional[str]:
    if not user_agent:
        return None
    return hash_string(user_agent)


def truncate_referer(referer: Optional[str], max_length: int = 500) -> Optional[str]:
    if not referer:
        return None
    return referer[:max_length]


def parse_visitor_id(cookie_value: Optional[str]) -> Optional[str]:
    if not cookie_value or len(cookie_value) < 10:
        return None
    return cookie_value


def get_cookie_expiry(days: int, now: Optional[datetime] = None) -> datetime:
    if now is None:
        now = datetime.utcnow()
    return now + timedelta(days=days)


def get_client_ip(headers: Mapping[str, str]) -> Optional[str]:
    """Client IP from proxy headers, first hop wins"""
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()

    real_ip = headers.get("x-real-ip")
    if real_ip:
        return real_ip

    vercel_ip = headers.get("x-vercel-forwarded-for")
    if vercel_ip:
        return vercel_ip.split(",")[0].strip()

    return None


def is_valid_token(token: str) -> bool:
    return bool(_TOKEN_RE.match(token or ""))


def get_visitor_cookie_options(days: Optional[int] = None) -> dict:
    # readable from JS for client-side analytics
    days = days or settings.DEFAULT_ATTRIBUTION_WINDOW_DAYS
    return {
        "httponly": False,
        "secure": settings.is_production,
        "samesite": "lax",
        "max_age": days * 24 * 60 * 60,
        "path": "/",
    }


def get_attribution_cookie_options(days: Optional[int] = None) -> dict:
    days = days or settings.DEFAULT_ATTRIBUTION_WINDOW_DAYS
    return {
        "httponly": True,
        "secure": settings.is_production,
        "samesite": "lax",
        "max_age": days * 24 * 60 * 60,
        "path": "/",
    }
