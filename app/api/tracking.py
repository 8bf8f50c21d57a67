from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session
import logging

from app.api import deps
from app.core.attribution import (
    ATTRIBUTION_COOKIE,
    VISITOR_COOKIE,
    generate_visitor_id,
    get_attribution_cookie_options,
    get_client_ip,
    get_visitor_cookie_options,
    is_valid_token,
    parse_visitor_id,
)
from app.core.config import settings
from app.core.monitoring import metrics
from app.core.rate_limit import RateLimiter
from app.services.affiliate_link_service import AffiliateLinkService
from app.services.tracking_service import TrackingService

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/r/{token}", include_in_schema=False)
def track_click(
    token: str,
    request: Request,
    db: Session = Depends(deps.get_db),
    limiter: RateLimiter = Depends(deps.get_tracking_rate_limiter),
):
    """Record an affiliate click and redirect to the listing"""
    ip = get_client_ip(request.headers) or (request.client.host if request.client else None)
    if ip and limiter.is_limited(ip):
        metrics.increment("tracking.rate_limited")
        raise HTTPException(status_code=429, detail="Too many requests")

    invalid_redirect = RedirectResponse(f"{settings.FRONTEND_URL}/?error=invalid_link", status_code=302)

    if not is_valid_token(token):
        return invalid_redirect

    service = AffiliateLinkService(db)
    link = service.get_by_token(token)
    if not link or not service.is_live(link):
        logger.info(f"Click on unknown or inactive link {token}")
        return invalid_redirect

    visitor_id = parse_visitor_id(request.cookies.get(VISITOR_COOKIE)) or generate_visitor_id()

    click = TrackingService(db).record_click(
        link,
        visitor_id,
        ip=ip,
        user_agent=request.headers.get("user-agent"),
        referer=request.headers.get("referer"),
    )

    response = RedirectResponse(link.destination_url, status_code=302)
    response.set_cookie(VISITOR_COOKIE, visitor_id, **get_visitor_cookie_options(link.attribution_window_days))
    response.set_cookie(
        ATTRIBUTION_COOKIE,
        f"{link.token}|{click.click_id}",
        **get_attribution_cookie_options(link.attribution_window_days),
    )
    return response
