from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from datetime import datetime

from app import schemas
from app.api import deps
from app.services.affiliate_link_service import AffiliateLinkService
from app.services.offer_expiration_service import OfferExpirationService

router = APIRouter(dependencies=[Depends(deps.verify_cron_secret)])

@router.api_route("/process-expired-offers", methods=["GET", "POST"], response_model=schemas.OfferExpirationResults)
def process_expired_offers(db: Session = Depends(deps.get_db)) -> Any:
    """Daily: warn about offers close to expiry and expire the overdue ones"""
    return OfferExpirationService(db).process()

@router.api_route("/expire-links", methods=["GET", "POST"], response_model=schemas.LinkExpirationResults)
def expire_links(db: Session = Depends(deps.get_db)) -> Any:
    """Deactivate affiliate links past their expiry"""
    now = datetime.utcnow()
    deactivated = AffiliateLinkService(db).expire_links(now=now)
    return {"links_deactivated": deactivated, "timestamp": now}
