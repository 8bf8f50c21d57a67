from typing import Any, List
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app import models, schemas
from app.api import deps
from app.core.attribution import build_tracking_url
from app.services.affiliate_link_service import AffiliateLinkService

router = APIRouter()

def serialize_link(link: models.AffiliateLink) -> dict:
    data = schemas.affiliate_link.AffiliateLinkInDBBase.from_orm(link).dict()
    data["tracking_url"] = build_tracking_url(link.token)
    return data

def get_visible_link(db: Session, link_id: int, user: models.User) -> models.AffiliateLink:
    link = AffiliateLinkService(db).get(link_id)
    if not link:
        raise HTTPException(status_code=404, detail="Affiliate link not found")
    if user.role != models.UserRole.ADMIN and user.id not in (link.host_id, link.creator_id):
        raise HTTPException(status_code=403, detail="Not authorized")
    return link

@router.post("/", response_model=schemas.AffiliateLink)
def create_affiliate_link(
    *,
    db: Session = Depends(deps.get_db),
    link_in: schemas.AffiliateLinkCreate,
    current_user: models.User = Depends(deps.get_current_host),
) -> Any:
    """Create a tracking link for a creator (hosts only)"""
    creator = db.query(models.User).filter(
        models.User.id == link_in.creator_id,
        models.User.role == models.UserRole.CREATOR,
    ).first()
    if not creator:
        raise HTTPException(status_code=404, detail="Creator not found")

    if link_in.offer_id is not None:
        offer = db.query(models.Offer).filter(models.Offer.id == link_in.offer_id).first()
        if not offer:
            raise HTTPException(status_code=404, detail="Offer not found")
        if offer.host_id != current_user.id or offer.creator_id != creator.id:
            raise HTTPException(status_code=403, detail="Offer does not belong to this collaboration")

    link = AffiliateLinkService(db).create_link(host=current_user, **link_in.dict())
    return serialize_link(link)

@router.get("/", response_model=List[schemas.AffiliateLink])
def read_affiliate_links(
    db: Session = Depends(deps.get_db),
    current_user: models.User = Depends(deps.get_current_active_user),
) -> Any:
    """Links the current user promotes (creators) or owns (hosts)"""
    service = AffiliateLinkService(db)
    if current_user.role == models.UserRole.CREATOR:
        links = service.list_for_creator(current_user.id)
    else:
        links = service.list_for_host(current_user.id)
    return [serialize_link(link) for link in links]

@router.delete("/{token}", response_model=schemas.AffiliateLink)
def deactivate_affiliate_link(
    *,
    db: Session = Depends(deps.get_db),
    token: str,
    current_user: models.User = Depends(deps.get_current_host),
) -> Any:
    """Deactivate a link; clicks on it stop being tracked"""
    service = AffiliateLinkService(db)
    link = service.get_by_token(token)
    if not link:
        raise HTTPException(status_code=404, detail="Affiliate link not found")
    if link.host_id != current_user.id and current_user.role != models.UserRole.ADMIN:
        raise HTTPException(status_code=403, detail="Not authorized")

    return serialize_link(service.deactivate(link))

@router.get("/{link_id}/analytics", response_model=schemas.LinkAnalytics)
def read_link_analytics(
    link_id: int,
    days: int = Query(30, ge=1, le=365),
    db: Session = Depends(deps.get_db),
    current_user: models.User = Depends(deps.get_current_active_user),
) -> Any:
    """Click analytics for the last N days"""
    link = get_visible_link(db, link_id, current_user)
    return AffiliateLinkService(db).get_analytics(link, days=days)

@router.get("/{link_id}/bonus", response_model=schemas.BonusThresholdStatus)
def read_bonus_threshold(
    link_id: int,
    threshold: int = Query(..., gt=0),
    db: Session = Depends(deps.get_db),
    current_user: models.User = Depends(deps.get_current_active_user),
) -> Any:
    """Progress towards a unique-click traffic bonus"""
    get_visible_link(db, link_id, current_user)
    return AffiliateLinkService(db).check_bonus_threshold(link_id, threshold)

@router.post("/bonus/batch", response_model=List[schemas.BonusThresholdStatus])
def batch_bonus_thresholds(
    *,
    db: Session = Depends(deps.get_db),
    checks_in: schemas.BatchBonusCheckRequest,
    current_user: models.User = Depends(deps.get_current_active_user),
) -> Any:
    """Traffic bonus progress for several links; links the user is not part of report zero clicks"""
    user_id = None if current_user.role == models.UserRole.ADMIN else current_user.id
    return AffiliateLinkService(db).batch_check_bonus_thresholds(
        [check.dict() for check in checks_in.checks], user_id=user_id,
    )
