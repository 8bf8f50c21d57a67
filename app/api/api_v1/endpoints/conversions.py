from typing import Any, List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app import models, schemas
from app.api import deps
from app.services.affiliate_link_service import AffiliateLinkService
from app.services.attribution_service import AttributionService

router = APIRouter()

@router.post("/", response_model=schemas.Conversion)
def record_conversion(
    *,
    db: Session = Depends(deps.get_db),
    conversion_in: schemas.ConversionCreate,
    current_user: models.User = Depends(deps.get_current_host),
) -> Any:
    """Report a booking and credit it to the creator whose link the guest clicked"""
    link = AffiliateLinkService(db).get_by_token(conversion_in.token)
    if not link:
        raise HTTPException(status_code=404, detail="Affiliate link not found")
    if link.host_id != current_user.id and current_user.role != models.UserRole.ADMIN:
        raise HTTPException(status_code=403, detail="Not authorized")

    return AttributionService(db).attribute_booking(
        link,
        conversion_in.visitor_id,
        conversion_in.booking_amount,
        booking_reference=conversion_in.booking_reference,
    )

@router.get("/", response_model=List[schemas.Conversion])
def read_conversions(
    db: Session = Depends(deps.get_db),
    skip: int = 0,
    limit: int = 100,
    attributed_only: bool = False,
    current_user: models.User = Depends(deps.get_current_active_user),
) -> Any:
    """Conversions on links the current user hosts or promotes"""
    query = db.query(models.Conversion).join(
        models.AffiliateLink, models.Conversion.link_id == models.AffiliateLink.id
    )

    if current_user.role == models.UserRole.CREATOR:
        query = query.filter(models.AffiliateLink.creator_id == current_user.id)
    elif current_user.role == models.UserRole.HOST:
        query = query.filter(models.AffiliateLink.host_id == current_user.id)

    if attributed_only:
        query = query.filter(models.Conversion.is_attributed == True)

    return query.order_by(models.Conversion.created_at.desc(), models.Conversion.id.desc()).offset(skip).limit(limit).all()
