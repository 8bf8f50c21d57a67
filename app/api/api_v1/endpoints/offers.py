from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from datetime import datetime

from app import models, schemas
from app.api import deps
from app.core.monitoring import metrics
from app.core.offer_rules import OfferTerms, validate_offer_terms, default_expiration
from app.core.payouts import is_valid_deal_type, calculate_payment_breakdown
from app.services.notification_service import notify

router = APIRouter()

def get_offer_or_404(db: Session, offer_id: int) -> models.Offer:
    offer = db.query(models.Offer).filter(models.Offer.id == offer_id).first()
    if not offer:
        raise HTTPException(status_code=404, detail="Offer not found")
    return offer

@router.post(
    "/",
    response_model=schemas.Offer,
    responses={422: {"model": schemas.OfferValidationError}},
)
def create_offer(
    *,
    db: Session = Depends(deps.get_db),
    offer_in: schemas.OfferCreate,
    current_user: models.User = Depends(deps.get_current_host),
) -> Any:
    """Send an offer to a creator (hosts only)"""
    if not is_valid_deal_type(offer_in.offer_type):
        raise HTTPException(status_code=400, detail=f"Unknown offer type: {offer_in.offer_type}")

    creator = db.query(models.User).filter(
        models.User.id == offer_in.creator_id,
        models.User.role == models.UserRole.CREATOR,
    ).first()
    if not creator:
        raise HTTPException(status_code=404, detail="Creator not found")

    validation = validate_offer_terms(OfferTerms(
        offer_type=offer_in.offer_type,
        cash_cents=offer_in.cash_cents,
        deliverables=offer_in.deliverables,
        stay_nights=offer_in.stay_nights,
        stay_value_cents=offer_in.stay_value_cents,
        traffic_bonus_enabled=offer_in.traffic_bonus_enabled,
        traffic_bonus_threshold=offer_in.traffic_bonus_threshold,
        traffic_bonus_cents=offer_in.traffic_bonus_cents,
        expires_at=offer_in.expires_at,
    ))
    if not validation.is_valid:
        return JSONResponse(
            status_code=422,
            content={"errors": validation.errors, "total_value_cents": validation.total_value_cents},
        )

    offer_data = offer_in.dict()
    offer_data["expires_at"] = offer_in.expires_at or default_expiration()
    offer = models.Offer(
        **offer_data,
        host_id=current_user.id,
        status=models.OfferStatus.PENDING,
    )
    db.add(offer)
    db.flush()

    notify(
        db,
        creator.id,
        models.NotificationType.OFFER_RECEIVED,
        "New collaboration offer",
        f"{current_user.display_name} sent you an offer.",
        data={"offer_id": offer.id},
    )
    db.commit()
    db.refresh(offer)

    metrics.increment("offers.created", tags={"type": offer.offer_type})
    return offer

@router.get("/", response_model=List[schemas.Offer])
def read_offers(
    db: Session = Depends(deps.get_db),
    skip: int = 0,
    limit: int = 100,
    status: Optional[models.OfferStatus] = None,
    current_user: models.User = Depends(deps.get_current_active_user),
) -> Any:
    """Offers sent (hosts) or received (creators)"""
    query = db.query(models.Offer)

    if current_user.role == models.UserRole.CREATOR:
        query = query.filter(models.Offer.creator_id == current_user.id)
    elif current_user.role == models.UserRole.HOST:
        query = query.filter(models.Offer.host_id == current_user.id)

    if status:
        query = query.filter(models.Offer.status == status)

    return query.order_by(models.Offer.created_at.desc(), models.Offer.id.desc()).offset(skip).limit(limit).all()

def respond_to_offer(db: Session, offer: models.Offer, new_status: models.OfferStatus) -> models.Offer:
    if offer.status != models.OfferStatus.PENDING:
        raise HTTPException(status_code=400, detail=f"Offer is already {offer.status.value}")

    now = datetime.utcnow()
    if offer.expires_at and offer.expires_at < now:
        raise HTTPException(status_code=400, detail="Offer has expired")

    offer.status = new_status
    offer.responded_at = now
    db.commit()
    db.refresh(offer)

    metrics.increment("offers.responded", tags={"status": new_status.value})
    return offer

@router.post("/{offer_id}/accept", response_model=schemas.Offer)
def accept_offer(
    *,
    db: Session = Depends(deps.get_db),
    offer_id: int,
    current_user: models.User = Depends(deps.get_current_creator),
) -> Any:
    """Accept an offer (receiving creator only)"""
    offer = get_offer_or_404(db, offer_id)
    if offer.creator_id != current_user.id:
        raise HTTPException(status_code=403, detail="Not authorized")
    return respond_to_offer(db, offer, models.OfferStatus.ACCEPTED)

@router.post("/{offer_id}/decline", response_model=schemas.Offer)
def decline_offer(
    *,
    db: Session = Depends(deps.get_db),
    offer_id: int,
    current_user: models.User = Depends(deps.get_current_creator),
) -> Any:
    """Decline an offer (receiving creator only)"""
    offer = get_offer_or_404(db, offer_id)
    if offer.creator_id != current_user.id:
        raise HTTPException(status_code=403, detail="Not authorized")
    return respond_to_offer(db, offer, models.OfferStatus.DECLINED)

@router.post("/{offer_id}/withdraw", response_model=schemas.Offer)
def withdraw_offer(
    *,
    db: Session = Depends(deps.get_db),
    offer_id: int,
    current_user: models.User = Depends(deps.get_current_host),
) -> Any:
    """Withdraw a pending offer (sending host only)"""
    offer = get_offer_or_404(db, offer_id)
    if offer.host_id != current_user.id and current_user.role != models.UserRole.ADMIN:
        raise HTTPException(status_code=403, detail="Not authorized")
    return respond_to_offer(db, offer, models.OfferStatus.WITHDRAWN)

@router.get("/{offer_id}/payment", response_model=schemas.PaymentBreakdown)
def read_offer_payment(
    offer_id: int,
    db: Session = Depends(deps.get_db),
    current_user: models.User = Depends(deps.get_current_active_user),
) -> Any:
    """What the host pays and the creator receives for this offer"""
    offer = get_offer_or_404(db, offer_id)
    if current_user.role != models.UserRole.ADMIN and current_user.id not in (offer.host_id, offer.creator_id):
        raise HTTPException(status_code=403, detail="Not authorized")
    return calculate_payment_breakdown(offer.cash_cents, offer.offer_type).as_dict()
