from typing import Optional, List
from pydantic import BaseModel, Field, validator
from datetime import datetime
from app.core.attribution import to_naive_utc
from app.models import OfferStatus

class OfferBase(BaseModel):
    offer_type: str = "flat"
    property_title: Optional[str] = None
    cash_cents: int = Field(0, ge=0)
    stay_nights: Optional[int] = Field(None, ge=0)
    stay_value_cents: Optional[int] = Field(None, ge=0)
    deliverables: List[str] = []
    requirements: Optional[str] = None
    traffic_bonus_enabled: bool = False
    traffic_bonus_threshold: Optional[int] = None
    traffic_bonus_cents: Optional[int] = None

class OfferCreate(OfferBase):
    creator_id: int
    expires_at: Optional[datetime] = None

    @validator("expires_at")
    def normalize_expires_at(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)

class OfferInDBBase(OfferBase):
    id: int
    host_id: int
    creator_id: int
    status: OfferStatus
    expires_at: Optional[datetime] = None
    responded_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True

class Offer(OfferInDBBase):
    pass

class OfferValidationError(BaseModel):
    errors: List[str]
    total_value_cents: int
