from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime

class ConversionCreate(BaseModel):
    token: str
    visitor_id: str
    booking_amount: float = Field(..., ge=0)
    booking_reference: Optional[str] = None

class ConversionInDBBase(BaseModel):
    id: int
    link_id: int
    visitor_id: Optional[str] = None
    booking_amount: float
    booking_reference: Optional[str] = None
    is_attributed: bool
    reason: Optional[str] = None
    creator_payout: float
    platform_fee_host: float
    platform_fee_creator: float
    host_total: float
    created_at: datetime

    class Config:
        from_attributes = True

class Conversion(ConversionInDBBase):
    pass
