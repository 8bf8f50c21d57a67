from typing import Optional, List
from pydantic import BaseModel, Field, validator
from datetime import datetime
from app.core.attribution import to_naive_utc

class AffiliateLinkBase(BaseModel):
    destination_url: str = Field(..., max_length=1000)
    campaign_name: Optional[str] = None
    attribution_window_days: Optional[int] = Field(None, ge=1, le=365)
    expires_at: Optional[datetime] = None
    percent_rate: Optional[float] = Field(None, ge=0, le=1)
    flat_amount: Optional[float] = Field(None, ge=0)
    max_payout: Optional[float] = Field(None, ge=0)

    @validator("expires_at")
    def normalize_expires_at(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)

class AffiliateLinkCreate(AffiliateLinkBase):
    creator_id: int
    offer_id: Optional[int] = None

class AffiliateLinkInDBBase(AffiliateLinkBase):
    id: int
    token: str
    creator_id: int
    host_id: int
    offer_id: Optional[int] = None
    attribution_window_days: int
    is_active: bool
    click_count: int
    unique_click_count: int
    created_at: datetime

    class Config:
        from_attributes = True

class AffiliateLink(AffiliateLinkInDBBase):
    tracking_url: str

class DailyClicks(BaseModel):
    date: str
    clicks: int
    unique_clicks: int

class RecentClick(BaseModel):
    id: int
    created_at: datetime
    is_unique: bool
    is_revisit: bool
    referer: Optional[str] = None

class LinkAnalytics(BaseModel):
    link_id: int
    token: str
    tracking_url: str
    destination_url: str

    total_clicks: int
    total_unique_clicks: int

    period_days: int
    period_clicks: int
    period_unique_clicks: int
    period_revisits: int

    clicks_by_day: List[DailyClicks]
    recent_clicks: List[RecentClick]

class BonusThresholdStatus(BaseModel):
    link_id: int
    reached: bool
    current_clicks: int
    remaining: int

class BonusCheck(BaseModel):
    link_id: int
    threshold: int = Field(..., gt=0)

class BatchBonusCheckRequest(BaseModel):
    checks: List[BonusCheck] = Field(..., min_length=1, max_length=100)
