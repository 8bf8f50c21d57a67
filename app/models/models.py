from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, Text, ForeignKey, Enum, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum

from app.db.base_class import Base

__all__ = [
    "Base", "UserRole", "OfferStatus", "NotificationType",
    "User", "AffiliateLink", "LinkClick", "Offer", "Conversion", "Notification",
]

class UserRole(enum.Enum):
    HOST = "host"
    CREATOR = "creator"
    ADMIN = "admin"

class OfferStatus(enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    EXPIRED = "expired"
    WITHDRAWN = "withdrawn"

class NotificationType(enum.Enum):
    OFFER_RECEIVED = "offer_received"
    OFFER_EXPIRING = "offer_expiring"
    OFFER_EXPIRED = "offer_expired"
    CONVERSION_ATTRIBUTED = "conversion_attributed"
    SYSTEM_ALERT = "system_alert"

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(UserRole), default=UserRole.CREATOR, nullable=False)

    display_name = Column(String(255), nullable=False)
    handle = Column(String(100), unique=True)
    bio = Column(Text)

    is_active = Column(Boolean, default=True)
    last_login = Column(DateTime)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    notifications = relationship("Notification", back_populates="user")

class AffiliateLink(Base):
    __tablename__ = "affiliate_links"

    id = Column(Integer, primary_key=True)
    token = Column(String(64), unique=True, nullable=False, index=True)
    creator_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    host_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    offer_id = Column(Integer, ForeignKey("offers.id"))

    destination_url = Column(String(1000), nullable=False)
    campaign_name = Column(String(255))
    attribution_window_days = Column(Integer, default=30, nullable=False)

    # Commission terms applied to attributed bookings
    percent_rate = Column(Float)
    flat_amount = Column(Float)
    max_payout = Column(Float)

    is_active = Column(Boolean, default=True)
    expires_at = Column(DateTime)

    click_count = Column(Integer, default=0)
    unique_click_count = Column(Integer, default=0)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    creator = relationship("User", foreign_keys=[creator_id])
    host = relationship("User", foreign_keys=[host_id])
    offer = relationship("Offer", back_populates="links")
    clicks = relationship("LinkClick", back_populates="link", order_by="LinkClick.created_at.desc()")
    conversions = relationship("Conversion", back_populates="link")

class LinkClick(Base):
    __tablename__ = "link_clicks"

    id = Column(Integer, primary_key=True)
    link_id = Column(Integer, ForeignKey("affiliate_links.id"), nullable=False, index=True)

    click_id = Column(String(64), unique=True, nullable=False)
    visitor_id = Column(String(64), index=True)
    ip_hash = Column(String(64))
    user_agent_hash = Column(String(64))
    referer = Column(String(500))

    is_unique = Column(Boolean, default=False)
    is_revisit = Column(Boolean, default=False)

    created_at = Column(DateTime, default=func.now(), index=True)

    link = relationship("AffiliateLink", back_populates="clicks")

class Offer(Base):
    __tablename__ = "offers"

    id = Column(Integer, primary_key=True)
    host_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    creator_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    offer_type = Column(String(50), default="flat", nullable=False)
    property_title = Column(String(255))
    cash_cents = Column(Integer, default=0, nullable=False)
    stay_nights = Column(Integer)
    stay_value_cents = Column(Integer)
    deliverables = Column(JSON, default=list)
    requirements = Column(Text)

    traffic_bonus_enabled = Column(Boolean, default=False)
    traffic_bonus_threshold = Column(Integer)
    traffic_bonus_cents = Column(Integer)

    status = Column(Enum(OfferStatus), default=OfferStatus.PENDING, nullable=False, index=True)
    expires_at = Column(DateTime, index=True)
    expiry_warning_sent_at = Column(DateTime)
    responded_at = Column(DateTime)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    host = relationship("User", foreign_keys=[host_id])
    creator = relationship("User", foreign_keys=[creator_id])
    links = relationship("AffiliateLink", back_populates="offer")

class Conversion(Base):
    __tablename__ = "conversions"

    id = Column(Integer, primary_key=True)
    link_id = Column(Integer, ForeignKey("affiliate_links.id"), nullable=False, index=True)
    click_id = Column(Integer, ForeignKey("link_clicks.id"))
    visitor_id = Column(String(64))

    booking_amount = Column(Float, nullable=False)
    booking_reference = Column(String(255))
    is_attributed = Column(Boolean, default=False, nullable=False)
    reason = Column(String(50))

    creator_payout = Column(Float, default=0)
    platform_fee_host = Column(Float, default=0)
    platform_fee_creator = Column(Float, default=0)
    host_total = Column(Float, default=0)

    created_at = Column(DateTime, default=func.now())

    link = relationship("AffiliateLink", back_populates="conversions")
    click = relationship("LinkClick")

class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    type = Column(Enum(NotificationType), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    data = Column(JSON)

    is_read = Column(Boolean, default=False)
    read_at = Column(DateTime)

    created_at = Column(DateTime, default=func.now())

    user = relationship("User", back_populates="notifications")
