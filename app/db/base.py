# Import all models so Base.metadata sees every table
from app.db.base_class import Base
from app.models import (
    User, AffiliateLink, LinkClick, Offer, Conversion, Notification
)
