from app.schemas.token import Token, TokenPayload
from app.schemas.user import User, UserCreate, UserUpdate
from app.schemas.payout import PayoutQuote, PaymentBreakdown, PaymentBreakdownRequest
from app.schemas.affiliate_link import (
    AffiliateLink, AffiliateLinkCreate, LinkAnalytics, BonusThresholdStatus,
    BonusCheck, BatchBonusCheckRequest,
)
from app.schemas.offer import Offer, OfferCreate, OfferValidationError
from app.schemas.conversion import Conversion, ConversionCreate
from app.schemas.cron import OfferExpirationResults, LinkExpirationResults
