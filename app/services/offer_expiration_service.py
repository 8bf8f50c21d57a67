from sqlalchemy.orm import Session
from datetime import datetime, timedelta
from typing import Dict, Optional
import logging

from app.models import Offer, OfferStatus, NotificationType
from app.core.monitoring import metrics
from app.services.notification_service import notify

logger = logging.getLogger(__name__)

# Daily job: warn once when an offer is roughly two days from expiring
WARNING_WINDOW_START_HOURS = 44
WARNING_WINDOW_END_HOURS = 52

class OfferExpirationService:
    def __init__(self, db: Session):
        self.db = db

    @metrics.timing("cron.process_expired_offers")
    def process(self, now: Optional[datetime] = None) -> Dict:
        now = now or datetime.utcnow()
        results = {
            "warnings_sent": 0,
            "offers_expired": 0,
            "errors": [],
            "timestamp": now,
        }

        self._send_warnings(now, results)
        self._expire_offers(now, results)

        metrics.increment("cron.offers_expired", value=results["offers_expired"])
        logger.info(
            f"Offer expiration processed: {results['warnings_sent']} warnings, "
            f"{results['offers_expired']} expired, {len(results['errors'])} errors"
        )
        return results

    def _send_warnings(self, now: datetime, results: Dict) -> None:
        offers = self.db.query(Offer).filter(
            Offer.status == OfferStatus.PENDING,
            Offer.expiry_warning_sent_at == None,
            Offer.expires_at >= now + timedelta(hours=WARNING_WINDOW_START_HOURS),
            Offer.expires_at <= now + timedelta(hours=WARNING_WINDOW_END_HOURS),
        ).all()

        for offer in offers:
            try:
                notify(
                    self.db,
                    offer.creator_id,
                    NotificationType.OFFER_EXPIRING,
                    "Offer expiring soon",
                    f"Your offer for {offer.property_title or 'a property'} expires on "
                    f"{offer.expires_at:%b %d, %Y}.",
                    data={"offer_id": offer.id},
                )
                offer.expiry_warning_sent_at = now
                self.db.commit()
                results["warnings_sent"] += 1
            except Exception as e:
                self.db.rollback()
                logger.error(f"Warning failed for offer {offer.id}: {e}")
                results["errors"].append(f"Warning failed for offer {offer.id}: {e}")

    def _expire_offers(self, now: datetime, results: Dict) -> None:
        offers = self.db.query(Offer).filter(
            Offer.status == OfferStatus.PENDING,
            Offer.expires_at < now,
        ).all()

        for offer in offers:
            try:
                offer.status = OfferStatus.EXPIRED
                offer.responded_at = now
                title = offer.property_title or "a property"
                notify(
                    self.db,
                    offer.creator_id,
                    NotificationType.OFFER_EXPIRED,
                    "Offer expired",
                    f"The offer for {title} expired before it was answered.",
                    data={"offer_id": offer.id},
                )
                notify(
                    self.db,
                    offer.host_id,
                    NotificationType.OFFER_EXPIRED,
                    "Your offer expired",
                    f"Your offer for {title} expired without a response.",
                    data={"offer_id": offer.id},
                )
                self.db.commit()
                results["offers_expired"] += 1
            except Exception as e:
                self.db.rollback()
                logger.error(f"Failed to expire offer {offer.id}: {e}")
                results["errors"].append(f"Failed to expire offer {offer.id}: {e}")
