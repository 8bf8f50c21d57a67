from sqlalchemy.orm import Session
from datetime import datetime
from typing import Optional
import logging

from app.models import AffiliateLink, Conversion, NotificationType
from app.core.attribution import is_within_attribution_window
from app.core.payouts import ZERO_SPLIT, calculate_payout
from app.core.monitoring import metrics
from app.services.notification_service import notify
from app.services.tracking_service import TrackingService

logger = logging.getLogger(__name__)

class AttributionService:
    def __init__(self, db: Session):
        self.db = db

    def attribute_booking(
        self,
        link: AffiliateLink,
        visitor_id: str,
        booking_amount: float,
        booking_reference: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Conversion:
        """
        Credit a booking to the visitor's most recent click on the link.

        Inside the attribution window the booking earns the link's commission
        terms; outside it, or without any click, the conversion is stored with
        a zero split and a reason.
        """
        now = now or datetime.utcnow()
        click = TrackingService(self.db).latest_click(link.id, visitor_id)

        if click is None:
            reason = "no_click"
            split = ZERO_SPLIT
        elif not is_within_attribution_window(click.created_at, link.attribution_window_days, now=now):
            reason = "window_expired"
            split = ZERO_SPLIT
        else:
            reason = None
            split = calculate_payout(
                booking_amount, link.percent_rate, link.flat_amount, link.max_payout
            )

        conversion = Conversion(
            link_id=link.id,
            click_id=click.id if click else None,
            visitor_id=visitor_id,
            booking_amount=booking_amount,
            booking_reference=booking_reference,
            is_attributed=reason is None,
            reason=reason,
            created_at=now,
            **split.as_dict(),
        )
        self.db.add(conversion)

        if conversion.is_attributed:
            notify(
                self.db,
                link.creator_id,
                NotificationType.CONVERSION_ATTRIBUTED,
                "You earned a booking commission",
                f"A booking through your link earned ${split.creator_payout:.2f}.",
                data={"link_id": link.id, "creator_payout": split.creator_payout},
            )

        self.db.commit()
        self.db.refresh(conversion)

        metrics.increment("conversions.recorded", tags={"attributed": conversion.is_attributed})
        logger.info(
            f"Conversion recorded for link {link.token}: attributed={conversion.is_attributed}"
            + (f" ({reason})" if reason else "")
        )
        return conversion
