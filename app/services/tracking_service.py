from sqlalchemy import func, update
from sqlalchemy.orm import Session
from datetime import datetime
from typing import Optional
import logging
import uuid

from app.models import AffiliateLink, LinkClick
from app.core.attribution import hash_ip, hash_user_agent, truncate_referer
from app.core.monitoring import metrics

logger = logging.getLogger(__name__)

class TrackingService:
    def __init__(self, db: Session):
        self.db = db

    def record_click(
        self,
        link: AffiliateLink,
        visitor_id: str,
        *,
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
        referer: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> LinkClick:
        """Store a click and bump the link counters; repeat visitors count as revisits"""
        seen_before = self.db.query(LinkClick.id).filter(
            LinkClick.link_id == link.id,
            LinkClick.visitor_id == visitor_id,
        ).first() is not None

        click = LinkClick(
            link_id=link.id,
            click_id=f"{link.token}_{uuid.uuid4().hex[:12]}",
            visitor_id=visitor_id,
            ip_hash=hash_ip(ip),
            user_agent_hash=hash_user_agent(user_agent),
            referer=truncate_referer(referer),
            is_unique=not seen_before,
            is_revisit=seen_before,
            created_at=now or datetime.utcnow(),
        )
        self.db.add(click)

        # increment in SQL, other sessions may be counting the same link
        counters = {"click_count": func.coalesce(AffiliateLink.click_count, 0) + 1}
        if click.is_unique:
            counters["unique_click_count"] = func.coalesce(AffiliateLink.unique_click_count, 0) + 1
        self.db.execute(
            update(AffiliateLink)
            .where(AffiliateLink.id == link.id)
            .values(**counters)
            .execution_options(synchronize_session=False)
        )

        self.db.commit()
        self.db.refresh(click)
        self.db.refresh(link)

        metrics.increment("tracking.clicks", tags={"unique": click.is_unique})
        logger.info(
            "Click tracked",
            extra={"token": link.token, "click_id": click.click_id, "unique": click.is_unique},
        )
        return click

    def latest_click(self, link_id: int, visitor_id: str) -> Optional[LinkClick]:
        return self.db.query(LinkClick).filter(
            LinkClick.link_id == link_id,
            LinkClick.visitor_id == visitor_id,
        ).order_by(LinkClick.created_at.desc(), LinkClick.id.desc()).first()
