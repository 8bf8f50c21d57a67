from sqlalchemy.orm import Session
from datetime import datetime, timedelta
from typing import Dict, List, Optional
import logging

from app.models import AffiliateLink, LinkClick, User
from app.core.attribution import generate_link_token, build_tracking_url
from app.core.config import settings
from app.core.monitoring import metrics

logger = logging.getLogger(__name__)

class AffiliateLinkService:
    def __init__(self, db: Session):
        self.db = db

    def create_link(
        self,
        *,
        host: User,
        creator_id: int,
        destination_url: str,
        offer_id: Optional[int] = None,
        campaign_name: Optional[str] = None,
        attribution_window_days: Optional[int] = None,
        expires_at: Optional[datetime] = None,
        percent_rate: Optional[float] = None,
        flat_amount: Optional[float] = None,
        max_payout: Optional[float] = None,
    ) -> AffiliateLink:
        """Create a tracking link for a creator promoting one of the host's listings"""
        link = AffiliateLink(
            token=generate_link_token(),
            creator_id=creator_id,
            host_id=host.id,
            offer_id=offer_id,
            destination_url=destination_url,
            campaign_name=campaign_name,
            attribution_window_days=attribution_window_days or settings.DEFAULT_ATTRIBUTION_WINDOW_DAYS,
            expires_at=expires_at,
            percent_rate=percent_rate,
            flat_amount=flat_amount,
            max_payout=max_payout,
            is_active=True,
            click_count=0,
            unique_click_count=0,
        )
        self.db.add(link)
        self.db.commit()
        self.db.refresh(link)

        metrics.increment("affiliate_links.created")
        logger.info(f"Affiliate link {link.token} created for creator {creator_id}")
        return link

    def get_by_token(self, token: str) -> Optional[AffiliateLink]:
        return self.db.query(AffiliateLink).filter(AffiliateLink.token == token).first()

    def get(self, link_id: int) -> Optional[AffiliateLink]:
        return self.db.query(AffiliateLink).filter(AffiliateLink.id == link_id).first()

    def list_for_creator(self, creator_id: int) -> List[AffiliateLink]:
        return self.db.query(AffiliateLink).filter(
            AffiliateLink.creator_id == creator_id
        ).order_by(AffiliateLink.created_at.desc(), AffiliateLink.id.desc()).all()

    def list_for_host(self, host_id: int) -> List[AffiliateLink]:
        return self.db.query(AffiliateLink).filter(
            AffiliateLink.host_id == host_id
        ).order_by(AffiliateLink.created_at.desc(), AffiliateLink.id.desc()).all()

    def deactivate(self, link: AffiliateLink) -> AffiliateLink:
        """Soft delete"""
        link.is_active = False
        self.db.commit()
        self.db.refresh(link)
        return link

    def is_live(self, link: AffiliateLink, now: Optional[datetime] = None) -> bool:
        if not link.is_active:
            return False
        if link.expires_at is None:
            return True
        return (now or datetime.utcnow()) <= link.expires_at

    @metrics.timing("affiliate_links.analytics")
    def get_analytics(self, link: AffiliateLink, days: int = 30, now: Optional[datetime] = None) -> Dict:
        start_date = (now or datetime.utcnow()) - timedelta(days=days)

        clicks = self.db.query(LinkClick).filter(
            LinkClick.link_id == link.id,
            LinkClick.created_at >= start_date,
        ).order_by(LinkClick.created_at.desc(), LinkClick.id.desc()).all()

        clicks_by_day: Dict[str, int] = {}
        unique_clicks_by_day: Dict[str, int] = {}
        for click in clicks:
            day = click.created_at.date().isoformat()
            clicks_by_day[day] = clicks_by_day.get(day, 0) + 1
            if click.is_unique:
                unique_clicks_by_day[day] = unique_clicks_by_day.get(day, 0) + 1

        return {
            "link_id": link.id,
            "token": link.token,
            "tracking_url": build_tracking_url(link.token),
            "destination_url": link.destination_url,
            # all-time, from the denormalized counters
            "total_clicks": link.click_count or 0,
            "total_unique_clicks": link.unique_click_count or 0,
            "period_days": days,
            "period_clicks": len(clicks),
            "period_unique_clicks": sum(1 for c in clicks if c.is_unique),
            "period_revisits": sum(1 for c in clicks if c.is_revisit),
            "clicks_by_day": [
                {"date": day, "clicks": count, "unique_clicks": unique_clicks_by_day.get(day, 0)}
                for day, count in sorted(clicks_by_day.items())
            ],
            "recent_clicks": [
                {
                    "id": c.id,
                    "created_at": c.created_at,
                    "is_unique": c.is_unique,
                    "is_revisit": c.is_revisit,
                    "referer": c.referer,
                }
                for c in clicks[:20]
            ],
        }

    def check_bonus_threshold(self, link_id: int, threshold: int) -> Dict:
        """Has the link reached a unique-click threshold (traffic bonus trigger)?"""
        link = self.get(link_id)
        if not link:
            return {"link_id": link_id, "reached": False, "current_clicks": 0, "remaining": threshold}

        current = link.unique_click_count or 0
        return {
            "link_id": link_id,
            "reached": current >= threshold,
            "current_clicks": current,
            "remaining": max(0, threshold - current),
        }

    def batch_check_bonus_thresholds(self, checks: List[Dict], user_id: Optional[int] = None) -> List[Dict]:
        """Bonus progress for many links in one query; with user_id, other users' links read as zero"""
        link_ids = [check["link_id"] for check in checks]
        query = self.db.query(AffiliateLink.id, AffiliateLink.unique_click_count).filter(
            AffiliateLink.id.in_(link_ids)
        )
        if user_id is not None:
            query = query.filter(
                (AffiliateLink.host_id == user_id) | (AffiliateLink.creator_id == user_id)
            )
        rows = query.all()
        counts = {row[0]: row[1] or 0 for row in rows}

        results = []
        for check in checks:
            current = counts.get(check["link_id"], 0)
            results.append({
                "link_id": check["link_id"],
                "reached": current >= check["threshold"],
                "current_clicks": current,
                "remaining": max(0, check["threshold"] - current),
            })
        return results

    def expire_links(self, now: Optional[datetime] = None) -> int:
        """Deactivate active links whose expiry has passed"""
        now = now or datetime.utcnow()
        expired = self.db.query(AffiliateLink).filter(
            AffiliateLink.is_active == True,
            AffiliateLink.expires_at != None,
            AffiliateLink.expires_at < now,
        ).all()

        for link in expired:
            link.is_active = False
        self.db.commit()

        if expired:
            metrics.increment("affiliate_links.expired", value=len(expired))
            logger.info(f"Deactivated {len(expired)} expired affiliate links")
        return len(expired)
