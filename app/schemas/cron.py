from typing import List
from pydantic import BaseModel
from datetime import datetime

class OfferExpirationResults(BaseModel):
    warnings_sent: int = 0
    offers_expired: int = 0
    errors: List[str] = []
    timestamp: datetime

class LinkExpirationResults(BaseModel):
    links_deactivated: int = 0
    timestamp: datetime
