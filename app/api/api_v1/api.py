from fastapi import APIRouter
from app.api.api_v1.endpoints import (
    auth, payments, affiliate_links, offers, conversions, cron
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(payments.router, prefix="/payments", tags=["payments"])
api_router.include_router(affiliate_links.router, prefix="/affiliate-links", tags=["affiliate-links"])
api_router.include_router(offers.router, prefix="/offers", tags=["offers"])
api_router.include_router(conversions.router, prefix="/conversions", tags=["conversions"])
api_router.include_router(cron.router, prefix="/cron", tags=["cron"])
