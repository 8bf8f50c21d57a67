from typing import Generator
from fastapi import Depends, HTTPException, Header, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.core import security
from app.core.config import settings
from app.core.rate_limit import RateLimiter
from app.db.session import SessionLocal
from app.models import User, UserRole
from app.schemas.token import TokenPayload

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login")

tracking_rate_limiter = RateLimiter(
    limit=settings.TRACKING_RATE_LIMIT,
    window_seconds=settings.TRACKING_RATE_WINDOW_SECONDS,
)

def get_db() -> Generator:
    try:
        db = SessionLocal()
        yield db
    finally:
        db.close()

def get_tracking_rate_limiter() -> RateLimiter:
    return tracking_rate_limiter

def get_current_user(
    db: Session = Depends(get_db),
    token: str = Depends(oauth2_scheme)
) -> User:
    try:
        payload = security.decode_access_token(token)
        token_data = TokenPayload(**payload)
    except (JWTError, ValidationError):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Could not validate credentials",
        )
    user = db.query(User).filter(User.id == token_data.sub).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user

def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    if not current_user.is_active:
        raise HTTPException(status_code=400, detail="Inactive user")
    return current_user

def get_current_host(
    current_user: User = Depends(get_current_active_user),
) -> User:
    if current_user.role not in (UserRole.HOST, UserRole.ADMIN):
        raise HTTPException(status_code=403, detail="Host access required")
    return current_user

def get_current_creator(
    current_user: User = Depends(get_current_active_user),
) -> User:
    if current_user.role != UserRole.CREATOR:
        raise HTTPException(status_code=403, detail="Creator access required")
    return current_user

def verify_cron_secret(x_cron_secret: str = Header(None)) -> None:
    if settings.CRON_SECRET and x_cron_secret != settings.CRON_SECRET:
        raise HTTPException(status_code=401, detail="Unauthorized")
