from typing import Optional
from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from app.models import UserRole

class UserBase(BaseModel):
    email: EmailStr
    display_name: str
    role: UserRole = UserRole.CREATOR
    handle: Optional[str] = None
    bio: Optional[str] = None

class UserCreate(UserBase):
    password: str = Field(..., min_length=8)

class UserUpdate(BaseModel):
    display_name: Optional[str] = None
    bio: Optional[str] = None
    password: Optional[str] = Field(None, min_length=8)

class UserInDBBase(UserBase):
    id: int
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True

class User(UserInDBBase):
    pass
