"""User and auth models"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class User(BaseModel):
    """Registered shop user"""
    user_id: str
    name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    is_active: bool = True
    is_admin: bool = False
    date_registered: datetime = Field(default_factory=datetime.utcnow)


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str
    phone: Optional[str] = None
    address: Optional[str] = None


class LoginRequest(BaseModel):
    email: str = Field(min_length=3)
    password: str


class TokenResponse(BaseModel):
    """Issued bearer token"""
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: User
