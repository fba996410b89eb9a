# backend/schemas/pharmacy.py
from datetime import datetime
from typing import Optional, Literal
from pydantic import BaseModel, Field

from schemas.base import ORMBase

AccountStatus = Literal["active", "blacklisted"]


# Full profile, as returned to its owner and cached in the session
class PharmacyOut(ORMBase):
    pharmacy_id: int
    pharmacy_name: str
    phone: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None
    license_no: Optional[str] = None
    email: Optional[str] = None
    telegram: Optional[str] = None
    profile_pic: Optional[str] = None
    account_status: AccountStatus = "active"
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None


# Owner edits; every field optional
class ProfileUpdate(BaseModel):
    pharmacy_name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None
    license_no: Optional[str] = None
    telegram: Optional[str] = None


class ReputationOut(BaseModel):
    pharmacy_id: int
    pharmacy_name: Optional[str] = None
    rating: Optional[float] = None
    review_count: int = 0
    success_score: int = 0
    is_verified: bool = False
