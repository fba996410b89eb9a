# backend/schemas/admin.py
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field

from schemas.base import ORMBase
from schemas.pharmacy import PharmacyOut


class AdminStats(BaseModel):
    pharmacies: int = 0
    active_items: int = 0
    successful_exchanges: int = 0


class TrendItem(BaseModel):
    arabic_name: Optional[str] = None
    count: int


class AdminTrends(BaseModel):
    top_offered: List[TrendItem]
    top_requested: List[TrendItem]


# Schema for paginated pharmacy list response
class PharmacyPage(BaseModel):
    items: List[PharmacyOut]
    total: int
    page: int
    page_size: int


class AdminCreate(BaseModel):
    email: EmailStr
    uid: str = Field(min_length=1)
    password: Optional[str] = Field(None, min_length=6)


class AdminOut(ORMBase):
    id: int
    uid: str
    email: str
    created_at: Optional[datetime] = None


class MarketPost(BaseModel):
    id: int
    kind: str
    pharmacy_id: int
    pharmacy_name: Optional[str] = None
    english_name: Optional[str] = None
    arabic_name: Optional[str] = None
    barcode: Optional[str] = None
    quantity: int
    created_at: Optional[datetime] = None


class MarketPosts(BaseModel):
    offers: List[MarketPost]
    requests: List[MarketPost]


class RatingAdminOut(BaseModel):
    id: int
    from_pharmacy_id: int
    from_pharmacy_name: Optional[str] = None
    to_pharmacy_id: int
    to_pharmacy_name: Optional[str] = None
    stars: int
    comment: Optional[str] = None
    related_item_id: int
    created_at: Optional[datetime] = None


class LegalUpdate(BaseModel):
    content: str = Field(min_length=1)


class LegalOut(ORMBase):
    type: str
    content: str
    updated_at: Optional[datetime] = None
