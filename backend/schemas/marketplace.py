# backend/schemas/marketplace.py
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel


# Lister's public profile joined onto every marketplace row
class PublicProfile(BaseModel):
    pharmacy_id: int
    pharmacy_name: Optional[str] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None
    telegram: Optional[str] = None
    rating: Optional[float] = None
    review_count: int = 0
    success_score: int = 0
    is_verified: bool = False


class MarketRequest(PublicProfile):
    id: int
    drug_id: Optional[int] = None
    english_name: Optional[str] = None
    arabic_name: Optional[str] = None
    barcode: str
    quantity: int
    created_at: Optional[datetime] = None
    is_own: bool = False


class MarketOffer(MarketRequest):
    manufacturer: Optional[str] = None
    expiry_date: date
    price: float
    discount: float
    is_near_expiry: bool = False
