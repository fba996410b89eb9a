# backend/schemas/catalog.py
from datetime import datetime
from typing import Optional
from pydantic import Field

from schemas.base import ORMBase


class CatalogDrugOut(ORMBase):
    id: int
    barcode: Optional[str] = None
    english_name: Optional[str] = None
    arabic_name: Optional[str] = None
    brand: Optional[str] = None
    manufacturer: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = None


# Missing-item submission; price is free text ("120 EGP")
class PendingItemCreate(ORMBase):
    arabic_name: str = Field(min_length=1)
    english_name: str = Field(min_length=1)
    brand: str = Field(min_length=1)
    price: str = Field(min_length=1)
    barcode: Optional[str] = None
    final_category: Optional[str] = None


class PendingItemOut(PendingItemCreate):
    id: int
    added_by: Optional[int] = None
    created_at: Optional[datetime] = None
