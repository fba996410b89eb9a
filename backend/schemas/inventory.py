# backend/schemas/inventory.py
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field

from schemas.base import ORMBase
from schemas.archive import ArchiveOut


class OfferOut(ORMBase):
    id: int
    pharmacy_id: int
    drug_id: Optional[int] = None
    english_name: Optional[str] = None
    arabic_name: Optional[str] = None
    manufacturer: Optional[str] = None
    barcode: str
    expiry_date: date
    quantity: int
    price: float
    discount: float
    created_at: Optional[datetime] = None
    is_near_expiry: bool = False


class RequestOut(ORMBase):
    id: int
    pharmacy_id: int
    drug_id: Optional[int] = None
    english_name: Optional[str] = None
    arabic_name: Optional[str] = None
    barcode: str
    quantity: int
    created_at: Optional[datetime] = None


# Schema for partial offer updates (price and discount only)
class OfferUpdate(BaseModel):
    price: Optional[float] = Field(None, gt=0)
    discount: Optional[float] = Field(None, ge=0, le=100)


class RequestUpdate(BaseModel):
    quantity: int = Field(ge=1)


# Owner archival: no quantity means full cancellation
class ArchiveAction(BaseModel):
    action_type: str
    quantity: Optional[int] = Field(None, ge=1)
    expected_quantity: Optional[int] = None


class RestockBody(BaseModel):
    quantity: int = Field(ge=1)


class TransactionBody(BaseModel):
    quantity: int = Field(ge=1)
    expected_quantity: Optional[int] = None


class ArchiveResult(BaseModel):
    archive: ArchiveOut
    item_id: int
    remaining_quantity: int
    retired: bool


# Marketplace transaction result, with what the rating prompt needs
class TransactionResult(ArchiveResult):
    owner_pharmacy_id: int
    owner_pharmacy_name: Optional[str] = None
    can_rate: bool = True
