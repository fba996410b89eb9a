# backend/schemas/archive.py
from datetime import datetime
from typing import Optional

from schemas.base import ORMBase


class ArchiveOut(ORMBase):
    id: int
    pharmacy_id: int
    item_id: int
    item_kind: str
    arabic_name: Optional[str] = None
    english_name: Optional[str] = None
    barcode: Optional[str] = None
    quantity: int
    price: Optional[float] = None
    discount: Optional[float] = None
    action_type: str
    counterparty_pharmacy_id: Optional[int] = None
    created_at: Optional[datetime] = None
