# backend/schemas/rating.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from schemas.base import ORMBase


class RatingCreate(BaseModel):
    to_pharmacy_id: int
    related_item_id: int
    stars: int = Field(ge=1, le=5)
    comment: Optional[str] = None


class RatingOut(ORMBase):
    id: int
    from_pharmacy_id: int
    to_pharmacy_id: int
    stars: int
    comment: Optional[str] = None
    related_item_id: int
    created_at: Optional[datetime] = None
