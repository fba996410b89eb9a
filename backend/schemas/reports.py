# schemas/reports.py
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel

from schemas.archive import ArchiveOut

# Schemas for the archive report
class DailyCount(BaseModel):
    date: str
    count: int

class ArchiveReport(BaseModel):
    period: str
    start: Optional[datetime] = None
    rows: List[ArchiveOut]
    daily: List[DailyCount]
    total_transactions: int
    total_quantity: int
    total_value: float

# Schemas for the owner dashboard
class ActivityItem(BaseModel):
    type: str
    label: str
    id: int
    english_name: Optional[str] = None
    arabic_name: Optional[str] = None
    quantity: int
    action_type: Optional[str] = None
    created_at: Optional[datetime] = None

class DashboardOut(BaseModel):
    total_offers: int
    total_requests: int
    total_offers_value: float
    sold_quantity: int
    sold_trend: int
    success_score: int
    average_rating: float
    recent_activity: List[ActivityItem]
