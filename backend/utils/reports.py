# backend/utils/reports.py
from datetime import datetime, timedelta, timezone
from typing import Optional

import pandas as pd
from sqlalchemy import func
from sqlalchemy.orm import Session

from models.archive import SalesArchive, OFFER_SALE_LABELS, REQUEST_DONE_LABELS
from models.inventory import InventoryOffer, InventoryRequest
from models.rating import Rating
from utils.errors import ValidationFailed

PERIODS = ("today", "week", "month", "all")
ARCHIVE_COLUMNS = [
    "id", "pharmacy_id", "item_id", "item_kind", "arabic_name", "english_name", "barcode",
    "quantity", "price", "discount", "action_type", "counterparty_pharmacy_id", "created_at",
]


def _as_utc(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    return now if now.tzinfo is not None else now.replace(tzinfo=timezone.utc)


def period_start(period: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """Start of the reporting window in UTC. Weeks start on Sunday; 'all' has no start."""
    if period not in PERIODS:
        raise ValidationFailed(f"Unknown period: {period}")
    now = _as_utc(now)
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "today":
        return midnight
    if period == "week":
        # Monday=0 ... Sunday=6
        return midnight - timedelta(days=(midnight.weekday() + 1) % 7)
    if period == "month":
        return midnight.replace(day=1)
    return None


def _archive_frame(db: Session, pharmacy_id: int) -> pd.DataFrame:
    rows = db.query(SalesArchive).filter(SalesArchive.pharmacy_id == pharmacy_id).all()
    df = pd.DataFrame([{c: getattr(r, c) for c in ARCHIVE_COLUMNS} for r in rows], columns=ARCHIVE_COLUMNS)
    # Naive timestamps from SQLite are UTC
    df["created_at"] = pd.to_datetime(df["created_at"], utc=True)
    df["quantity"] = pd.to_numeric(df["quantity"], errors="coerce").fillna(0).astype(int)
    df["price"] = pd.to_numeric(df["price"], errors="coerce")
    return df


def archive_report(db: Session, pharmacy_id: int, period: str = "month", now: Optional[datetime] = None) -> dict:
    start = period_start(period, now)
    df = _archive_frame(db, pharmacy_id)

    if start is not None:
        df = df[df["created_at"] > pd.Timestamp(start)]

    # Most moved item first
    ordered = df.sort_values("quantity", ascending=False, kind="stable")

    daily = (
        df.assign(date=df["created_at"].dt.strftime("%Y-%m-%d"))
        .groupby("date")
        .size()
        .sort_index()
    )

    value = (ordered["price"].fillna(0) * ordered["quantity"]).sum()

    rows = []
    for rec in ordered.to_dict(orient="records"):
        rec["created_at"] = rec["created_at"].to_pydatetime()
        rec["price"] = None if pd.isna(rec["price"]) else float(rec["price"])
        rec["discount"] = None if pd.isna(rec["discount"]) else float(rec["discount"])
        cp = rec["counterparty_pharmacy_id"]
        rec["counterparty_pharmacy_id"] = None if pd.isna(cp) else int(cp)
        rows.append(rec)

    return {
        "period": period,
        "start": start,
        "rows": rows,
        "daily": [{"date": d, "count": int(c)} for d, c in daily.items()],
        "total_transactions": int(len(ordered)),
        "total_quantity": int(ordered["quantity"].sum()),
        "total_value": round(float(value), 2),
    }


def _utc(value) -> pd.Timestamp:
    ts = pd.Timestamp(value)
    return ts.tz_localize("UTC") if ts.tzinfo is None else ts


def sold_trend(current: int, previous: int) -> int:
    """Week-over-week change in percent; 100 when growing from nothing."""
    if previous > 0:
        return round((current - previous) / previous * 100)
    if current > 0:
        return 100
    return 0


def activity_label(kind: str, action_type: Optional[str] = None) -> str:
    if kind == "offer":
        return "New Offer"
    if kind == "request":
        return "New Request"
    if action_type in OFFER_SALE_LABELS:
        return "Offer Sold/Transferred"
    if action_type in REQUEST_DONE_LABELS:
        return "Request Completed"
    return "Item Archived"


def dashboard(db: Session, pharmacy_id: int, now: Optional[datetime] = None) -> dict:
    now = _as_utc(now)

    offers = db.query(InventoryOffer).filter(InventoryOffer.pharmacy_id == pharmacy_id).all()
    requests = db.query(InventoryRequest).filter(InventoryRequest.pharmacy_id == pharmacy_id).all()
    df = _archive_frame(db, pharmacy_id)

    avg_rating = (
        db.query(func.avg(Rating.stars)).filter(Rating.to_pharmacy_id == pharmacy_id).scalar()
    )

    # Sold quantity counts offer-side owner labels only
    sold = df[df["action_type"].isin(OFFER_SALE_LABELS)]
    week_ago = pd.Timestamp(now - timedelta(days=7))
    two_weeks_ago = pd.Timestamp(now - timedelta(days=14))
    current_week = int(sold.loc[sold["created_at"] >= week_ago, "quantity"].sum())
    previous_week = int(
        sold.loc[(sold["created_at"] >= two_weeks_ago) & (sold["created_at"] < week_ago), "quantity"].sum()
    )

    activity = [
        {"type": "offer", "label": activity_label("offer"), "id": o.id, "english_name": o.english_name,
         "arabic_name": o.arabic_name, "quantity": o.quantity, "action_type": None, "created_at": o.created_at}
        for o in offers
    ] + [
        {"type": "request", "label": activity_label("request"), "id": r.id, "english_name": r.english_name,
         "arabic_name": r.arabic_name, "quantity": r.quantity, "action_type": None, "created_at": r.created_at}
        for r in requests
    ] + [
        {"type": "archive", "label": activity_label("archive", a["action_type"]), "id": a["id"],
         "english_name": a["english_name"], "arabic_name": a["arabic_name"], "quantity": int(a["quantity"]),
         "action_type": a["action_type"], "created_at": a["created_at"].to_pydatetime()}
        for a in df.to_dict(orient="records")
    ]
    activity.sort(key=lambda e: _utc(e["created_at"]), reverse=True)

    return {
        "total_offers": len(offers),
        "total_requests": len(requests),
        "total_offers_value": round(sum((o.price or 0) * (o.quantity or 0) for o in offers), 2),
        "sold_quantity": int(sold["quantity"].sum()),
        "sold_trend": sold_trend(current_week, previous_week),
        "success_score": int(len(df)),
        "average_rating": round(float(avg_rating), 2) if avg_rating is not None else 0.0,
        "recent_activity": activity[:10],
    }
