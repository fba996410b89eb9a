# backend/utils/reputation.py
from typing import Dict, Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from config import settings
from models.archive import SalesArchive
from models.rating import Rating


def is_verified(average_rating: Optional[float], success_score: int) -> bool:
    """Verified badge: average stars >= 4.0 and at least 5 archived exchanges."""
    if average_rating is None:
        return False
    return average_rating >= settings.VERIFIED_MIN_RATING and success_score >= settings.VERIFIED_MIN_SUCCESS_SCORE


def reputation_map(db: Session, pharmacy_ids: Iterable[int]) -> Dict[int, dict]:
    ids = list({int(p) for p in pharmacy_ids})
    if not ids:
        return {}

    # Aggregate ratings received
    rating_rows = (
        db.query(Rating.to_pharmacy_id, func.avg(Rating.stars), func.count(Rating.id))
        .filter(Rating.to_pharmacy_id.in_(ids))
        .group_by(Rating.to_pharmacy_id)
        .all()
    )
    # Success score = archive rows attributed to the pharmacy
    score_rows = (
        db.query(SalesArchive.pharmacy_id, func.count(SalesArchive.id))
        .filter(SalesArchive.pharmacy_id.in_(ids))
        .group_by(SalesArchive.pharmacy_id)
        .all()
    )

    ratings = {pid: (float(avg), int(cnt)) for pid, avg, cnt in rating_rows}
    scores = {pid: int(cnt) for pid, cnt in score_rows}

    result = {}
    for pid in ids:
        avg, count = ratings.get(pid, (None, 0))
        score = scores.get(pid, 0)
        result[pid] = {
            "rating": round(avg, 2) if avg is not None else None,
            "review_count": count,
            "success_score": score,
            "is_verified": is_verified(avg, score),
        }
    return result


def pharmacy_reputation(db: Session, pharmacy_id: int) -> dict:
    return reputation_map(db, [pharmacy_id])[pharmacy_id]
