# backend/routes/ratings.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database import get_db
from models.archive import SalesArchive
from models.pharmacy import Pharmacy
from models.rating import Rating
from schemas.pharmacy import ReputationOut
from schemas.rating import RatingCreate, RatingOut
from utils.audit import write_log, client_ip
from utils.reputation import pharmacy_reputation
from utils.tokenJWT import get_current_pharmacy

router = APIRouter(tags=["Ratings"])


@router.post("/ratings", response_model=RatingOut, status_code=status.HTTP_201_CREATED)
def create_rating(
    payload: RatingCreate,
    request: Request,
    db: Session = Depends(get_db),
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
):
    if payload.to_pharmacy_id == pharmacy.pharmacy_id:
        raise HTTPException(status_code=400, detail="You cannot rate your own pharmacy")
    if not db.query(Pharmacy).filter(Pharmacy.pharmacy_id == payload.to_pharmacy_id).first():
        raise HTTPException(status_code=404, detail="Pharmacy not found")

    # Only the counterparty of a completed exchange on this item may rate it
    exchanged = (
        db.query(SalesArchive.id)
        .filter(
            SalesArchive.pharmacy_id == payload.to_pharmacy_id,
            SalesArchive.counterparty_pharmacy_id == pharmacy.pharmacy_id,
            SalesArchive.item_id == payload.related_item_id,
        )
        .first()
    )
    if exchanged is None:
        raise HTTPException(status_code=403, detail="No completed exchange with this pharmacy for this item")

    rating = Rating(
        from_pharmacy_id=pharmacy.pharmacy_id,
        to_pharmacy_id=payload.to_pharmacy_id,
        related_item_id=payload.related_item_id,
        stars=payload.stars,
        comment=(payload.comment or "").strip() or None,
    )
    db.add(rating)
    try:
        db.commit()
    except IntegrityError:
        # Unique (from, to, item) triple
        db.rollback()
        raise HTTPException(status_code=409, detail="Rating already recorded for this transaction")
    db.refresh(rating)

    write_log(db, actor=f"pharmacy:{pharmacy.pharmacy_id}", action="RATE", resource="ratings",
              ip=client_ip(request),
              meta={"id": rating.id, "to": rating.to_pharmacy_id, "stars": rating.stars})
    return rating


# Ratings the current pharmacy has received, newest first
@router.get("/ratings/received", response_model=List[RatingOut])
def ratings_received(
    db: Session = Depends(get_db),
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
):
    return (
        db.query(Rating)
        .filter(Rating.to_pharmacy_id == pharmacy.pharmacy_id)
        .order_by(Rating.created_at.desc(), Rating.id.desc())
        .all()
    )


@router.get("/pharmacies/{pharmacy_id}/reputation", response_model=ReputationOut)
def reputation(
    pharmacy_id: int,
    db: Session = Depends(get_db),
    _: Pharmacy = Depends(get_current_pharmacy),
):
    target = db.query(Pharmacy).filter(Pharmacy.pharmacy_id == pharmacy_id).first()
    if not target:
        raise HTTPException(status_code=404, detail="Pharmacy not found")
    return {"pharmacy_id": pharmacy_id, "pharmacy_name": target.pharmacy_name,
            **pharmacy_reputation(db, pharmacy_id)}
