# backend/utils/moderation.py
import logging
import re
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from models.archive import SalesArchive
from models.catalog import CatalogDrug, PendingItem
from models.inventory import InventoryOffer, InventoryRequest
from models.pharmacy import Credential, Pharmacy
from models.rating import Rating
from utils.errors import NotFound, ValidationFailed

logger = logging.getLogger(__name__)


def sanitize_price(raw) -> Optional[float]:
    """'120 EGP' -> 120.0. Keeps digits and dots only; None when nothing parses."""
    cleaned = re.sub(r"[^0-9.]", "", str(raw or ""))
    if not cleaned:
        return None
    try:
        return float(cleaned)
    except ValueError:
        raise ValidationFailed(f"Price could not be read from {raw!r}")


def sanitize_barcode(raw) -> Optional[str]:
    """'622 123 4567' -> '6221234567'."""
    if raw is None:
        return None
    cleaned = re.sub(r"\s+", "", str(raw))
    return cleaned or None


def approve_pending(db: Session, pending_id: int) -> CatalogDrug:
    pending = db.query(PendingItem).filter(PendingItem.id == pending_id).first()
    if pending is None:
        raise NotFound("Pending item not found")

    drug = CatalogDrug(
        arabic_name=pending.arabic_name,
        english_name=pending.english_name,
        brand=pending.brand,
        barcode=sanitize_barcode(pending.barcode),
        price=sanitize_price(pending.price),
        category=pending.final_category,
    )
    # Insert and delete are separate commits: a failed delete leaves the item pending
    db.add(drug)
    db.commit()
    db.refresh(drug)

    try:
        db.delete(pending)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Pending item %s promoted to master %s but could not be removed", pending_id, drug.id)
        raise
    return drug


def reject_pending(db: Session, pending_id: int) -> None:
    pending = db.query(PendingItem).filter(PendingItem.id == pending_id).first()
    if pending is None:
        raise NotFound("Pending item not found")
    db.delete(pending)
    db.commit()


def delete_pharmacy_cascade(db: Session, pharmacy_id: int) -> dict:
    """Remove a pharmacy with its credential, listings, ratings and archive rows."""
    pharmacy = db.query(Pharmacy).filter(Pharmacy.pharmacy_id == pharmacy_id).first()
    credential = db.query(Credential).filter(Credential.pharmacy_id == pharmacy_id).first()
    if pharmacy is None and credential is None:
        raise NotFound("Pharmacy not found")

    try:
        counts = {
            "offers": db.query(InventoryOffer).filter(InventoryOffer.pharmacy_id == pharmacy_id)
                        .delete(synchronize_session=False),
            "requests": db.query(InventoryRequest).filter(InventoryRequest.pharmacy_id == pharmacy_id)
                          .delete(synchronize_session=False),
            "ratings": db.query(Rating)
                         .filter(or_(Rating.from_pharmacy_id == pharmacy_id, Rating.to_pharmacy_id == pharmacy_id))
                         .delete(synchronize_session=False),
            "archive": db.query(SalesArchive).filter(SalesArchive.pharmacy_id == pharmacy_id)
                         .delete(synchronize_session=False),
        }
        if credential is not None:
            db.delete(credential)
        if pharmacy is not None:
            db.delete(pharmacy)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return counts
