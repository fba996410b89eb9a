# backend/utils/marketplace.py
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from config import settings
from models.inventory import InventoryOffer, InventoryRequest
from models.pharmacy import Pharmacy
from utils.reputation import reputation_map


def distance(viewer_city: Optional[str], item_city: Optional[str]) -> int:
    # 0 for the viewer's own city, 1 for everything else
    if viewer_city and item_city and viewer_city == item_city:
        return 0
    return 1


def is_near_expiry(expiry: Optional[date], today: Optional[date] = None) -> bool:
    if expiry is None:
        return False
    today = today or date.today()
    return expiry <= today + timedelta(days=settings.NEAR_EXPIRY_DAYS)


def sort_by_distance(entries: List[dict], viewer_city: Optional[str]) -> List[dict]:
    """Newest first, then a stable sort on distance keeps recency within each group."""
    newest = sorted(
        entries,
        key=lambda e: (e["created_at"] is not None, e["created_at"], e["id"]),
        reverse=True,
    )
    return sorted(newest, key=lambda e: distance(viewer_city, e.get("city")))


def _public_profile(pharmacy: Optional[Pharmacy], rep: dict) -> dict:
    return {
        "pharmacy_name": pharmacy.pharmacy_name if pharmacy else None,
        "phone": pharmacy.phone if pharmacy else None,
        "city": pharmacy.city if pharmacy else None,
        "address": pharmacy.address if pharmacy else None,
        "telegram": pharmacy.telegram if pharmacy else None,
        "rating": rep.get("rating"),
        "review_count": rep.get("review_count", 0),
        "success_score": rep.get("success_score", 0),
        "is_verified": rep.get("is_verified", False),
    }


def list_marketplace(db: Session, kind: str, viewer: Pharmacy) -> List[dict]:
    """Every open item of one kind joined with its lister's public profile."""
    model = InventoryOffer if kind == "offer" else InventoryRequest
    items = db.query(model).all()
    reps = reputation_map(db, [i.pharmacy_id for i in items])

    entries = []
    for item in items:
        entry = {
            "id": item.id,
            "pharmacy_id": item.pharmacy_id,
            "drug_id": item.drug_id,
            "english_name": item.english_name,
            "arabic_name": item.arabic_name,
            "barcode": item.barcode,
            "quantity": item.quantity,
            "created_at": item.created_at,
            "is_own": item.pharmacy_id == viewer.pharmacy_id,
        }
        if kind == "offer":
            entry.update({
                "manufacturer": item.manufacturer,
                "expiry_date": item.expiry_date,
                "price": item.price,
                "discount": item.discount,
                "is_near_expiry": is_near_expiry(item.expiry_date),
            })
        entry.update(_public_profile(item.pharmacy, reps.get(item.pharmacy_id, {})))
        entries.append(entry)

    return sort_by_distance(entries, viewer.city)
