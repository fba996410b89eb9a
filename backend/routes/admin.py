# backend/routes/admin.py
import logging
from typing import List, Optional, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased

from database import get_db
from models.admin import SystemAdmin
from models.archive import SalesArchive
from models.catalog import PendingItem
from models.inventory import InventoryOffer, InventoryRequest
from models.legal import LegalContent
from models.pharmacy import Pharmacy, ACCOUNT_ACTIVE, ACCOUNT_BLACKLISTED
from models.rating import Rating
from schemas.admin import (
    AdminCreate, AdminOut, AdminStats, AdminTrends, LegalOut, LegalUpdate,
    MarketPosts, PharmacyPage, RatingAdminOut,
)
from schemas.catalog import CatalogDrugOut, PendingItemOut
from schemas.pharmacy import PharmacyOut
from utils.audit import write_log, client_ip
from utils.hashing import get_password_hash
from utils.moderation import approve_pending, delete_pharmacy_cascade, reject_pending
from utils.tokenJWT import Actor, require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])

MARKET_POST_LIMIT = 50
RATINGS_LIMIT = 50
TRENDS_LIMIT = 5


def _require_confirm(confirm: bool, consequence: str):
    if not confirm:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Confirmation required: {consequence}. Repeat with confirm=true.",
        )


# --- Overview ---

# Platform counters; failures degrade to zeros
@router.get("/stats", response_model=AdminStats)
def admin_stats(db: Session = Depends(get_db), _: Actor = Depends(require_admin)):
    try:
        return {
            "pharmacies": db.query(func.count(Pharmacy.pharmacy_id)).scalar() or 0,
            "active_items": (db.query(func.count(InventoryOffer.id)).scalar() or 0)
                            + (db.query(func.count(InventoryRequest.id)).scalar() or 0),
            "successful_exchanges": db.query(func.count(SalesArchive.id)).scalar() or 0,
        }
    except Exception:
        logger.exception("Admin stats query failed")
        db.rollback()
        return AdminStats()


def _top_names(db: Session, model) -> List[dict]:
    rows = (
        db.query(model.arabic_name, func.count(model.id).label("cnt"))
        .group_by(model.arabic_name)
        .order_by(func.count(model.id).desc(), model.arabic_name.asc())
        .limit(TRENDS_LIMIT)
        .all()
    )
    return [{"arabic_name": name, "count": cnt} for name, cnt in rows]


# Top 5 most offered and most requested drugs
@router.get("/trends", response_model=AdminTrends)
def admin_trends(db: Session = Depends(get_db), _: Actor = Depends(require_admin)):
    return {"top_offered": _top_names(db, InventoryOffer), "top_requested": _top_names(db, InventoryRequest)}


# --- Pending catalog items ---

@router.get("/pending", response_model=List[PendingItemOut])
def list_pending(db: Session = Depends(get_db), _: Actor = Depends(require_admin)):
    return db.query(PendingItem).order_by(PendingItem.created_at.desc(), PendingItem.id.desc()).all()


# Promote into the master catalog, then drop the pending row
@router.post("/pending/{pending_id}/approve", response_model=CatalogDrugOut)
def approve(
    pending_id: int,
    request: Request,
    db: Session = Depends(get_db),
    admin: Actor = Depends(require_admin),
):
    drug = approve_pending(db, pending_id)
    write_log(db, actor=admin.subject, action="APPROVE_PENDING", resource="catalog",
              ip=client_ip(request), meta={"pending_id": pending_id, "master_id": drug.id})
    return drug


@router.delete("/pending/{pending_id}")
def reject(
    pending_id: int,
    request: Request,
    db: Session = Depends(get_db),
    admin: Actor = Depends(require_admin),
):
    reject_pending(db, pending_id)
    write_log(db, actor=admin.subject, action="REJECT_PENDING", resource="catalog",
              ip=client_ip(request), meta={"pending_id": pending_id})
    return {"message": "Pending item rejected"}


# --- Pharmacies ---

@router.get("/pharmacies", response_model=PharmacyPage)
def list_pharmacies(
    q: Optional[str] = Query(None, description="Search name, email or city"),
    account_status: Optional[Literal["active", "blacklisted"]] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    _: Actor = Depends(require_admin),
):
    query = db.query(Pharmacy)

    if q:
        like = f"%{q.strip()}%"
        query = query.filter(or_(
            Pharmacy.pharmacy_name.ilike(like),
            Pharmacy.email.ilike(like),
            Pharmacy.city.ilike(like),
        ))
    if account_status:
        query = query.filter(Pharmacy.account_status == account_status)

    total = query.count()
    items = (
        query.order_by(Pharmacy.created_at.desc(), Pharmacy.pharmacy_id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return {"items": items, "total": total, "page": page, "page_size": page_size}


# Flip between active and blacklisted
@router.post("/pharmacies/{pharmacy_id}/toggle-status", response_model=PharmacyOut)
def toggle_status(
    pharmacy_id: int,
    request: Request,
    db: Session = Depends(get_db),
    admin: Actor = Depends(require_admin),
):
    pharmacy = db.query(Pharmacy).filter(Pharmacy.pharmacy_id == pharmacy_id).first()
    if not pharmacy:
        raise HTTPException(status_code=404, detail="Pharmacy not found")

    pharmacy.account_status = ACCOUNT_ACTIVE if pharmacy.is_blacklisted else ACCOUNT_BLACKLISTED
    db.commit()
    db.refresh(pharmacy)

    write_log(db, actor=admin.subject, action="TOGGLE_STATUS", resource="pharmacy",
              ip=client_ip(request), meta={"pharmacy_id": pharmacy_id, "account_status": pharmacy.account_status})
    return pharmacy


@router.delete("/pharmacies/{pharmacy_id}")
def delete_pharmacy(
    pharmacy_id: int,
    request: Request,
    confirm: bool = Query(False),
    db: Session = Depends(get_db),
    admin: Actor = Depends(require_admin),
):
    _require_confirm(confirm, "the pharmacy, its login, offers, requests, ratings and archive will be permanently deleted")
    counts = delete_pharmacy_cascade(db, pharmacy_id)
    write_log(db, actor=admin.subject, action="DELETE_PHARMACY", resource="pharmacy",
              ip=client_ip(request), meta={"pharmacy_id": pharmacy_id, **counts})
    return {"message": f"Pharmacy {pharmacy_id} deleted", "deleted": counts}


# --- Admins ---

@router.get("/admins", response_model=List[AdminOut])
def list_admins(db: Session = Depends(get_db), _: Actor = Depends(require_admin)):
    return db.query(SystemAdmin).order_by(SystemAdmin.created_at.desc(), SystemAdmin.id.desc()).all()


@router.post("/admins", response_model=AdminOut, status_code=status.HTTP_201_CREATED)
def add_admin(
    payload: AdminCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: Actor = Depends(require_admin),
):
    new_admin = SystemAdmin(
        uid=payload.uid.strip(),
        email=payload.email.strip().lower(),
        password_hash=get_password_hash(payload.password) if payload.password else None,
    )
    db.add(new_admin)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Admin with this uid or email already exists")
    db.refresh(new_admin)

    write_log(db, actor=admin.subject, action="ADD_ADMIN", resource="admin",
              ip=client_ip(request), meta={"uid": new_admin.uid, "email": new_admin.email})
    return new_admin


@router.delete("/admins/{admin_id}")
def delete_admin(
    admin_id: int,
    request: Request,
    confirm: bool = Query(False),
    db: Session = Depends(get_db),
    admin: Actor = Depends(require_admin),
):
    _require_confirm(confirm, "this account will lose admin access")
    target = db.query(SystemAdmin).filter(SystemAdmin.id == admin_id).first()
    if not target:
        raise HTTPException(status_code=404, detail="Admin not found")
    # Prevent self-removal
    if target.uid == admin.key:
        raise HTTPException(status_code=400, detail="You cannot remove your own admin access")

    uid, email = target.uid, target.email
    db.delete(target)
    db.commit()
    write_log(db, actor=admin.subject, action="DELETE_ADMIN", resource="admin",
              ip=client_ip(request), meta={"uid": uid})
    return {"message": f"Admin {email} removed"}


# --- Marketplace moderation ---

def _market_posts(db: Session, model, kind: str) -> List[dict]:
    rows = (
        db.query(model, Pharmacy.pharmacy_name)
        .outerjoin(Pharmacy, Pharmacy.pharmacy_id == model.pharmacy_id)
        .order_by(model.created_at.desc(), model.id.desc())
        .limit(MARKET_POST_LIMIT)
        .all()
    )
    return [
        {
            "id": item.id, "kind": kind, "pharmacy_id": item.pharmacy_id, "pharmacy_name": name,
            "english_name": item.english_name, "arabic_name": item.arabic_name,
            "barcode": item.barcode, "quantity": item.quantity, "created_at": item.created_at,
        }
        for item, name in rows
    ]


@router.get("/market", response_model=MarketPosts)
def list_market(db: Session = Depends(get_db), _: Actor = Depends(require_admin)):
    return {
        "offers": _market_posts(db, InventoryOffer, "offer"),
        "requests": _market_posts(db, InventoryRequest, "request"),
    }


@router.delete("/market/{kind}/{item_id}")
def delete_market_post(
    kind: Literal["offers", "requests"],
    item_id: int,
    request: Request,
    confirm: bool = Query(False),
    db: Session = Depends(get_db),
    admin: Actor = Depends(require_admin),
):
    _require_confirm(confirm, "the post will be removed without an archive record")
    model = InventoryOffer if kind == "offers" else InventoryRequest
    item = db.query(model).filter(model.id == item_id).first()
    if not item:
        raise HTTPException(status_code=404, detail="Post not found")

    owner = item.pharmacy_id
    db.delete(item)
    db.commit()
    write_log(db, actor=admin.subject, action="DELETE_POST", resource=kind,
              ip=client_ip(request), meta={"id": item_id, "pharmacy_id": owner})
    return {"message": "Post deleted"}


# --- Ratings moderation ---

@router.get("/ratings", response_model=List[RatingAdminOut])
def list_ratings(db: Session = Depends(get_db), _: Actor = Depends(require_admin)):
    rater = aliased(Pharmacy)
    rated = aliased(Pharmacy)
    rows = (
        db.query(Rating, rater.pharmacy_name, rated.pharmacy_name)
        .outerjoin(rater, rater.pharmacy_id == Rating.from_pharmacy_id)
        .outerjoin(rated, rated.pharmacy_id == Rating.to_pharmacy_id)
        .order_by(Rating.created_at.desc(), Rating.id.desc())
        .limit(RATINGS_LIMIT)
        .all()
    )
    return [
        {
            "id": r.id, "from_pharmacy_id": r.from_pharmacy_id, "from_pharmacy_name": from_name,
            "to_pharmacy_id": r.to_pharmacy_id, "to_pharmacy_name": to_name, "stars": r.stars,
            "comment": r.comment, "related_item_id": r.related_item_id, "created_at": r.created_at,
        }
        for r, from_name, to_name in rows
    ]


@router.delete("/ratings/{rating_id}")
def delete_rating(
    rating_id: int,
    request: Request,
    confirm: bool = Query(False),
    db: Session = Depends(get_db),
    admin: Actor = Depends(require_admin),
):
    _require_confirm(confirm, "the rating will be removed from the pharmacy's reputation")
    rating = db.query(Rating).filter(Rating.id == rating_id).first()
    if not rating:
        raise HTTPException(status_code=404, detail="Rating not found")

    db.delete(rating)
    db.commit()
    write_log(db, actor=admin.subject, action="DELETE_RATING", resource="ratings",
              ip=client_ip(request), meta={"id": rating_id})
    return {"message": "Rating deleted"}


# --- Legal content ---

@router.put("/legal/{doc_type}", response_model=LegalOut)
def set_legal(
    doc_type: str,
    payload: LegalUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: Actor = Depends(require_admin),
):
    doc = db.query(LegalContent).filter(LegalContent.type == doc_type).first()
    if doc is None:
        doc = LegalContent(type=doc_type, content=payload.content)
        db.add(doc)
    else:
        doc.content = payload.content
    db.commit()
    db.refresh(doc)

    write_log(db, actor=admin.subject, action="SET_LEGAL", resource="legal",
              ip=client_ip(request), meta={"type": doc_type})
    return doc
