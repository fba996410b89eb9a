# backend/routes/offers.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from database import get_db
from models.inventory import InventoryOffer
from models.pharmacy import Pharmacy
from schemas.inventory import ArchiveAction, ArchiveResult, OfferOut, OfferUpdate, RestockBody
from utils.archival import KIND_OFFER, archive_own_item, restock_item
from utils.audit import write_log, client_ip
from utils.marketplace import is_near_expiry
from utils.tokenJWT import get_current_pharmacy

router = APIRouter(prefix="/offers", tags=["Offers"])


def _out(offer: InventoryOffer) -> OfferOut:
    result = OfferOut.model_validate(offer)
    result.is_near_expiry = is_near_expiry(offer.expiry_date)
    return result


def _get_own(db: Session, offer_id: int, pharmacy: Pharmacy) -> InventoryOffer:
    offer = db.query(InventoryOffer).filter(InventoryOffer.id == offer_id).first()
    if not offer:
        raise HTTPException(status_code=404, detail="Offer not found")
    if offer.pharmacy_id != pharmacy.pharmacy_id:
        raise HTTPException(status_code=403, detail="Not your offer")
    return offer


# Own open offers, newest first
@router.get("/mine", response_model=List[OfferOut])
def list_my_offers(
    db: Session = Depends(get_db),
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
):
    offers = (
        db.query(InventoryOffer)
        .filter(InventoryOffer.pharmacy_id == pharmacy.pharmacy_id)
        .order_by(InventoryOffer.created_at.desc(), InventoryOffer.id.desc())
        .all()
    )
    return [_out(o) for o in offers]


# Edit price and discount; no archival
@router.patch("/{offer_id}", response_model=OfferOut)
def edit_offer(
    offer_id: int,
    payload: OfferUpdate,
    request: Request,
    db: Session = Depends(get_db),
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
):
    offer = _get_own(db, offer_id, pharmacy)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in changes.items():
        setattr(offer, field, value)
    db.commit()
    db.refresh(offer)

    write_log(db, actor=f"pharmacy:{pharmacy.pharmacy_id}", action="EDIT_OFFER", resource="offers",
              ip=client_ip(request), meta={"id": offer.id, **changes})
    return _out(offer)


# Full cancellation (no quantity) or partial deduction
@router.post("/{offer_id}/archive", response_model=ArchiveResult)
def archive_offer(
    offer_id: int,
    payload: ArchiveAction,
    request: Request,
    db: Session = Depends(get_db),
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
):
    result = archive_own_item(
        db, KIND_OFFER, offer_id, pharmacy.pharmacy_id, payload.action_type,
        quantity=payload.quantity, expected_quantity=payload.expected_quantity,
    )
    write_log(db, actor=f"pharmacy:{pharmacy.pharmacy_id}", action="ARCHIVE_OFFER", resource="offers",
              ip=client_ip(request),
              meta={"id": offer_id, "quantity": result["archive"].quantity,
                    "action_type": payload.action_type, "retired": result["retired"]})
    return result


@router.post("/{offer_id}/restock", response_model=OfferOut)
def restock_offer(
    offer_id: int,
    payload: RestockBody,
    request: Request,
    db: Session = Depends(get_db),
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
):
    offer = restock_item(db, KIND_OFFER, offer_id, pharmacy.pharmacy_id, payload.quantity)
    write_log(db, actor=f"pharmacy:{pharmacy.pharmacy_id}", action="RESTOCK_OFFER", resource="offers",
              ip=client_ip(request), meta={"id": offer_id, "quantity": payload.quantity})
    return _out(offer)
