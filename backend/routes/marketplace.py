# backend/routes/marketplace.py
from typing import List, Literal

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from database import get_db
from models.pharmacy import Pharmacy
from schemas.inventory import TransactionBody, TransactionResult
from schemas.marketplace import MarketOffer, MarketRequest
from utils.archival import KIND_OFFER, KIND_REQUEST, marketplace_transaction
from utils.audit import write_log, client_ip
from utils.marketplace import list_marketplace
from utils.tokenJWT import get_current_pharmacy

router = APIRouter(prefix="/marketplace", tags=["Marketplace"])

_KINDS = {"offers": KIND_OFFER, "requests": KIND_REQUEST}


# All open offers with the lister's public profile, nearest city first
@router.get("/offers", response_model=List[MarketOffer])
def marketplace_offers(
    db: Session = Depends(get_db),
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
):
    return list_marketplace(db, KIND_OFFER, pharmacy)


@router.get("/requests", response_model=List[MarketRequest])
def marketplace_requests(
    db: Session = Depends(get_db),
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
):
    return list_marketplace(db, KIND_REQUEST, pharmacy)


# A counterparty takes quantity from another pharmacy's listing
@router.post("/{kind}/{item_id}/transactions", response_model=TransactionResult)
def create_transaction(
    kind: Literal["offers", "requests"],
    item_id: int,
    payload: TransactionBody,
    request: Request,
    db: Session = Depends(get_db),
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
):
    buyer_id = pharmacy.pharmacy_id
    result = marketplace_transaction(
        db, _KINDS[kind], item_id, buyer_id, payload.quantity,
        expected_quantity=payload.expected_quantity,
    )

    owner = db.query(Pharmacy).filter(Pharmacy.pharmacy_id == result["owner_pharmacy_id"]).first()
    result["owner_pharmacy_name"] = owner.pharmacy_name if owner else None
    result["can_rate"] = owner is not None

    write_log(db, actor=f"pharmacy:{buyer_id}", action="MARKET_TRANSACTION", resource=kind,
              ip=client_ip(request),
              meta={"id": item_id, "quantity": payload.quantity, "owner": result["owner_pharmacy_id"],
                    "retired": result["retired"]})
    return result
