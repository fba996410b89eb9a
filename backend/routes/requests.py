# backend/routes/requests.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from database import get_db
from models.inventory import InventoryRequest
from models.pharmacy import Pharmacy
from schemas.inventory import ArchiveAction, ArchiveResult, RequestOut, RequestUpdate, RestockBody
from utils.archival import KIND_REQUEST, archive_own_item, restock_item
from utils.audit import write_log, client_ip
from utils.tokenJWT import get_current_pharmacy

router = APIRouter(prefix="/requests", tags=["Requests"])


# Own open requests, newest first
@router.get("/mine", response_model=List[RequestOut])
def list_my_requests(
    db: Session = Depends(get_db),
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
):
    return (
        db.query(InventoryRequest)
        .filter(InventoryRequest.pharmacy_id == pharmacy.pharmacy_id)
        .order_by(InventoryRequest.created_at.desc(), InventoryRequest.id.desc())
        .all()
    )


# Quantity edit; no archival
@router.patch("/{request_id}", response_model=RequestOut)
def edit_request(
    request_id: int,
    payload: RequestUpdate,
    request: Request,
    db: Session = Depends(get_db),
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
):
    item = db.query(InventoryRequest).filter(InventoryRequest.id == request_id).first()
    if not item:
        raise HTTPException(status_code=404, detail="Request not found")
    if item.pharmacy_id != pharmacy.pharmacy_id:
        raise HTTPException(status_code=403, detail="Not your request")

    item.quantity = payload.quantity
    db.commit()
    db.refresh(item)

    write_log(db, actor=f"pharmacy:{pharmacy.pharmacy_id}", action="EDIT_REQUEST", resource="requests",
              ip=client_ip(request), meta={"id": item.id, "quantity": item.quantity})
    return item


@router.post("/{request_id}/archive", response_model=ArchiveResult)
def archive_request(
    request_id: int,
    payload: ArchiveAction,
    request: Request,
    db: Session = Depends(get_db),
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
):
    result = archive_own_item(
        db, KIND_REQUEST, request_id, pharmacy.pharmacy_id, payload.action_type,
        quantity=payload.quantity, expected_quantity=payload.expected_quantity,
    )
    write_log(db, actor=f"pharmacy:{pharmacy.pharmacy_id}", action="ARCHIVE_REQUEST", resource="requests",
              ip=client_ip(request),
              meta={"id": request_id, "quantity": result["archive"].quantity,
                    "action_type": payload.action_type, "retired": result["retired"]})
    return result


@router.post("/{request_id}/restock", response_model=RequestOut)
def restock_request(
    request_id: int,
    payload: RestockBody,
    request: Request,
    db: Session = Depends(get_db),
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
):
    item = restock_item(db, KIND_REQUEST, request_id, pharmacy.pharmacy_id, payload.quantity)
    write_log(db, actor=f"pharmacy:{pharmacy.pharmacy_id}", action="RESTOCK_REQUEST", resource="requests",
              ip=client_ip(request), meta={"id": request_id, "quantity": payload.quantity})
    return item
