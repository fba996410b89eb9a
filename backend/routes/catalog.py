# backend/routes/catalog.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from database import get_db
from models.catalog import PendingItem
from models.pharmacy import Pharmacy
from schemas.catalog import CatalogDrugOut, PendingItemCreate, PendingItemOut
from utils.audit import write_log, client_ip
from utils.catalog import search_catalog
from utils.tokenJWT import get_current_pharmacy

router = APIRouter(prefix="/catalog", tags=["Catalog"])


# Up to 10 drugs whose Arabic or English name contains q; short queries return nothing
@router.get("/search", response_model=List[CatalogDrugOut])
def search(
    q: Optional[str] = Query(None, description="Name fragment, at least 3 characters"),
    db: Session = Depends(get_db),
    _: Pharmacy = Depends(get_current_pharmacy),
):
    return search_catalog(db, q)


# Propose a drug missing from the catalog
@router.post("/pending", response_model=PendingItemOut, status_code=status.HTTP_201_CREATED)
def submit_pending(
    payload: PendingItemCreate,
    request: Request,
    db: Session = Depends(get_db),
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
):
    item = PendingItem(**payload.model_dump(), added_by=pharmacy.pharmacy_id)
    db.add(item)
    db.commit()
    db.refresh(item)

    write_log(db, actor=f"pharmacy:{pharmacy.pharmacy_id}", action="SUBMIT_PENDING", resource="catalog",
              ip=client_ip(request), meta={"id": item.id, "english_name": item.english_name})
    return item
