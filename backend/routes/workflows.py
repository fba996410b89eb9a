# backend/routes/workflows.py
# Workflow endpoints used by the client for multi-step writes. Bodies are
# wrapped as {"payload": {...}}.
import time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from database import get_db
from models.inventory import InventoryOffer, InventoryRequest
from models.pharmacy import Credential, Pharmacy
from schemas.inventory import OfferOut, RequestOut
from schemas.pharmacy import PharmacyOut
from schemas.workflow import (
    AddOfferBody, AddRequestBody, RegisterBody, RegisterResult, SaveProfileBody,
)
from utils.audit import write_log, client_ip
from utils.catalog import normalize_barcode, parse_expiry
from utils.normalize import digits_only
from utils.hashing import get_password_hash
from utils.marketplace import is_near_expiry
from utils.tokenJWT import get_current_pharmacy


router = APIRouter(prefix="/webhook", tags=["Workflows"])


def _pharmacy_id_taken(db: Session, pharmacy_id: int, exclude_credential: Optional[int] = None) -> bool:
    credentials = db.query(Credential.id).filter(Credential.pharmacy_id == pharmacy_id)
    if exclude_credential is not None:
        credentials = credentials.filter(Credential.id != exclude_credential)
    return (
        credentials.first() is not None
        or db.query(Pharmacy.pharmacy_id).filter(Pharmacy.pharmacy_id == pharmacy_id).first() is not None
    )


def _new_pharmacy_id(db: Session) -> int:
    # Time-based id, bumped until unused
    candidate = int(time.time())
    while _pharmacy_id_taken(db, candidate):
        candidate += 1
    return candidate


# Step 1 of registration: credentials only
@router.post("/register", response_model=RegisterResult, status_code=status.HTTP_201_CREATED)
def register(body: RegisterBody, request: Request, db: Session = Depends(get_db)):
    data = body.payload
    email = data.email.strip().lower()

    if db.query(Credential).filter(func.lower(Credential.email) == email).first():
        write_log(db, actor=None, action="REGISTER", resource="auth", status="FAIL",
                  ip=client_ip(request), meta={"email": email, "reason": "Email exists"})
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    pharmacy_id = data.pharmacy_id or _new_pharmacy_id(db)
    if _pharmacy_id_taken(db, pharmacy_id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Pharmacy id already in use")

    credential = Credential(email=email, password_hash=get_password_hash(data.password), pharmacy_id=pharmacy_id)
    db.add(credential)
    db.commit()

    write_log(db, actor=f"pharmacy:{pharmacy_id}", action="REGISTER", resource="auth",
              ip=client_ip(request), meta={"email": email})
    return {"pharmacy_id": pharmacy_id, "email": email}


# Step 2 of registration: the first profile only. Later edits go through PATCH /profile.
@router.post("/save-profile", response_model=PharmacyOut)
def save_profile(body: SaveProfileBody, request: Request, db: Session = Depends(get_db)):
    data = body.payload
    email = data.email.strip().lower()

    credential = db.query(Credential).filter(func.lower(Credential.email) == email).first()
    if credential is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Email not found")

    linked = db.query(Pharmacy.pharmacy_id).filter(Pharmacy.pharmacy_id == credential.pharmacy_id).first()
    if linked is not None:
        write_log(db, actor=None, action="SAVE_PROFILE", resource="pharmacy", status="FAIL",
                  ip=client_ip(request), meta={"email": email, "reason": "Profile exists"})
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Profile already saved")

    # Link the credential to the chosen pharmacy id
    if credential.pharmacy_id != data.pharmacy_id:
        if _pharmacy_id_taken(db, data.pharmacy_id, exclude_credential=credential.id):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Pharmacy id already in use")
        credential.pharmacy_id = data.pharmacy_id

    pharmacy = Pharmacy(
        pharmacy_id=data.pharmacy_id,
        pharmacy_name=data.name.strip(),
        email=email,
        phone=digits_only(data.phone) or None,
        license_no=digits_only(data.license_no) or None,
        city=(data.city or "").strip() or None,
        address=(data.address or "").strip() or None,
        telegram=(data.telegram or "").strip().lstrip("@") or None,
    )
    db.add(pharmacy)
    db.commit()
    db.refresh(pharmacy)

    write_log(db, actor=f"pharmacy:{pharmacy.pharmacy_id}", action="SAVE_PROFILE", resource="pharmacy",
              ip=client_ip(request), meta={"email": email})
    return pharmacy


def _check_owner(pharmacy: Pharmacy, pharmacy_id: int):
    if pharmacy_id != pharmacy.pharmacy_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Cannot create items for another pharmacy")


@router.post("/add-offer", response_model=OfferOut, status_code=status.HTTP_201_CREATED)
def add_offer(
    body: AddOfferBody,
    request: Request,
    db: Session = Depends(get_db),
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
):
    data = body.payload
    _check_owner(pharmacy, data.pharmacy_id)

    offer = InventoryOffer(
        pharmacy_id=pharmacy.pharmacy_id,
        drug_id=data.drug_id,
        english_name=data.english_name,
        arabic_name=data.arabic_name,
        manufacturer=data.manufacturer,
        barcode=normalize_barcode(data.barcode),
        expiry_date=parse_expiry(data.expiry_date),
        quantity=data.quantity,
        price=data.price,
        discount=data.discount,
    )
    db.add(offer)
    db.commit()
    db.refresh(offer)

    write_log(db, actor=f"pharmacy:{pharmacy.pharmacy_id}", action="ADD_OFFER", resource="offers",
              ip=client_ip(request), meta={"id": offer.id, "barcode": offer.barcode, "quantity": offer.quantity})

    result = OfferOut.model_validate(offer)
    result.is_near_expiry = is_near_expiry(offer.expiry_date)
    return result


@router.post("/add-request", response_model=RequestOut, status_code=status.HTTP_201_CREATED)
def add_request(
    body: AddRequestBody,
    request: Request,
    db: Session = Depends(get_db),
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
):
    data = body.payload
    _check_owner(pharmacy, data.pharmacy_id)

    item = InventoryRequest(
        pharmacy_id=pharmacy.pharmacy_id,
        drug_id=data.drug_id,
        english_name=data.english_name,
        arabic_name=data.arabic_name,
        barcode=normalize_barcode(data.barcode),
        quantity=data.quantity,
    )
    db.add(item)
    db.commit()
    db.refresh(item)

    write_log(db, actor=f"pharmacy:{pharmacy.pharmacy_id}", action="ADD_REQUEST", resource="requests",
              ip=client_ip(request), meta={"id": item.id, "barcode": item.barcode, "quantity": item.quantity})
    return item
