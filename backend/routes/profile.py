# backend/routes/profile.py
from fastapi import APIRouter, Depends, HTTPException, Request, UploadFile, File
from sqlalchemy.orm import Session

from database import get_db
from models.pharmacy import Credential, Pharmacy
from schemas.auth import PasswordChange
from schemas.pharmacy import PharmacyOut, ProfileUpdate
from utils.audit import write_log, client_ip
from utils.normalize import digits_only
from utils.hashing import get_password_hash
from utils.storage import save_avatar
from utils.tokenJWT import get_current_pharmacy

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("", response_model=PharmacyOut)
def get_profile(pharmacy: Pharmacy = Depends(get_current_pharmacy)):
    return pharmacy


# Owner edits of the public profile
@router.patch("", response_model=PharmacyOut)
def update_profile(
    payload: ProfileUpdate,
    request: Request,
    db: Session = Depends(get_db),
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
):
    changes = payload.model_dump(exclude_unset=True)
    if "pharmacy_name" in changes and not changes["pharmacy_name"]:
        raise HTTPException(status_code=400, detail="Pharmacy name cannot be empty")

    # Phone and license keep digits only
    for field in ("phone", "license_no"):
        if field in changes:
            changes[field] = digits_only(changes[field]) or None
    if changes.get("telegram"):
        changes["telegram"] = changes["telegram"].strip().lstrip("@") or None

    for field, value in changes.items():
        setattr(pharmacy, field, value)
    db.commit()
    db.refresh(pharmacy)

    write_log(db, actor=f"pharmacy:{pharmacy.pharmacy_id}", action="UPDATE_PROFILE", resource="pharmacy",
              ip=client_ip(request), meta={"fields": sorted(changes)})
    return pharmacy


# Stored as <pharmacy_id>.<ext>, replacing any previous picture
@router.post("/avatar", response_model=PharmacyOut)
async def upload_avatar(
    request: Request,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
):
    data = await file.read()
    pharmacy.profile_pic = save_avatar(pharmacy.pharmacy_id, file.filename, data)
    db.commit()
    db.refresh(pharmacy)

    write_log(db, actor=f"pharmacy:{pharmacy.pharmacy_id}", action="UPLOAD_AVATAR", resource="pharmacy",
              ip=client_ip(request), meta={"url": pharmacy.profile_pic})
    return pharmacy


@router.post("/password")
def change_password(
    payload: PasswordChange,
    request: Request,
    db: Session = Depends(get_db),
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
):
    if payload.new_password != payload.confirm_password:
        raise HTTPException(status_code=400, detail="Passwords do not match")

    credential = db.query(Credential).filter(Credential.pharmacy_id == pharmacy.pharmacy_id).first()
    if not credential:
        raise HTTPException(status_code=404, detail="Credential not found")

    credential.password_hash = get_password_hash(payload.new_password)
    db.commit()

    write_log(db, actor=f"pharmacy:{pharmacy.pharmacy_id}", action="CHANGE_PASSWORD", resource="auth",
              ip=client_ip(request))
    return {"message": "Password updated"}
