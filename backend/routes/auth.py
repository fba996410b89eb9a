# backend/routes/auth.py
import hmac
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy import func
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.admin import SystemAdmin
from models.pharmacy import Credential, Pharmacy
from schemas.auth import LoginRequest, LoginResponse, MeResponse
from utils.audit import write_log, client_ip
from utils.hashing import verify_password
from utils.tokenJWT import (
    Actor, ROLE_ADMIN, get_current_actor, is_admin_uid, token_for_admin, token_for_pharmacy,
)

router = APIRouter(prefix="/auth", tags=["Auth"])


def _is_seed_admin(email: str, password: str) -> bool:
    if not settings.SEED_ADMIN_EMAIL or not settings.SEED_ADMIN_PASSWORD:
        return False
    return (
        email == settings.SEED_ADMIN_EMAIL.strip().lower()
        and hmac.compare_digest(password.encode(), settings.SEED_ADMIN_PASSWORD.encode())
    )


def _admin_login(db: Session, uid: str, email: str, request: Request) -> dict:
    write_log(db, actor=f"{ROLE_ADMIN}:{uid}", action="LOGIN", resource="auth",
              status="SUCCESS", ip=client_ip(request), meta={"email": email, "role": ROLE_ADMIN})
    return {
        "access_token": token_for_admin(uid, email),
        "token_type": "bearer",
        "role": ROLE_ADMIN,
        "is_admin": True,
        "admin_email": email,
    }


# Authenticate an admin or a pharmacy and issue a JWT token
@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, request: Request, db: Session = Depends(get_db)):
    # Normalize email input
    email = payload.email.strip().lower()

    # Seed admin from configuration
    if _is_seed_admin(email, payload.password):
        return _admin_login(db, settings.SEED_ADMIN_UID, email, request)

    # Admins registered in system_admins
    admin = db.query(SystemAdmin).filter(func.lower(SystemAdmin.email) == email).first()
    if admin and admin.password_hash:
        if not verify_password(payload.password, admin.password_hash):
            write_log(db, actor=f"{ROLE_ADMIN}:{admin.uid}", action="LOGIN", resource="auth",
                      status="FAIL", ip=client_ip(request), meta={"email": email})
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
        return _admin_login(db, admin.uid, admin.email, request)

    # Pharmacy path
    credential = db.query(Credential).filter(func.lower(Credential.email) == email).first()
    if credential is None:
        write_log(db, actor=None, action="LOGIN", resource="auth", status="FAIL",
                  ip=client_ip(request), meta={"email": email, "reason": "Email not found"})
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Email not found")

    actor = f"pharmacy:{credential.pharmacy_id}"
    if not verify_password(payload.password, credential.password_hash):
        write_log(db, actor=actor, action="LOGIN", resource="auth", status="FAIL",
                  ip=client_ip(request), meta={"email": email, "reason": "Wrong password"})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    pharmacy = db.query(Pharmacy).filter(Pharmacy.pharmacy_id == credential.pharmacy_id).first()
    if pharmacy is not None and pharmacy.is_blacklisted:
        write_log(db, actor=actor, action="LOGIN", resource="auth", status="FAIL",
                  ip=client_ip(request), meta={"email": email, "reason": "Blacklisted"})
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is blacklisted")

    if pharmacy is not None:
        pharmacy.last_login = datetime.now(timezone.utc)
        db.commit()
        db.refresh(pharmacy)

    # Log successful login event
    write_log(db, actor=actor, action="LOGIN", resource="auth", status="SUCCESS",
              ip=client_ip(request), meta={"email": email})

    return {
        "access_token": token_for_pharmacy(credential.pharmacy_id, credential.email),
        "token_type": "bearer",
        "role": "pharmacy",
        "pharmacy_id": credential.pharmacy_id,
        "profile": pharmacy,
        "is_admin": False,
        "admin_email": None,
    }


# Describe the token holder
@router.get("/me", response_model=MeResponse)
def me(actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    if actor.role == ROLE_ADMIN:
        return {"role": actor.role, "admin_uid": actor.key, "email": actor.email,
                "is_admin": is_admin_uid(db, actor.key)}
    return {"role": actor.role, "pharmacy_id": actor.pharmacy_id, "email": actor.email, "is_admin": False}


# Tokens are stateless; logout only leaves an audit entry
@router.post("/logout")
def logout(request: Request, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    write_log(db, actor=actor.subject, action="LOGOUT", resource="auth", status="SUCCESS", ip=client_ip(request))
    return {"message": "Logged out"}
