# utils/tokenJWT.py
from jose import jwt, JWTError
from datetime import datetime, timedelta, timezone
from dataclasses import dataclass
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.pharmacy import Pharmacy
from models.admin import SystemAdmin

ROLE_PHARMACY = "pharmacy"
ROLE_ADMIN = "admin"

# Authorization scheme
bearer_scheme = HTTPBearer()


@dataclass
class Actor:
    role: str
    key: str                      # pharmacy_id as text, or admin uid
    email: Optional[str] = None

    @property
    def subject(self) -> str:
        return f"{self.role}:{self.key}"

    @property
    def pharmacy_id(self) -> Optional[int]:
        return int(self.key) if self.role == ROLE_PHARMACY else None


# Generate a new JWT access token
def create_access_token(data: dict, expires_delta: timedelta = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def token_for_pharmacy(pharmacy_id: int, email: str) -> str:
    return create_access_token({"sub": f"{ROLE_PHARMACY}:{pharmacy_id}", "role": ROLE_PHARMACY, "email": email})


def token_for_admin(uid: str, email: str) -> str:
    return create_access_token({"sub": f"{ROLE_ADMIN}:{uid}", "role": ROLE_ADMIN, "email": email})


# Decode the bearer token into an Actor
def get_current_actor(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> Actor:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(credentials.credentials, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise credentials_exception

    sub: str = payload.get("sub") or ""
    role, _, key = sub.partition(":")
    if role not in (ROLE_PHARMACY, ROLE_ADMIN) or not key:
        raise credentials_exception
    if role == ROLE_PHARMACY and not key.isdigit():
        raise credentials_exception
    return Actor(role=role, key=key, email=payload.get("email"))


def is_admin_uid(db: Session, uid: str) -> bool:
    if uid == settings.SEED_ADMIN_UID:
        return True
    return db.query(SystemAdmin.id).filter(SystemAdmin.uid == uid).first() is not None


# Pharmacy-only routes; blacklisted accounts are refused on every call
def get_current_pharmacy(
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
) -> Pharmacy:
    if actor.role != ROLE_PHARMACY:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Pharmacy account required")

    pharmacy = db.query(Pharmacy).filter(Pharmacy.pharmacy_id == actor.pharmacy_id).first()
    if pharmacy is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Pharmacy profile not completed")
    if pharmacy.is_blacklisted:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is blacklisted")
    return pharmacy


# Admin-only routes; the uid must still be an admin at request time
def require_admin(
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
) -> Actor:
    if actor.role != ROLE_ADMIN or not is_admin_uid(db, actor.key):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return actor
