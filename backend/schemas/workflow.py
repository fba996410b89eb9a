# backend/schemas/workflow.py
# Request bodies for the /webhook workflow endpoints. Every call wraps its
# fields in {"payload": {...}}.
from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class RegisterPayload(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    pharmacy_id: Optional[int] = None

class RegisterBody(BaseModel):
    payload: RegisterPayload

class RegisterResult(BaseModel):
    pharmacy_id: int
    email: str


class SaveProfilePayload(BaseModel):
    pharmacy_id: int
    email: EmailStr
    name: str = Field(min_length=1)
    phone: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None
    license_no: Optional[str] = None
    telegram: Optional[str] = None

class SaveProfileBody(BaseModel):
    payload: SaveProfilePayload


class AddOfferPayload(BaseModel):
    pharmacy_id: int
    drug_id: Optional[int] = None
    english_name: Optional[str] = None
    arabic_name: Optional[str] = None
    manufacturer: Optional[str] = None
    barcode: str
    expiry_date: str  # YYYY-MM-DD or YYYY-MM
    quantity: int = Field(ge=1)
    price: float = Field(gt=0)
    discount: float = Field(default=0, ge=0, le=100)

class AddOfferBody(BaseModel):
    payload: AddOfferPayload


class AddRequestPayload(BaseModel):
    pharmacy_id: int
    drug_id: Optional[int] = None
    english_name: Optional[str] = None
    arabic_name: Optional[str] = None
    barcode: str
    quantity: int = Field(ge=1)

class AddRequestBody(BaseModel):
    payload: AddRequestPayload
