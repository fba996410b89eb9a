from pydantic import BaseModel, Field
from typing import Optional

from schemas.pharmacy import PharmacyOut

# Schema for login credentials; the email is normalised server-side
class LoginRequest(BaseModel):
    email: str
    password: str

# Login result: token plus the cached session values
class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: str
    pharmacy_id: Optional[int] = None
    profile: Optional[PharmacyOut] = None
    is_admin: bool = False
    admin_email: Optional[str] = None

class MeResponse(BaseModel):
    role: str
    pharmacy_id: Optional[int] = None
    admin_uid: Optional[str] = None
    email: Optional[str] = None
    is_admin: bool = False

class PasswordChange(BaseModel):
    new_password: str = Field(min_length=6)
    confirm_password: str
