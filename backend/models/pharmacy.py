# backend/models/pharmacy.py
from sqlalchemy import Column, Integer, String, DateTime, CheckConstraint, func
from database import Base

ACCOUNT_ACTIVE = "active"
ACCOUNT_BLACKLISTED = "blacklisted"


# A pharmacy's identity and public profile.
# pharmacy_id is assigned at registration, not by the database.
class Pharmacy(Base):
    __tablename__ = "pharmacies"

    pharmacy_id = Column(Integer, primary_key=True, autoincrement=False)
    pharmacy_name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    city = Column(String, nullable=True, index=True)
    address = Column(String, nullable=True)
    license_no = Column(String, nullable=True)
    email = Column(String, nullable=True)
    telegram = Column(String, nullable=True) # Messaging handle, without the leading @
    profile_pic = Column(String, nullable=True)

    account_status = Column(
        String,
        CheckConstraint("account_status IN ('active', 'blacklisted')"),
        nullable=False,
        default=ACCOUNT_ACTIVE,
    )
    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def is_blacklisted(self) -> bool:
        return self.account_status == ACCOUNT_BLACKLISTED


# Login credentials for the pharmacy path, kept apart from the identity row.
# A credential exists before its profile is completed.
class Credential(Base):
    __tablename__ = "credentials"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False, index=True) # Always stored lower-case
    password_hash = Column(String, nullable=False)
    pharmacy_id = Column(Integer, unique=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
