# backend/models/admin.py
from sqlalchemy import Column, Integer, String, DateTime, func
from database import Base


# Grants moderation capability. The seed admin from settings is recognised without a row here.
class SystemAdmin(Base):
    __tablename__ = "system_admins"

    id = Column(Integer, primary_key=True, index=True)
    uid = Column(String, unique=True, nullable=False, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=True) # Admins without a password cannot log in
    created_at = Column(DateTime(timezone=True), server_default=func.now())
