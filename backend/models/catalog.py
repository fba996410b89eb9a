# backend/models/catalog.py
from sqlalchemy import Column, Integer, String, Float, DateTime, func
from database import Base


# Canonical drug reference ("master"). Written only through moderation approval.
class CatalogDrug(Base):
    __tablename__ = "master"

    id = Column(Integer, primary_key=True, index=True)
    barcode = Column(String, nullable=True, index=True)
    english_name = Column(String, nullable=True, index=True)
    arabic_name = Column(String, nullable=True, index=True)
    brand = Column(String, nullable=True)
    manufacturer = Column(String, nullable=True)
    category = Column(String, nullable=True)
    price = Column(Float, nullable=True)


# Drug proposed by a pharmacy, waiting for an admin to promote or reject it.
# price keeps the submitted text ("120 EGP"); it is sanitised on approval.
class PendingItem(Base):
    __tablename__ = "pending_items"

    id = Column(Integer, primary_key=True, index=True)
    arabic_name = Column(String, nullable=False)
    english_name = Column(String, nullable=False)
    barcode = Column(String, nullable=True)
    brand = Column(String, nullable=False)
    price = Column(String, nullable=False)
    final_category = Column(String, nullable=True)
    added_by = Column(Integer, nullable=True, index=True) # pharmacy_id of the submitter
    created_at = Column(DateTime(timezone=True), server_default=func.now())
