# backend/models/inventory.py
from sqlalchemy import Column, Integer, String, Float, Date, DateTime, ForeignKey, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base


# A pharmacy's open listing of surplus stock.
# Rows exist only while quantity > 0; a fully consumed offer is deleted.
class InventoryOffer(Base):
    __tablename__ = "inventory_offers"

    id = Column(Integer, primary_key=True, index=True)
    pharmacy_id = Column(Integer, ForeignKey("pharmacies.pharmacy_id"), nullable=False, index=True)
    drug_id = Column(Integer, ForeignKey("master.id"), nullable=True)

    # Drug identity copied from the catalog at creation time
    english_name = Column(String, nullable=True)
    arabic_name = Column(String, nullable=True)
    manufacturer = Column(String, nullable=True)
    barcode = Column(String, nullable=False, index=True)

    expiry_date = Column(Date, nullable=False)
    quantity = Column(Integer, CheckConstraint("quantity > 0"), nullable=False)
    price = Column(Float, CheckConstraint("price > 0"), nullable=False)
    discount = Column(Float, CheckConstraint("discount >= 0 AND discount <= 100"), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    pharmacy = relationship("Pharmacy", lazy="joined")


# A "wanted" posting. No price, discount or expiry.
class InventoryRequest(Base):
    __tablename__ = "inventory_requests"

    id = Column(Integer, primary_key=True, index=True)
    pharmacy_id = Column(Integer, ForeignKey("pharmacies.pharmacy_id"), nullable=False, index=True)
    drug_id = Column(Integer, ForeignKey("master.id"), nullable=True)

    english_name = Column(String, nullable=True)
    arabic_name = Column(String, nullable=True)
    barcode = Column(String, nullable=False, index=True)

    quantity = Column(Integer, CheckConstraint("quantity > 0"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    pharmacy = relationship("Pharmacy", lazy="joined")
