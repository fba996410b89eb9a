# backend/models/rating.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, CheckConstraint, UniqueConstraint, func
from sqlalchemy.orm import relationship
from database import Base


# One pharmacy's rating of another after an exchange
class Rating(Base):
    __tablename__ = "ratings"

    id = Column(Integer, primary_key=True, index=True)
    from_pharmacy_id = Column(Integer, ForeignKey("pharmacies.pharmacy_id"), nullable=False, index=True)
    to_pharmacy_id = Column(Integer, ForeignKey("pharmacies.pharmacy_id"), nullable=False, index=True)
    stars = Column(Integer, CheckConstraint("stars >= 1 AND stars <= 5"), nullable=False)
    comment = Column(String, nullable=True)
    related_item_id = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    from_pharmacy = relationship("Pharmacy", foreign_keys=[from_pharmacy_id])
    to_pharmacy = relationship("Pharmacy", foreign_keys=[to_pharmacy_id])

    __table_args__ = (
        # One rating per transaction; repeats are rejected by the database
        UniqueConstraint("from_pharmacy_id", "to_pharmacy_id", "related_item_id", name="uq_rating_per_item"),
    )
