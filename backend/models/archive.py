# backend/models/archive.py
from sqlalchemy import Column, Integer, String, Float, DateTime, func
from database import Base

# Owner labels, English and Arabic forms as entered in the app
OFFER_OWNER_ACTIONS = ("Internal Sale", "Transfer", "بيع داخلي", "تحويل")
REQUEST_OWNER_ACTIONS = ("Purchased", "Transferred", "تم الشراء", "تم التحويل")

MARKETPLACE_SALE = "Marketplace Sale"
MARKETPLACE_REQUEST_FILLED = "Marketplace Request Filled"

# Labels counted as sold stock on the dashboard
OFFER_SALE_LABELS = ("بيع داخلي", "Internal Sale", "تحويل", "Transfer", "بيع")
# Labels shown as "Request Completed" in recent activity
REQUEST_DONE_LABELS = ("تم الشراء", "Purchased", "تم التحويل", "Transferred")


# Append-only record of a retired or consumed quantity ("sales_archive").
# pharmacy_id is always the pharmacy that listed the item.
class SalesArchive(Base):
    __tablename__ = "sales_archive"

    id = Column(Integer, primary_key=True, index=True)
    pharmacy_id = Column(Integer, nullable=False, index=True)
    item_id = Column(Integer, nullable=False)
    item_kind = Column(String(10), nullable=False) # "offer" or "request"

    arabic_name = Column(String, nullable=True)
    english_name = Column(String, nullable=True)
    barcode = Column(String, nullable=True)

    quantity = Column(Integer, nullable=False)
    price = Column(Float, nullable=True)
    discount = Column(Float, nullable=True)
    action_type = Column(String, nullable=False, index=True)

    # Set for marketplace transactions
    counterparty_pharmacy_id = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
