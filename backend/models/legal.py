from sqlalchemy import Column, Integer, String, Text, DateTime, func
from database import Base


# Terms of use and similar documents, keyed by type
class LegalContent(Base):
    __tablename__ = "legal_content"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String(50), unique=True, nullable=False, index=True)
    content = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
