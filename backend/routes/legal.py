from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from models.legal import LegalContent
from schemas.admin import LegalOut

router = APIRouter(prefix="/legal", tags=["Legal"])


# Public: terms of use and similar documents
@router.get("/{doc_type}", response_model=LegalOut)
def get_legal(doc_type: str, db: Session = Depends(get_db)):
    doc = db.query(LegalContent).filter(LegalContent.type == doc_type).first()
    if not doc:
        raise HTTPException(status_code=404, detail="Document not found")
    return doc
