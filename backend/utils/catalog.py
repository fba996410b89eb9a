# backend/utils/catalog.py
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from config import settings
from models.catalog import CatalogDrug
from utils.errors import ValidationFailed
from utils.normalize import barcode_digits, expiry_date

logger = logging.getLogger(__name__)


def normalize_barcode(value) -> str:
    """Reduce a scanned or typed barcode to its digits.

    Raises ValidationFailed when nothing usable remains ("", "0000").
    """
    digits = barcode_digits(value)
    if digits is None:
        raise ValidationFailed("A valid barcode is required")
    return digits


def parse_expiry(value) -> date:
    parsed = expiry_date(value)
    if parsed is None:
        raise ValidationFailed("Expiry date must be YYYY-MM-DD or YYYY-MM")
    return parsed


def escape_like(text: str) -> str:
    # Typed % and _ match literally
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def search_catalog(db: Session, q: Optional[str]) -> List[CatalogDrug]:
    query_text = (q or "").strip()
    if len(query_text) < settings.CATALOG_MIN_QUERY_LENGTH:
        return []

    like = f"%{escape_like(query_text)}%"
    try:
        return (
            db.query(CatalogDrug)
            .filter(or_(
                CatalogDrug.arabic_name.ilike(like, escape="\\"),
                CatalogDrug.english_name.ilike(like, escape="\\"),
            ))
            .order_by(CatalogDrug.english_name.asc())
            .limit(settings.CATALOG_SEARCH_LIMIT)
            .all()
        )
    except Exception:
        # Search failures surface as "no results"
        logger.exception("Catalog search failed for %r", query_text)
        db.rollback()
        return []
