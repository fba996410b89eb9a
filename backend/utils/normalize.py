# backend/utils/normalize.py
# Form-value parsing shared by the API and the portal client. These return
# None on unusable input; callers decide whether that is an error.
import re
from datetime import date, datetime
from typing import Optional

EXPIRY_FORMATS = ("%Y-%m-%d", "%Y-%m")


def digits_only(value) -> str:
    return re.sub(r"\D", "", str(value or ""))


def barcode_digits(value) -> Optional[str]:
    digits = digits_only(value)
    if not digits or int(digits) == 0:
        return None
    return digits


def expiry_date(value) -> Optional[date]:
    """YYYY-MM-DD, or YYYY-MM for the first day of the month."""
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    for fmt in EXPIRY_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None
