# backend/portal/search.py
import asyncio
import logging
from typing import List, Optional

from portal.api import ApiClient, ApiError
from portal.notify import Notifier, GENERIC_ERROR

logger = logging.getLogger(__name__)

DEBOUNCE_SECONDS = 0.3
MIN_QUERY_LENGTH = 3

MISSING_FIELDS_ERROR = "Please complete all required fields (Name, Brand, Price)"
MISSING_SENT = "Item sent successfully and is pending review"


class CatalogSearch:
    """Debounced catalog lookup.

    Each keystroke restarts a 300 ms timer. Every issued search carries a
    sequence number and only the newest one may write results, so a slow
    response for an older query never overwrites a newer one.
    """

    def __init__(self, api: ApiClient, notifier: Notifier, debounce: float = DEBOUNCE_SECONDS):
        self.api = api
        self.notifier = notifier
        self.debounce = debounce
        self.query = ""
        self.results: List[dict] = []
        self.missing_item_query: Optional[str] = None
        self._seq = 0
        self._timer: Optional[asyncio.Task] = None

    def set_query(self, text: str):
        self.query = text
        self._seq += 1
        self._cancel_timer()

        term = (text or "").strip()
        if len(term) < MIN_QUERY_LENGTH:
            self.results = []
            self.missing_item_query = None
            return
        self._timer = asyncio.get_running_loop().create_task(self._debounced(self._seq, term))

    async def _debounced(self, seq: int, term: str):
        await asyncio.sleep(self.debounce)
        try:
            found = await self.api.search_catalog(term)
        except ApiError as e:
            # Failures read as "no results"
            logger.error(f"Catalog search failed: {e}")
            found = []
        if seq != self._seq:
            return
        self.results = found or []
        self.missing_item_query = term if not self.results else None

    def _cancel_timer(self):
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def settle(self):
        """Wait for the pending search, if any."""
        if self._timer is not None:
            try:
                await self._timer
            except asyncio.CancelledError:
                pass

    def missing_item_form(self) -> dict:
        return {"name_ar": "", "name_en": self.missing_item_query or "", "barcode": "",
                "brand": "", "price": "", "category": ""}

    async def submit_missing_item(self, name_ar: str, name_en: str, brand: str, price: str,
                                  barcode: str = "", category: str = "") -> bool:
        if not (name_ar and name_en and brand and str(price).strip()):
            self.notifier.error(MISSING_FIELDS_ERROR)
            return False
        try:
            await self.api.post("/catalog/pending", json={
                "arabic_name": name_ar,
                "english_name": name_en,
                "brand": brand,
                "price": str(price),
                "barcode": barcode or None,
                "final_category": category or None,
            })
        except ApiError:
            self.notifier.error(GENERIC_ERROR)
            return False
        self.notifier.success(MISSING_SENT)
        return True

    def close(self):
        self._cancel_timer()
