# backend/portal/marketplace.py
from typing import List, Optional

from portal.api import ApiClient, ApiError
from portal.inventory import is_count
from portal.notify import Notifier, GENERIC_ERROR
from portal.ratings import RatingPrompt
from portal.session import SessionStore


OFFER = "offer"
REQUEST = "request"

TRANSACTION_DONE = "Transaction completed"


class MarketplaceBoard:
    """Other pharmacies' listings, client-side filters and transactions."""

    def __init__(self, api: ApiClient, session: SessionStore, notifier: Notifier, kind: str = OFFER):
        if kind not in (OFFER, REQUEST):
            raise ValueError(f"Unknown marketplace kind: {kind}")
        self.api = api
        self.session = session
        self.notifier = notifier
        self.kind = kind
        self.items: List[dict] = []
        self.text = ""
        self.city = ""
        self.min_discount: Optional[float] = None
        self.rating_prompt: Optional[RatingPrompt] = None

    async def refresh(self) -> bool:
        try:
            self.items = await self.api.get(f"/marketplace/{self.kind}s")
        except ApiError:
            self.notifier.error(GENERIC_ERROR)
            return False
        return True

    # --- filters ---

    def set_filters(self, text: Optional[str] = None, city: Optional[str] = None,
                    min_discount: Optional[float] = None):
        if text is not None:
            self.text = text
        if city is not None:
            self.city = city
        if min_discount is not None:
            self.min_discount = min_discount

    def clear_filter(self, name: str):
        if name == "text":
            self.text = ""
        elif name == "city":
            self.city = ""
        elif name == "min_discount":
            self.min_discount = None
        else:
            raise ValueError(f"Unknown filter: {name}")

    def _matches(self, item: dict) -> bool:
        if self.text:
            needle = self.text.lower()
            english = (item.get("english_name") or "").lower()
            barcode = (item.get("barcode") or "").lower()
            # Arabic has no case; match it as typed
            arabic = item.get("arabic_name") or ""
            if needle not in english and needle not in barcode and self.text not in arabic:
                return False
        if self.city and item.get("city") != self.city:
            return False
        if self.kind == OFFER and self.min_discount is not None:
            if (item.get("discount") or 0) < self.min_discount:
                return False
        return True

    @property
    def visible(self) -> List[dict]:
        return [i for i in self.items if self._matches(i)]

    # --- transactions ---

    async def confirm_transaction(self, item_id: int, quantity: int) -> bool:
        item = next((i for i in self.items if i["id"] == item_id), None)
        if item is None:
            self.notifier.error(GENERIC_ERROR)
            return False
        if item.get("is_own") or item.get("pharmacy_id") == self.session.pharmacy_id:
            self.notifier.error("You cannot transact with your own listing")
            return False
        available = item["quantity"]
        if not is_count(quantity) or quantity < 1 or quantity > available:
            self.notifier.error(f"Quantity must be between 1 and {available}")
            return False

        # Optimistic update: whole quantity disappears, partial is decremented
        if quantity == available:
            self.items = [i for i in self.items if i["id"] != item_id]
        else:
            self.items = [dict(i, quantity=available - quantity) if i["id"] == item_id else i for i in self.items]

        try:
            result = await self.api.post(f"/marketplace/{self.kind}s/{item_id}/transactions", json={
                "quantity": quantity,
                "expected_quantity": available,
            })
        except ApiError:
            self.notifier.error(GENERIC_ERROR)
            await self.refresh()
            return False

        self.notifier.success(TRANSACTION_DONE)
        if result.get("can_rate"):
            self.rating_prompt = RatingPrompt(
                self.api, self.notifier,
                to_pharmacy_id=result["owner_pharmacy_id"],
                related_item_id=item_id,
                pharmacy_name=result.get("owner_pharmacy_name"),
            )
        await self.refresh()
        return True
