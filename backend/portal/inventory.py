# backend/portal/inventory.py
import inspect
from typing import Callable, List, Optional

from portal.api import ApiClient, ApiError
from portal.notify import Notifier, GENERIC_ERROR
from portal.session import SessionStore
from utils.normalize import barcode_digits, expiry_date


OFFER = "offer"
REQUEST = "request"

ADDED = "Item added successfully"
ARCHIVED = "Item updated and moved to the archive"
QUANTITY_UPDATED = "Quantity updated"
UPDATED = "Item updated"
PROFILE_FIRST = "Please complete your pharmacy profile first to start adding items"
DUPLICATE_WARNING = "You already have an offer for this item with the same expiry date. Add it anyway?"


# Form checks return None on bad input; the server-side twins in utils.catalog raise instead.
def normalize_barcode(value) -> Optional[str]:
    return barcode_digits(value)


def normalize_expiry(value) -> Optional[str]:
    """'2026-05' -> '2026-05-01'; None when unreadable."""
    parsed = expiry_date(value)
    return parsed.isoformat() if parsed is not None else None


def is_count(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def as_number(value) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class InventoryBoard:
    """The owner's own offers or requests with create, archive, restock and edit.

    Validation failures are reported without any network call. Full
    cancellation removes the item locally first and re-fetches if the
    server refuses.
    """

    def __init__(self, api: ApiClient, session: SessionStore, notifier: Notifier, kind: str = OFFER,
                 confirm: Optional[Callable[[str], bool]] = None):
        if kind not in (OFFER, REQUEST):
            raise ValueError(f"Unknown inventory kind: {kind}")
        self.api = api
        self.session = session
        self.notifier = notifier
        self.kind = kind
        self.confirm = confirm or (lambda message: True)
        self.items: List[dict] = []
        self.draft: Optional[dict] = None

    @property
    def _base(self) -> str:
        return f"/{self.kind}s"

    def find(self, item_id: int) -> Optional[dict]:
        return next((i for i in self.items if i["id"] == item_id), None)

    async def refresh(self) -> bool:
        try:
            self.items = await self.api.get(f"{self._base}/mine")
        except ApiError:
            self.notifier.error(GENERIC_ERROR)
            return False
        return True

    # --- create ---

    def validate(self, selection: Optional[dict], quantity, expiry=None, price=None, discount=0) -> Optional[str]:
        if not selection:
            return "Please select a drug from the catalog"
        if normalize_barcode(selection.get("barcode")) is None:
            return "The selected drug has no valid barcode"
        if not is_count(quantity) or quantity < 1:
            return "Quantity must be at least 1"
        if self.kind == OFFER:
            if normalize_expiry(expiry) is None:
                return "Expiry date must be YYYY-MM-DD or YYYY-MM"
            price_value = as_number(price)
            if price_value is None or price_value <= 0:
                return "Price must be greater than zero"
            discount_value = as_number(discount)
            if discount_value is None or not 0 <= discount_value <= 100:
                return "Discount must be between 0 and 100"
        return None

    async def _confirmed(self, message: str) -> bool:
        answer = self.confirm(message)
        if inspect.isawaitable(answer):
            answer = await answer
        return bool(answer)

    async def add(self, selection: Optional[dict], quantity, expiry=None, price=None, discount=0) -> bool:
        self.draft = {"selection": selection, "quantity": quantity, "expiry": expiry,
                      "price": price, "discount": discount}

        pharmacy_id = self.session.pharmacy_id
        if not pharmacy_id or not self.session.profile:
            self.notifier.error(PROFILE_FIRST)
            return False

        problem = self.validate(selection, quantity, expiry, price, discount)
        if problem:
            self.notifier.error(problem)
            return False

        barcode = normalize_barcode(selection.get("barcode"))
        payload = {
            "pharmacy_id": pharmacy_id,
            "drug_id": selection.get("id"),
            "english_name": selection.get("english_name"),
            "arabic_name": selection.get("arabic_name"),
            "barcode": barcode,
            "quantity": quantity,
        }
        if self.kind == OFFER:
            expiry_iso = normalize_expiry(expiry)
            duplicate = any(i.get("barcode") == barcode and i.get("expiry_date") == expiry_iso for i in self.items)
            if duplicate and not await self._confirmed(DUPLICATE_WARNING):
                return False
            payload.update({
                "manufacturer": selection.get("manufacturer"),
                "expiry_date": expiry_iso,
                "price": as_number(price),
                "discount": as_number(discount or 0),
            })

        try:
            await self.api.post_workflow(f"add-{self.kind}", payload)
        except ApiError:
            # Draft stays for the user to retry
            self.notifier.error(GENERIC_ERROR)
            return False

        self.draft = None
        self.notifier.success(ADDED)
        await self.refresh()
        return True

    # --- archive ---

    async def full_cancel(self, item_id: int, action_type: str) -> bool:
        item = self.find(item_id)
        if item is None:
            self.notifier.error(GENERIC_ERROR)
            return False

        # Optimistic removal; the refresh below corrects it either way
        self.items = [i for i in self.items if i["id"] != item_id]
        try:
            await self.api.post(f"{self._base}/{item_id}/archive", json={"action_type": action_type})
        except ApiError:
            self.notifier.error(GENERIC_ERROR)
            await self.refresh()
            return False

        self.notifier.success(ARCHIVED)
        await self.refresh()
        return True

    async def deduct(self, item_id: int, quantity: int, action_type: str) -> bool:
        item = self.find(item_id)
        if item is None:
            self.notifier.error(GENERIC_ERROR)
            return False
        current = item["quantity"]
        if not is_count(quantity) or quantity <= 0 or quantity > current:
            self.notifier.error(f"Quantity must be between 1 and {current}")
            return False

        try:
            await self.api.post(f"{self._base}/{item_id}/archive", json={
                "action_type": action_type,
                "quantity": quantity,
                "expected_quantity": current,
            })
        except ApiError:
            self.notifier.error(GENERIC_ERROR)
            await self.refresh()
            return False

        self.notifier.success(ARCHIVED)
        await self.refresh()
        return True

    # --- direct updates ---

    async def restock(self, item_id: int, quantity: int) -> bool:
        if not is_count(quantity) or quantity < 1:
            self.notifier.error("Quantity must be at least 1")
            return False
        try:
            await self.api.post(f"{self._base}/{item_id}/restock", json={"quantity": quantity})
        except ApiError:
            self.notifier.error(GENERIC_ERROR)
            return False
        self.notifier.success(QUANTITY_UPDATED)
        await self.refresh()
        return True

    async def edit(self, item_id: int, **changes) -> bool:
        try:
            await self.api.patch(f"{self._base}/{item_id}", json=changes)
        except ApiError:
            self.notifier.error(GENERIC_ERROR)
            return False
        self.notifier.success(UPDATED)
        await self.refresh()
        return True
