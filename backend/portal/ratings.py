# backend/portal/ratings.py
from typing import Optional

from portal.api import ApiClient, ApiError
from portal.notify import Notifier, GENERIC_ERROR

RATED = "Thank You! Pharmacy rated successfully"
ALREADY_RATED = "Your rating was recorded"
CHOOSE_STARS = "Please choose a rating from 1 to 5 stars"


class RatingPrompt:
    """Offered after a marketplace transaction to rate the listing pharmacy."""

    def __init__(self, api: ApiClient, notifier: Notifier, to_pharmacy_id: int, related_item_id: int,
                 pharmacy_name: Optional[str] = None):
        self.api = api
        self.notifier = notifier
        self.to_pharmacy_id = to_pharmacy_id
        self.related_item_id = related_item_id
        self.pharmacy_name = pharmacy_name
        self.done = False

    async def submit(self, stars: int, comment: Optional[str] = None) -> bool:
        if not isinstance(stars, int) or not 1 <= stars <= 5:
            self.notifier.error(CHOOSE_STARS)
            return False
        try:
            await self.api.post("/ratings", json={
                "to_pharmacy_id": self.to_pharmacy_id,
                "related_item_id": self.related_item_id,
                "stars": stars,
                "comment": comment,
            })
        except ApiError as e:
            # A repeat for the same transaction is already on record
            if e.status_code == 409:
                self.done = True
                self.notifier.success(ALREADY_RATED)
                return True
            self.notifier.error(GENERIC_ERROR)
            return False
        self.done = True
        self.notifier.success(RATED)
        return True
