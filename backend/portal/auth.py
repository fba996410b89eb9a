# backend/portal/auth.py
import logging
from typing import Optional

from portal.api import ApiClient, ApiError
from portal.notify import Notifier, GENERIC_ERROR
from portal.session import SessionStore, PHARMACY_ID, PHARMACY_PROFILE

logger = logging.getLogger(__name__)

WELCOME = "Welcome back!"
WELCOME_ADMIN = "Welcome Admin!"
EMAIL_NOT_FOUND = "Email not found"
INVALID_PASSWORD = "Invalid password"
ACCOUNT_SUSPENDED = "This account has been suspended"
EMAIL_TAKEN = "This email is already registered"
UNAUTHORIZED_ADMIN = "Unauthorized access"
PROFILE_SAVED = "Profile updated successfully!"

_LOGIN_ERRORS = {404: EMAIL_NOT_FOUND, 401: INVALID_PASSWORD, 403: ACCOUNT_SUSPENDED}


def _is_duplicate_email(error: ApiError) -> bool:
    detail = str(error.detail or "").lower()
    return error.status_code == 409 or "duplicate" in detail or "already registered" in detail


class AuthFlow:
    def __init__(self, api: ApiClient, session: SessionStore, notifier: Notifier):
        self.api = api
        self.session = session
        self.notifier = notifier

    async def login(self, email: str, password: str) -> Optional[dict]:
        email = (email or "").strip().lower()
        try:
            result = await self.api.post("/auth/login", json={"email": email, "password": password})
        except ApiError as e:
            self.notifier.error(_LOGIN_ERRORS.get(e.status_code, GENERIC_ERROR))
            return None

        self.session.begin(result, email)
        self.notifier.success(WELCOME_ADMIN if result.get("is_admin") else WELCOME)
        return result

    async def logout(self):
        if self.session.token:
            try:
                await self.api.post("/auth/logout")
            except ApiError as e:
                # The local session is cleared regardless
                logger.warning("Logout call failed: %s", e)
        self.session.clear()

    async def register(self, email: str, password: str) -> Optional[int]:
        try:
            result = await self.api.post_workflow("register", {"email": email, "password": password})
        except ApiError as e:
            self.notifier.error(EMAIL_TAKEN if _is_duplicate_email(e) else GENERIC_ERROR)
            return None
        return result["pharmacy_id"]

    async def save_profile(self, pharmacy_id: int, email: str, name: str, **details) -> Optional[dict]:
        try:
            if self.session.token and self.session.pharmacy_id == pharmacy_id and self.session.profile:
                # Existing profiles are edited through the authenticated route
                profile = await self.api.patch("/profile", json={"pharmacy_name": name, **details})
            else:
                payload = {"pharmacy_id": pharmacy_id, "email": email, "name": name, **details}
                profile = await self.api.post_workflow("save-profile", payload)
        except ApiError:
            self.notifier.error(GENERIC_ERROR)
            return None

        # Keep the cached profile in step when the owner is logged in
        if self.session.pharmacy_id == pharmacy_id:
            self.session.set(PHARMACY_PROFILE, profile)
        elif self.session.pharmacy_id is None and self.session.token:
            self.session.set(PHARMACY_ID, pharmacy_id)
            self.session.set(PHARMACY_PROFILE, profile)
        self.notifier.success(PROFILE_SAVED)
        return profile

    async def check_admin(self) -> bool:
        """Admin pages call this first; a refused token ends the session."""
        try:
            await self.api.get("/admin/stats")
        except ApiError as e:
            if e.status_code in (401, 403):
                self.notifier.error(UNAUTHORIZED_ADMIN)
                self.session.clear()
            else:
                self.notifier.error(GENERIC_ERROR)
            return False
        return True
