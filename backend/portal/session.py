# backend/portal/session.py
import json
import logging
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

PHARMACY_ID = "pharmacy_id"
PHARMACY_PROFILE = "pharmacy_profile"
IS_ADMIN = "is_admin"
ADMIN_EMAIL = "admin_email"
USER_CREDENTIALS = "user_credentials"

SESSION_KEYS = (PHARMACY_ID, PHARMACY_PROFILE, IS_ADMIN, ADMIN_EMAIL, USER_CREDENTIALS)


class SessionStore:
    """Persisted key/value store shared by every portal board.

    Values live in one JSON file. Other keys written by the host application
    are left alone by clear().
    """

    def __init__(self, path):
        self.path = Path(path)
        self._data = self._load()

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text(encoding="utf-8")) or {}
        except (ValueError, OSError):
            logger.warning("Session file %s unreadable, starting empty", self.path)
            return {}

    def _save(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data, ensure_ascii=False), encoding="utf-8")

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any):
        self._data[key] = value
        self._save()

    def begin(self, login: dict, email: str):
        """Store the result of a successful login."""
        self._data[PHARMACY_ID] = login.get("pharmacy_id")
        self._data[PHARMACY_PROFILE] = login.get("profile")
        self._data[IS_ADMIN] = bool(login.get("is_admin"))
        self._data[ADMIN_EMAIL] = login.get("admin_email")
        self._data[USER_CREDENTIALS] = {"token": login.get("access_token"), "email": email}
        self._save()

    def clear(self):
        for key in SESSION_KEYS:
            self._data.pop(key, None)
        self._save()

    @property
    def token(self) -> Optional[str]:
        creds = self._data.get(USER_CREDENTIALS) or {}
        return creds.get("token")

    @property
    def pharmacy_id(self) -> Optional[int]:
        return self._data.get(PHARMACY_ID)

    @property
    def profile(self) -> Optional[dict]:
        return self._data.get(PHARMACY_PROFILE)

    @property
    def is_admin(self) -> bool:
        return bool(self._data.get(IS_ADMIN))
