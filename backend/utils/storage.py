# backend/utils/storage.py
from pathlib import Path

from config import settings
from utils.errors import ValidationFailed

ALLOWED_AVATAR_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp"}
AVATAR_URL_PREFIX = "/avatars"


def ensure_avatar_dir() -> Path:
    path = Path(settings.AVATAR_DIR)
    path.mkdir(parents=True, exist_ok=True)
    return path


def save_avatar(pharmacy_id: int, filename: str, data: bytes) -> str:
    """Store the upload as <pharmacy_id>.<ext>, replacing any previous one. Returns its public URL."""
    ext = Path(filename or "").suffix.lower().lstrip(".")
    if ext not in ALLOWED_AVATAR_EXTENSIONS:
        raise ValidationFailed("Unsupported image type")
    if not data:
        raise ValidationFailed("Empty upload")

    directory = ensure_avatar_dir()
    # A new extension must not leave the old picture behind
    for old in directory.glob(f"{pharmacy_id}.*"):
        old.unlink()

    name = f"{pharmacy_id}.{ext}"
    (directory / name).write_bytes(data)
    return f"{AVATAR_URL_PREFIX}/{name}"
