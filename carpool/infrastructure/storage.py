"""Profile-picture files on local disk, served back under ``/uploads``."""

from __future__ import annotations

import secrets
import time
from pathlib import Path

from carpool.domain.errors import ValidationError

ALLOWED_IMAGE_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
}

PROFILE_PICTURES = "profile-pictures"


class ProfilePictureStorage:
    def __init__(self, base_dir: str | Path, max_bytes: int, url_prefix: str = "/uploads"):
        self.base_dir = Path(base_dir)
        self.max_bytes = max_bytes
        self.url_prefix = url_prefix.rstrip("/")

    def save(self, filename: str | None, content_type: str | None, data: bytes) -> str:
        """Write *data* and return the public URL path of the stored file."""
        if content_type not in ALLOWED_IMAGE_TYPES:
            raise ValidationError(
                "Solo se permiten archivos de imagen (JPEG, PNG, GIF, WEBP)"
            )
        if not data:
            raise ValidationError("No se proporcionó ninguna imagen")
        if len(data) > self.max_bytes:
            raise ValidationError("La imagen supera el tamaño máximo permitido")

        target_dir = self.base_dir / PROFILE_PICTURES
        target_dir.mkdir(parents=True, exist_ok=True)

        ext = Path(filename or "").suffix.lower()
        name = f"profile-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext}"
        (target_dir / name).write_bytes(data)
        return f"{self.url_prefix}/{PROFILE_PICTURES}/{name}"
