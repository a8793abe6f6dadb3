from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List

from incident_hub.core.config import Settings
from incident_hub.core.errors import UploadFailed, ValidationFailed

logger = logging.getLogger(__name__)

ALLOWED = {"image/jpeg", "image/png", "image/jpg", "image/webp", "image/gif", "image/heic"}

EXT_BY_TYPE = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
    "image/heic": "heic",
}


@dataclass
class PhotoUpload:
    filename: str
    content_type: str
    data: bytes


def photo_extension(photo: PhotoUpload) -> str:
    # taken from the validated content type, never from the client filename
    return EXT_BY_TYPE[photo.content_type]


def photo_key(profile_id: str, timestamp_ms: int, index: int, ext: str) -> str:
    return f"{profile_id}/{timestamp_ms}-{index}.{ext}"


def validate_photos(photos: List[PhotoUpload], max_photos: int) -> None:
    if len(photos) > max_photos:
        raise ValidationFailed(f"Maximum {max_photos} photos allowed", field="photos")
    for p in photos:
        if p.content_type not in ALLOWED:
            raise ValidationFailed("Only image files are allowed", field="photos")


class PhotoStorage:
    """
    Stores report photos under UPLOAD_DIR and hands back public URLs.
    The directory is served by the app at /uploads.
    """

    def __init__(self, settings: Settings):
        self.root = Path(settings.upload_dir)
        self.public_base = (settings.public_base_url or "").strip().rstrip("/")

    def public_url(self, key: str) -> str:
        return f"{self.public_base}/uploads/{key}"

    def _write(self, key: str, data: bytes) -> None:
        out_path = self.root / key
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_bytes(data)

    def delete(self, key: str) -> None:
        try:
            (self.root / key).unlink()
        except FileNotFoundError:
            pass

    def delete_all(self, keys: List[str]) -> None:
        for key in keys:
            self.delete(key)

    def upload_all(self, profile_id: str, photos: List[PhotoUpload]) -> List[str]:
        """
        Store every photo or none of them. Returns the stored keys in upload
        order; `public_url` turns them into links.
        """
        timestamp_ms = int(time.time() * 1000)
        stored: List[str] = []
        try:
            for index, photo in enumerate(photos):
                key = photo_key(profile_id, timestamp_ms, index, photo_extension(photo))
                self._write(key, photo.data)
                stored.append(key)
        except OSError as exc:
            logger.error("Photo upload failed for profile %s: %s", profile_id, exc)
            self.delete_all(stored)
            raise UploadFailed("Failed to upload photos. Please try again.") from exc

        logger.info("Stored %d photo(s) for profile %s", len(stored), profile_id)
        return stored
