# vms/services/photo_service.py
"""
Photo store — writes visitor photos to PHOTO_DIR as opaque bytes.

Saves to:  {PHOTO_DIR}/visitor_{timestamp}_{token}{ext}
The returned file name is what gets stored on Visitor.photo_path.
Photos are written before any DB transaction starts so no lock is held
while bytes are transferred.
"""

import os
import re
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, Optional

from vms.config import settings
from vms.exceptions import StorageError, ValidationError
from vms.utils.logger import get_logger

logger = get_logger(__name__)

_EXT_RE = re.compile(r"^\.[A-Za-z0-9]{1,5}$")


@dataclass
class PhotoUpload:
    content: bytes
    filename: Optional[str] = None


class PhotoStore:
    def __init__(self, root: str = settings.PHOTO_DIR, max_bytes: int = settings.PHOTO_MAX_BYTES):
        self.root = root
        self.max_bytes = max_bytes

    def read_upload(self, stream: BinaryIO, filename: Optional[str] = None) -> PhotoUpload:
        """
        Read an uploaded file, stopping one byte past the size limit so an
        oversized upload is rejected without being held in memory.
        """
        content = stream.read(self.max_bytes + 1)
        if len(content) > self.max_bytes:
            raise ValidationError(f"Photo exceeds the {self.max_bytes} byte limit")
        return PhotoUpload(content=content, filename=filename)

    def save(self, photo: Optional[PhotoUpload]) -> Optional[str]:
        """
        Persist the photo and return its file name.
        Returns None when no photo (or an empty one) was attached.
        """
        if photo is None or not photo.content:
            return None
        if len(photo.content) > self.max_bytes:
            raise ValidationError(f"Photo is {len(photo.content)} bytes, limit is {self.max_bytes}")

        ext = os.path.splitext(photo.filename or "")[1].lower()
        if not _EXT_RE.match(ext):
            ext = ".bin"
        timestamp = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
        name = f"visitor_{timestamp}_{uuid.uuid4().hex[:12]}{ext}"

        try:
            os.makedirs(self.root, exist_ok=True)
            with open(self.path_for(name), "wb") as f:
                f.write(photo.content)
        except OSError as e:
            logger.error(f"[PHOTO] Failed to write {name}: {e}")
            raise StorageError(f"Could not store photo: {e.strerror or e}") from e

        logger.info(f"[PHOTO] Saved {name} ({len(photo.content)} bytes)")
        return name

    def discard(self, name: Optional[str]) -> None:
        """Remove a photo written for a registration that was rolled back."""
        if not name:
            return
        try:
            os.remove(self.path_for(name))
            logger.info(f"[PHOTO] Discarded {name}")
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"[PHOTO] Could not discard {name}: {e}")

    def path_for(self, name: str) -> str:
        return os.path.join(self.root, os.path.basename(name))

    def is_writable(self) -> bool:
        os.makedirs(self.root, exist_ok=True)
        return os.access(self.root, os.W_OK)
