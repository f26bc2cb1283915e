import logging
import os
import uuid

logger = logging.getLogger(__name__)


def _ext_from_mime(mime_type: str) -> str:
    mime = (mime_type or "").lower()
    if mime == "image/png":
        return ".png"
    if mime in {"image/jpeg", "image/jpg"}:
        return ".jpg"
    if mime == "image/webp":
        return ".webp"
    if mime == "image/gif":
        return ".gif"
    return ".bin"


class LocalMediaStore:
    """Writes uploaded gallery files to disk and hands back their public URL."""

    def __init__(self, root_dir: str, url_prefix: str):
        self.root_dir = root_dir
        self.url_prefix = url_prefix.rstrip("/")

    def save_image_bytes(self, image_bytes: bytes, mime_type: str, folder: str = "gallery") -> tuple[str, str]:
        target_dir = os.path.join(self.root_dir, folder)
        os.makedirs(target_dir, exist_ok=True)

        filename = f"{uuid.uuid4()}{_ext_from_mime(mime_type)}"
        file_path = os.path.join(target_dir, filename)

        with open(file_path, "wb") as f:
            f.write(image_bytes)

        url = f"{self.url_prefix}/{folder}/{filename}"
        logger.info("media_saved", extra={"url": url, "size_bytes": len(image_bytes)})
        return file_path, url
