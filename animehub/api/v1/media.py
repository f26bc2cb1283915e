from fastapi import APIRouter, File, HTTPException, UploadFile

from animehub.api.v1.schemas import MediaUploadRead
from animehub.core.settings import settings
from animehub.services.storage import LocalMediaStore


router = APIRouter(prefix="/media", tags=["media"])

_ALLOWED_IMAGE_TYPES = {"image/png", "image/jpeg", "image/jpg", "image/webp", "image/gif"}


@router.post("/images", response_model=MediaUploadRead, status_code=201)
async def upload_image(file: UploadFile = File(...)):
    mime_type = (file.content_type or "").lower()
    if mime_type not in _ALLOWED_IMAGE_TYPES:
        raise HTTPException(status_code=415, detail="unsupported image type")

    file_bytes = await file.read()
    if not file_bytes:
        raise HTTPException(status_code=400, detail="empty upload")

    store = LocalMediaStore(root_dir=settings.media_root, url_prefix=settings.media_url_prefix)
    _, image_url = store.save_image_bytes(file_bytes, mime_type)
    return MediaUploadRead(image_url=image_url)
